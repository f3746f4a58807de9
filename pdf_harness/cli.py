#!/usr/bin/env python3
"""
PDF Harness CLI
===============

Run every adapter once, benchmark them, clean the output directory or
start the API server.
"""

import argparse
import asyncio
import platform
import sys
from typing import List, Optional

from pdf_harness.config.settings import Settings, get_settings
from pdf_harness.core.benchmark import (
    DEFAULT_ITERATIONS,
    rank_by_size,
    rank_by_time,
    run_benchmarks,
    sample_request,
)
from pdf_harness.core.rendering.runtime import RenderingRuntime
from pdf_harness.models.schemas import GenerationReport
from pdf_harness.utils.file_utils import clean_outputs, find_outputs, write_json_report


RULE = "=" * 70


async def run_all(settings: Settings) -> int:
    """Generate the sample prescription with every adapter and report."""
    print(f"\n🖥️  Environment: {sys.platform} {platform.machine()}\n")
    print("🚀 Starting PDF Generation Library Tests\n")
    print(RULE)

    runtime = RenderingRuntime.from_settings(settings)
    try:
        results = await runtime.generate_all(sample_request())
    finally:
        await runtime.shutdown()

    reports = [GenerationReport.from_result(result) for result in results]
    for report in reports:
        print(f"\n📦 {report.library}")
        if report.success:
            print(f"✅ {report.library} - Success")
            print(f"   Generation Time: {report.generation_time}ms")
            print(f"   File Size: {(report.file_size or 0) / 1024:.2f} KB")
            if report.notes:
                print(f"   Notes: {report.notes}")
        else:
            print(f"❌ {report.library} - Failed")
            print(f"   Error: {report.error}")

    successful = [report for report in reports if report.success]
    print("\n" + RULE)
    print("\n📊 Test Summary\n")
    print(f"✅ Successful: {len(successful)}/{len(reports)}")
    print(f"❌ Failed: {len(reports) - len(successful)}/{len(reports)}")

    if successful:
        print("\nPerformance Comparison (Generation Time):")
        for report in sorted(successful, key=lambda r: r.generation_time):
            print(f"  {report.library:<20} {report.generation_time:>6}ms")

    results_path = write_json_report(
        settings.output_path / "test-results.json",
        [report.model_dump(by_alias=True, exclude_none=True) for report in reports],
    )
    print(f"\n💾 Results saved to: {results_path}")
    return 0


async def benchmark(settings: Settings, iterations: int) -> int:
    """Benchmark every adapter and print the rankings."""
    print(f"🏃 Starting PDF Generation Benchmarks ({iterations} iterations per library)\n")
    print(RULE)

    runtime = RenderingRuntime.from_settings(settings)
    try:
        results = await run_benchmarks(runtime, iterations)
    finally:
        await runtime.shutdown()

    for result in results:
        if result.success:
            print(f"✅ {result.library}")
            print(
                f"   Avg Time: {result.avg_time}ms "
                f"(min: {result.min_time}ms, max: {result.max_time}ms)"
            )
            print(f"   Avg File Size: {result.avg_file_size_kb} KB")
            print(f"   Success Rate: {result.iterations}/{iterations}")
        else:
            print(f"❌ {result.library} - {result.error}")

    print("\n" + RULE)
    print("\n📊 Benchmark Summary\n")

    by_time = rank_by_time(results)
    if by_time:
        print("Performance Ranking (by average generation time):")
        for index, result in enumerate(by_time, start=1):
            print(f"  {index}. {result.library:<20} {result.avg_time:>6}ms avg")

        print("\nFile Size Comparison:")
        for index, result in enumerate(rank_by_size(results), start=1):
            print(f"  {index}. {result.library:<20} {result.avg_file_size_kb:>8} KB")

    results_path = write_json_report(
        settings.output_path / "benchmark-results.json",
        [result.model_dump(by_alias=True, exclude_none=True) for result in results],
    )
    print(f"\n💾 Benchmark results saved to: {results_path}")
    return 0


def cleanup(settings: Settings) -> int:
    """Remove generated PDFs and JSON reports from the output directory."""
    print("🧹 Cleaning up test output files")
    print("=" * 42 + "\n")

    if not find_outputs(settings.output_path):
        print("No test output files found. Nothing to clean.")
        return 0

    removed = clean_outputs(settings.output_path)
    for path in removed:
        print(f"  - {path.name}")
    print("\n✅ Cleanup complete!")
    print(f"   Removed {len(removed)} file(s)")
    return 0


def serve() -> int:
    from pdf_harness.api.main import run_development_server

    run_development_server()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-harness", description="Compare PDF generation libraries"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run-all", help="Generate the sample document with every library")

    bench = subparsers.add_parser("benchmark", help="Benchmark every library")
    bench.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"Runs per library (default: {DEFAULT_ITERATIONS})",
    )

    subparsers.add_parser("cleanup", help="Remove generated PDFs and JSON reports")
    subparsers.add_parser("serve", help="Start the HTTP API")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if args.command == "run-all":
        return asyncio.run(run_all(settings))
    if args.command == "benchmark":
        if args.iterations < 1:
            print("❌ --iterations must be at least 1")
            return 2
        return asyncio.run(benchmark(settings, args.iterations))
    if args.command == "cleanup":
        return cleanup(settings)
    return serve()


if __name__ == "__main__":
    sys.exit(main())
