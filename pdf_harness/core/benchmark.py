"""
Benchmarking
============

Repeated generation runs per adapter, aggregated into timing and size
statistics and ranked for comparison.
"""

from datetime import date
from typing import List, Optional, Sequence, Union

from pdf_harness.config.logging import get_logger
from pdf_harness.core.rendering.runtime import RenderingRuntime
from pdf_harness.models.schemas import (
    AdapterId,
    BenchmarkResult,
    RenderFailure,
    RenderRequest,
    RenderSuccess,
)

logger = get_logger(__name__)

DEFAULT_ITERATIONS = 5


def sample_request() -> RenderRequest:
    """Fixed sample prescription used by run-all and benchmark runs."""
    return RenderRequest(
        date=date.today().strftime("%m/%d/%Y"),
        patientName="Jane Smith",
        patientDOB="05/15/1985",
        medicationName="Amoxicillin 500mg",
        dosage="500mg",
        instructions="Take one capsule three times daily with meals",
    )


def summarize(
    library: str, results: Sequence[Union[RenderSuccess, RenderFailure]]
) -> BenchmarkResult:
    """
    Aggregate the outcomes of repeated runs of one adapter.

    Failed runs count as errors; statistics cover successful runs only.
    """
    successes = [result for result in results if isinstance(result, RenderSuccess)]
    errors = len(results) - len(successes)

    if not successes:
        return BenchmarkResult(
            library=library, success=False, errors=errors, error="All iterations failed"
        )

    times = [result.elapsed_ms for result in successes]
    sizes = [result.byte_length for result in successes]
    avg_size = sum(sizes) / len(sizes)

    return BenchmarkResult(
        library=library,
        success=True,
        iterations=len(successes),
        errors=errors,
        avg_time=round(sum(times) / len(times)),
        min_time=min(times),
        max_time=max(times),
        avg_file_size=round(avg_size),
        avg_file_size_kb=f"{avg_size / 1024:.2f}",
    )


def rank_by_time(results: Sequence[BenchmarkResult]) -> List[BenchmarkResult]:
    return sorted((r for r in results if r.success), key=lambda r: r.avg_time or 0)


def rank_by_size(results: Sequence[BenchmarkResult]) -> List[BenchmarkResult]:
    return sorted((r for r in results if r.success), key=lambda r: r.avg_file_size or 0)


async def benchmark_adapter(
    runtime: RenderingRuntime,
    adapter_id: AdapterId,
    iterations: int = DEFAULT_ITERATIONS,
    request: Optional[RenderRequest] = None,
) -> BenchmarkResult:
    """Run one adapter ``iterations`` times and summarize."""
    request = request or sample_request()
    results = [await runtime.generate(adapter_id, request) for _ in range(iterations)]
    summary = summarize(adapter_id.value, results)

    logger.info(
        "Adapter benchmarked",
        library=adapter_id.value,
        iterations=iterations,
        errors=summary.errors,
        avg_time=summary.avg_time,
    )
    return summary


async def run_benchmarks(
    runtime: RenderingRuntime,
    iterations: int = DEFAULT_ITERATIONS,
    request: Optional[RenderRequest] = None,
) -> List[BenchmarkResult]:
    """Benchmark every registered adapter in registry order."""
    if iterations < 1:
        raise ValueError("iterations must be at least 1")

    return [
        await benchmark_adapter(runtime, adapter.adapter_id, iterations, request)
        for adapter in runtime.registry
    ]
