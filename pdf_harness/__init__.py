"""
PDF Generation Harness
======================

A comparative evaluation harness for PDF generation approaches.

This package provides:
- A shared, bounded browser session manager for engine-backed rendering
- Uniform generation adapters over Playwright, pyppeteer, ReportLab and fpdf2
- FastAPI REST endpoints for HTTP access
- CLI commands to run, benchmark and compare every adapter
"""

__version__ = "1.0.0"
__author__ = "PDF Harness Team"
