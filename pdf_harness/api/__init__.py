"""
FastAPI REST Endpoints
======================

HTTP access to the PDF generation adapters.

Endpoints:
- GET /health: Process health and runtime information
- GET /health/renderers: End-to-end probe of every browser engine
- GET /libraries: Registered libraries
- POST /generate: Generate a PDF with one library
- POST /generate-all: Run every library and summarize
"""
