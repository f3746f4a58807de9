"""
Shared Utilities
===============

Common helpers used by the CLI and the rendering runtime.

Modules:
- file_utils: Output directory cleanup and JSON report persistence
"""
