"""
Core Business Logic
==================

Error taxonomy, rendering and benchmarking.

Modules:
- errors: Exception hierarchy shared by every layer
- rendering: Session management, templates, engines and adapters
- benchmark: Repeated runs, statistics and rankings
"""
