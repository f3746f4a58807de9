"""
Rendering Module
===============

PDF generation through browser engines and in-process writers.

Components:
- engines: Playwright and pyppeteer drivers
- session: Shared browser session and bounded rendering contexts
- template_resolver: Prescription markup and asset loading
- adapters: One adapter per registered library
- registry: AdapterId to adapter mapping
- runtime: Composition root owned by the API and CLI
"""
