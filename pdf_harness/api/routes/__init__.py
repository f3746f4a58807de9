"""
API Routes
==========

Health and generation routers mounted by the application factory.
"""
