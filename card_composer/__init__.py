"""
Agent Card Composer
===================

HTTP service that places a submitted photo and six uppercase text fields
onto a fixed ID-card template and returns the result as a JPEG.

Modules:
    - core: settings, logging and error types
    - models: layout table and request/response schemas
    - services: text rendering, photo processing and compositing
    - routes: FastAPI routers (/compose, /healthz)
"""

__version__ = "0.1.0"
