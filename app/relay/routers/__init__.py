"""
Routers package for FastAPI endpoints.

Organized by domain:
- extract: Document extraction relay and health check
- pages: Static landing page
"""

from . import extract, pages

__all__ = ["extract", "pages"]
