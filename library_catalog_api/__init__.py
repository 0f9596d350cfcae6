"""
Top-level package for the Library Catalog API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``library_catalog_api.app.main:app``.
"""

__all__ = []
