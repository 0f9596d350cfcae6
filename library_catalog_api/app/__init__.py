"""
Application package initializer.

The catalog is organised into ``core`` (configuration, persistence,
security, events), ``schemas`` (pydantic models), ``services``
(business logic per collection) and ``api`` (the GraphQL surface).
"""

from .main import app  # noqa: F401
