"""
Entry point ASGI.

    uvicorn identity_api.main:app --reload
"""

from .api.main import app

__all__ = ["app"]
