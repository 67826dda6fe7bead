"""FastAPI web application for Grue."""

from .app_factory import create_app

__all__ = ["create_app"]
