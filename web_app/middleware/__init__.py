"""Middleware for the Grue web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
