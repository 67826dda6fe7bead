"""Core business logic for Grue."""

from .shortcode import ShortCodeGenerator
from .service import LinkService, ShortenResult
from .sweeper import ExpirySweeper, SweepResult
from .expiry import ExpiryPolicy

__all__ = [
    "ShortCodeGenerator",
    "LinkService",
    "ShortenResult",
    "ExpirySweeper",
    "SweepResult",
    "ExpiryPolicy",
]
