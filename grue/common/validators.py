"""Validation utilities for Grue."""

import re
from urllib.parse import urlparse
from typing import Tuple

from grue.shortcode import ShortCodeGenerator


MAX_URL_LENGTH = 2048

_WHITESPACE_RE = re.compile(r"\s")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a long URL.

    The URL must be absolute, use http or https and name a host. No
    normalization is applied; the caller stores the string as given.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if _WHITESPACE_RE.search(url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        # Check if a host exists
        if not result.netloc or not result.hostname:
            return False, "URL must have a valid domain"

        # Accessing the port validates it
        result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_short_code(short_code: str, length: int = 5) -> Tuple[bool, str]:
    """Validate a short code taken from a request path.

    Args:
        short_code: The short code to validate
        length: Expected code length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) != length:
        return False, f"Short code must be exactly {length} characters"

    if not ShortCodeGenerator.is_valid_format(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    return True, ""
