"""Proxy header handling for building public short links."""

from typing import Mapping, Dict, Optional


DEFAULT_BASE_URL = "http://localhost"

FORWARDED_HEADERS = {
    "forwarded_proto": "x-forwarded-proto",
    "forwarded_host": "x-forwarded-host",
    "forwarded_for": "x-forwarded-for",
}


def _first_hop(value: Optional[str]) -> Optional[str]:
    # Proxy chains append comma-separated values; the client-facing one is first
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


def extract_forwarded_headers(headers: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Read X-Forwarded-Proto/Host/For, case-insensitively.

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
        (None when a header is absent)
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    return {key: _first_hop(lowered.get(header)) for key, header in FORWARDED_HEADERS.items()}


def build_base_url(
    headers: Mapping[str, str],
    configured_base_url: Optional[str] = None,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build the public domain prefix for short links.

    Priority:
    1. Configured base URL (BASE_URL)
    2. X-Forwarded-Proto + X-Forwarded-Host
    3. Request scheme + host
    4. http://localhost

    Returns:
        Base URL without trailing slash (e.g., https://grue.link)
    """
    if configured_base_url:
        return configured_base_url.rstrip("/")

    forwarded = extract_forwarded_headers(headers)
    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        return f"{forwarded['forwarded_proto']}://{forwarded['forwarded_host']}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return DEFAULT_BASE_URL
