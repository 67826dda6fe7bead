"""URL building utilities for Grue."""


def build_short_url(short_code: str, base_url: str) -> str:
    """Build complete short URL.

    Args:
        short_code: The short code
        base_url: Public domain prefix (e.g., https://grue.link)

    Returns:
        Complete short URL
    """
    return f"{base_url.rstrip('/')}/{short_code}"
