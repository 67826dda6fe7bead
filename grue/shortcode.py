"""Short code generation utilities."""

import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate short codes for links."""

    # URL-safe alphabet (64 symbols, same set as nanoid)
    URL_SAFE_CHARS = string.ascii_letters + string.digits + "_-"

    def __init__(self, default_length: int = 5):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if default_length < 1:
            raise ValueError("Short code length must be positive")
        self.default_length = default_length

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Uses the operating system's cryptographically strong source, so codes
        are not predictable from previously issued ones. Uniqueness is not
        guaranteed here; the store rejects duplicates on insert.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.URL_SAFE_CHARS) for _ in range(length))

    def keyspace(self, length: Optional[int] = None) -> int:
        """Number of distinct codes of the given length."""
        length = length or self.default_length
        return len(self.URL_SAFE_CHARS) ** length

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code only uses URL-safe characters.

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return bool(code) and all(c in ShortCodeGenerator.URL_SAFE_CHARS for c in code)
