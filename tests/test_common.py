"""Tests for common utilities."""

import json
import logging

import pytest
from grue.common.validators import is_valid_url, is_valid_short_code, MAX_URL_LENGTH
from grue.common.headers import extract_forwarded_headers, build_base_url, DEFAULT_BASE_URL
from grue.common.url_builder import build_short_url
from grue.common.logging_config import JSONFormatter, setup_logging, get_logger


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        """Test valid URL validation."""
        valid, _ = is_valid_url("https://example.com")
        assert valid

        valid, _ = is_valid_url("http://example.com/path")
        assert valid

        valid, _ = is_valid_url("https://sub.example.com:8080/path?query=value#frag")
        assert valid

    def test_invalid_urls(self):
        """Test invalid URL validation."""
        valid, error = is_valid_url("")
        assert not valid
        assert "required" in error.lower()

        valid, error = is_valid_url("not-a-url")
        assert not valid

        valid, error = is_valid_url("ftp://example.com")
        assert not valid
        assert "http" in error.lower()

        valid, error = is_valid_url("https://")
        assert not valid
        assert "domain" in error.lower()

    def test_whitespace_rejected(self):
        """Test URLs containing whitespace are rejected rather than trimmed."""
        valid, _ = is_valid_url(" https://example.com")
        assert not valid

        valid, _ = is_valid_url("https://exa mple.com")
        assert not valid

    def test_bad_port_rejected(self):
        """Test out-of-range ports are rejected."""
        valid, _ = is_valid_url("https://example.com:99999/")
        assert not valid

    def test_too_long(self):
        """Test URL length limit."""
        url = "https://example.com/" + "a" * MAX_URL_LENGTH
        valid, error = is_valid_url(url)
        assert not valid
        assert "too long" in error.lower()

    def test_valid_short_codes(self):
        """Test valid short code validation."""
        valid, _ = is_valid_short_code("abc12")
        assert valid

        valid, _ = is_valid_short_code("te-st")
        assert valid

        valid, _ = is_valid_short_code("te_st")
        assert valid

        valid, _ = is_valid_short_code("abcdefg", length=7)
        assert valid

    def test_invalid_short_codes(self):
        """Test invalid short code validation."""
        valid, error = is_valid_short_code("abc")
        assert not valid
        assert "exactly 5" in error.lower()

        valid, error = is_valid_short_code("abcdef")
        assert not valid

        valid, error = is_valid_short_code("ab@12")
        assert not valid

        valid, error = is_valid_short_code("")
        assert not valid
        assert "required" in error.lower()


class TestHeaders:
    """Test header utilities."""

    def test_extract_forwarded_headers(self):
        """Test extracting forwarded headers (case-insensitive)."""
        headers = {
            "X-Forwarded-Proto": "https",
            "x-forwarded-host": "grue.link",
            "X-Forwarded-For": "203.0.113.7",
        }

        forwarded = extract_forwarded_headers(headers)

        assert forwarded["forwarded_proto"] == "https"
        assert forwarded["forwarded_host"] == "grue.link"
        assert forwarded["forwarded_for"] == "203.0.113.7"

    def test_forwarded_first_hop(self):
        """Test only the client-facing value of a proxy chain is used."""
        forwarded = extract_forwarded_headers({
            "X-Forwarded-For": "203.0.113.7, 10.0.0.2",
            "X-Forwarded-Host": "grue.link, internal.lb",
        })

        assert forwarded["forwarded_for"] == "203.0.113.7"
        assert forwarded["forwarded_host"] == "grue.link"
        assert forwarded["forwarded_proto"] is None

    def test_build_base_url_configured(self):
        """Test configured base URL wins."""
        base_url = build_base_url(
            headers={"x-forwarded-proto": "https", "x-forwarded-host": "proxy.example"},
            configured_base_url="https://grue.link/",
            request_scheme="http",
            request_host="localhost:3000",
        )

        assert base_url == "https://grue.link"

    def test_build_base_url_forwarded(self):
        """Test forwarded headers beat the request host."""
        base_url = build_base_url(
            headers={"x-forwarded-proto": "https", "x-forwarded-host": "proxy.example"},
            request_scheme="http",
            request_host="localhost:3000",
        )

        assert base_url == "https://proxy.example"

    def test_build_base_url_request(self):
        """Test falling back to the request scheme and host."""
        base_url = build_base_url(
            headers={},
            request_scheme="http",
            request_host="localhost:3000",
        )

        assert base_url == "http://localhost:3000"

    def test_build_base_url_default(self):
        """Test default when nothing is known."""
        assert build_base_url(headers={}) == DEFAULT_BASE_URL


class TestURLBuilder:
    """Test URL building."""

    def test_build_short_url(self):
        """Test short URL building."""
        assert build_short_url("abc12", "https://grue.link") == "https://grue.link/abc12"

    def test_build_short_url_trailing_slash(self):
        """Test trailing slash on the base URL is not doubled."""
        assert build_short_url("abc12", "https://grue.link/") == "https://grue.link/abc12"


class TestLogging:
    """Test logging setup."""

    def test_setup_logging_level(self):
        """Test level and handler configuration."""
        logger = setup_logging(level="warning")

        assert logger.name == "grue"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_module_loggers_propagate(self):
        """Test module loggers live under the package logger."""
        setup_logging(level="DEBUG")

        assert get_logger("grue.service").parent is get_logger()

    def test_json_formatter(self):
        """Test JSON log lines."""
        record = logging.LogRecord("grue.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)

        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "grue.test"
