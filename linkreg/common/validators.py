"""Validation utilities for the link registry."""

from urllib.parse import urlparse
from typing import Tuple

from ..shortcode import CODE_MIN_LENGTH, CODE_MAX_LENGTH, ShortCodeGenerator


MAX_URL_LENGTH = 2048


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a target URL.

    The URL must be absolute: a scheme and a host are both required.
    Any scheme is accepted.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)

        if not result.scheme:
            return False, "URL must include a scheme (e.g. https://)"

        if not result.hostname:
            return False, "URL must have a valid host"

        # Raises ValueError for a non-numeric or out-of-range port
        result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_short_code(short_code: str) -> Tuple[bool, str]:
    """Validate a caller-supplied short code.

    Args:
        short_code: The short code to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if not ShortCodeGenerator.is_valid_format(short_code):
        return False, (
            f"Short code must be {CODE_MIN_LENGTH}-{CODE_MAX_LENGTH} "
            "alphanumeric characters"
        )

    return True, ""
