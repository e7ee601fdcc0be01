"""Short code generation utilities."""

import re
import secrets
import string
from typing import Optional


CODE_MIN_LENGTH = 6
CODE_MAX_LENGTH = 8

CODE_PATTERN = re.compile(r"[A-Za-z0-9]{%d,%d}" % (CODE_MIN_LENGTH, CODE_MAX_LENGTH))


class ShortCodeGenerator:
    """Generate short codes for links."""

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    def __init__(self, default_length: int = CODE_MIN_LENGTH):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes (6-8)

        Raises:
            ValueError: If default_length is outside the allowed code lengths
        """
        if not CODE_MIN_LENGTH <= default_length <= CODE_MAX_LENGTH:
            raise ValueError(
                f"default_length must be between {CODE_MIN_LENGTH} and {CODE_MAX_LENGTH}"
            )
        self.default_length = default_length

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Each character is drawn independently and uniformly from the
        62-character alphabet.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.BASE62_CHARS) for _ in range(length))

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code has valid format (6-8 alphanumeric characters)."""
        return isinstance(code, str) and CODE_PATTERN.fullmatch(code) is not None
