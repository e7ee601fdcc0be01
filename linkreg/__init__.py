"""Core logic for the link registry."""

from .shortcode import ShortCodeGenerator
from .registry import LinkRegistry

__all__ = ["ShortCodeGenerator", "LinkRegistry"]
