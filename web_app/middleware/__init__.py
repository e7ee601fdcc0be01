"""Middleware for the link registry web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
