"""Middleware for shortkey web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
