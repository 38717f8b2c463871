"""Middleware for URL shortener web app."""

from .client_context import ClientContextMiddleware
from .logging import LoggingMiddleware

__all__ = ["ClientContextMiddleware", "LoggingMiddleware"]
