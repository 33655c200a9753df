"""Middleware module for quality inspection API."""

from .logging import RequestResponseLoggingMiddleware

__all__ = [
    "RequestResponseLoggingMiddleware"
]
