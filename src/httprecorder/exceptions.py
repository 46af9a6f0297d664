"""Exceptions raised by the recorder."""

from __future__ import annotations

from typing import Optional

import httpx


class RecorderError(RuntimeError):
    """Base error for recorder related failures."""


class ConfigurationError(RecorderError):
    """Raised when the recorder is constructed or driven with invalid settings."""


class NoRequestError(RecorderError):
    """Raised in replay-only mode when no recorded entry matches the request."""

    def __init__(self, request: httpx.Request, message: Optional[str] = None) -> None:
        self.request = request
        super().__init__(message or f"no recorded entry for {request.method} {request.url}")


class SchemaError(RecorderError):
    """Raised when a backing file contains a malformed document."""
