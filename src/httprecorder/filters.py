"""Filters applied to a captured entry before it is stored.

A filter receives the :class:`~httprecorder.model.Entry` and mutates it in
place. Filters run in registration order after the live call, so they shape
both what is written to disk and what the caller receives.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

from .model import Entry

Filter = Callable[[Entry], None]

SECRET_PATTERNS = (
    re.compile(r"(?i)(api[_-]?key|token|password)\s*[:=]\s*[^\s&\"',}]+"),
    re.compile(r"AKIA[0-9A-Z]{16}"),
    re.compile(r"(?i)secret[^\s]{6,}"),
)


def apply_filters(entry: Entry, filters: Iterable[Filter]) -> Entry:
    """Run filters left-to-right over ``entry``."""

    for apply in filters:
        apply(entry)
    return entry


def remove_request_header(name: str) -> Filter:
    """Remove the request header ``name``. The name is case-sensitive."""

    def _remove(entry: Entry) -> None:
        entry.request.headers.pop(name, None)

    return _remove


def remove_response_header(name: str) -> Filter:
    """Remove the response header ``name``. The name is case-sensitive."""

    def _remove(entry: Entry) -> None:
        entry.response.headers.pop(name, None)

    return _remove


def redact_secrets() -> Filter:
    """Mask API keys, tokens and passwords in request and response bodies."""

    def _redact(entry: Entry) -> None:
        entry.request.body = redact_text(entry.request.body)
        entry.response.body = redact_text(entry.response.body)

    return _redact


def redact_text(value: str) -> str:
    """Mask secrets in a single text value."""

    redacted = value
    for pattern in SECRET_PATTERNS:
        redacted = pattern.sub(lambda match: _mask(match.group(0)), redacted)
    return redacted


def _mask(value: str) -> str:
    if ":" in value:
        key, _, _ = value.partition(":")
        return f"{key}: ***"
    if "=" in value:
        key, _, _ = value.partition("=")
        return f"{key}=***"
    return "***"
