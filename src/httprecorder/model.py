"""Dataclasses describing a recorded request/response pair."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple


@dataclass
class Request:
    """A recorded outgoing request.

    Headers are flattened to a single value per name. Requests with repeated
    headers keep only the first value.
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass
class Response:
    """A recorded incoming response."""

    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass
class Entry:
    """One recorded request/response pair."""

    request: Request
    response: Response

    def matches(self, method: str, url: str) -> bool:
        """Case-insensitive comparison on method and URL."""

        return (
            self.request.method.casefold() == method.casefold()
            and self.request.url.casefold() == url.casefold()
        )


def flatten_headers(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Collapse ``(name, value)`` pairs to a mapping keeping the first value."""

    out: Dict[str, str] = {}
    for name, value in pairs:
        out.setdefault(name, value)
    return out


def decode_body(data: bytes) -> str:
    """Decode body bytes to text; bytes that are not UTF-8 survive as surrogates."""

    return data.decode("utf-8", "surrogateescape")


def encode_body(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")
