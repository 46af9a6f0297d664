"""Selection strategies deciding which recorded entry answers a request."""

from __future__ import annotations

import threading
from typing import Callable, List, Optional, Protocol, Sequence, Set

import httpx

from .exceptions import ConfigurationError
from .model import Entry

SelectFunc = Callable[[Sequence[Entry], httpx.Request], Optional[Entry]]


class Selector(Protocol):
    """Chooses a recorded entry to respond to a given request."""

    def select(self, entries: Sequence[Entry], request: httpx.Request) -> Optional[Entry]:
        ...


def first_match(entries: Sequence[Entry], method: str, url: str) -> Optional[Entry]:
    """Return the first entry recorded for ``method`` and ``url``."""

    for entry in entries:
        if entry.matches(method, url):
            return entry
    return None


class FirstMatch:
    """Default selector: first entry with a matching method and URL.

    Repeated identical requests always get the same entry.
    """

    def select(self, entries: Sequence[Entry], request: httpx.Request) -> Optional[Entry]:
        return first_match(entries, request.method, str(request.url))


class OncePerCall:
    """Selector that returns each recorded entry at most once.

    Matching follows :class:`FirstMatch`. Positions already handed out are
    skipped, so N entries recorded for the same request answer exactly N
    calls. Safe to share between threads and between recorders.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._used: Set[int] = set()

    def select(self, entries: Sequence[Entry], request: httpx.Request) -> Optional[Entry]:
        method, url = request.method, str(request.url)
        with self._lock:
            for index, entry in enumerate(entries):
                if index in self._used or not entry.matches(method, url):
                    continue
                self._used.add(index)
                return entry
        return None

    def reset(self) -> None:
        with self._lock:
            self._used.clear()

    @property
    def used(self) -> List[int]:
        with self._lock:
            return sorted(self._used)


class SelectorFunc:
    """Adapts a plain function to the :class:`Selector` protocol."""

    def __init__(self, func: SelectFunc) -> None:
        self.func = func

    def select(self, entries: Sequence[Entry], request: httpx.Request) -> Optional[Entry]:
        return self.func(entries, request)


def as_selector(selector) -> Selector:
    """Normalize ``selector`` (object, callable or ``None``) to a :class:`Selector`."""

    if selector is None:
        return FirstMatch()
    if hasattr(selector, "select"):
        return selector
    if callable(selector):
        return SelectorFunc(selector)
    raise ConfigurationError(f"selector must provide select() or be callable, got {type(selector).__name__}")
