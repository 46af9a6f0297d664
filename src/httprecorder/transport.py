"""Record/replay transport for httpx."""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Union

import httpx

from .exceptions import ConfigurationError, NoRequestError
from .filters import Filter, apply_filters
from .matchers import Selector, as_selector, first_match
from .model import Entry, Request, Response, decode_body, encode_body, flatten_headers
from .modes import Mode, coerce_mode
from .store import EntryStore

logger = logging.getLogger(__name__)


class Recorder(httpx.BaseTransport):
    """Wraps an httpx transport, recording requests that go through it.

    The behaviour depends on ``mode``:

    * ``AUTO``: replay a recorded entry when one matches, otherwise perform
      the request and save it.
    * ``REPLAY_ONLY``: only replay. A miss raises :class:`NoRequestError`.
    * ``RECORD``: always perform the request and save it.
    * ``PASSTHROUGH``: perform the request without touching the disk. The
      entry is still kept in memory and can be found with :meth:`lookup`.

    Entries are saved after each response. The first write from a recorder
    truncates the file, later writes append to it.

    Several recorders must not write to the same file at the same time.
    """

    def __init__(
        self,
        filename: Optional[Union[str, Path]] = None,
        mode: Union[Mode, str] = Mode.AUTO,
        filters: Iterable[Filter] = (),
        transport: Optional[httpx.BaseTransport] = None,
        selector=None,
        *,
        lock_timeout: Optional[float] = 5,
    ) -> None:
        self.mode = coerce_mode(mode)
        if filename is None and self.mode is not Mode.PASSTHROUGH:
            raise ConfigurationError(f"filename is required in {self.mode.value} mode")
        self.filters: List[Filter] = list(filters)
        self.transport = transport or httpx.HTTPTransport()
        self.selector: Selector = as_selector(selector)
        self.store = EntryStore(filename, lock_timeout=lock_timeout) if filename is not None else None

        self._entries: List[Entry] = []
        self._index = 0
        self._loaded = False
        self._load_lock = threading.Lock()
        self._write_lock = threading.Lock()

    @property
    def filename(self) -> Optional[Path]:
        return self.store.path if self.store else None

    @property
    def entries(self) -> List[Entry]:
        """Snapshot of the entries known to this recorder, in insertion order."""

        return list(self._entries)

    # ------------------------------------------------------------------ loading
    def _ensure_loaded(self, mode: Mode) -> None:
        if self._loaded:
            return
        with self._load_lock:
            if self._loaded:
                return
            if mode is not Mode.PASSTHROUGH and self.store is not None:
                self._entries.extend(self.store.load())
            self._loaded = True

    # ---------------------------------------------------------------- transport
    def handle_request(self, request: httpx.Request) -> httpx.Response:
        mode = coerce_mode(self.mode)
        self._ensure_loaded(mode)

        if mode in (Mode.AUTO, Mode.REPLAY_ONLY):
            entry = self.selector.select(self._entries, request)
            if entry is not None:
                logger.debug(f"Replaying {request.method} {request.url}")
                return _build_response(entry.response, request)
            if mode is Mode.REPLAY_ONLY:
                raise NoRequestError(request)

        body = request.read()
        recorded_request = Request(
            method=request.method,
            url=str(request.url),
            headers=_header_map(request.headers),
            body=decode_body(body),
        )

        started_at = datetime.now(timezone.utc)
        start = time.monotonic()
        live = self.transport.handle_request(request)
        try:
            content = live.read()
        finally:
            live.close()
        duration = time.monotonic() - start
        logger.debug(f"Live {request.method} {request.url} -> {live.status_code} in {duration:.3f}s")

        dropped = {"transfer-encoding"}
        if "content-encoding" in live.headers:
            # The stored body is already decoded.
            dropped.update(("content-encoding", "content-length"))
        headers = {
            name: value for name, value in _header_map(live.headers).items() if name.lower() not in dropped
        }
        entry = Entry(
            request=recorded_request,
            response=Response(status_code=live.status_code, headers=headers, body=decode_body(content)),
        )
        apply_filters(entry, self.filters)
        response = _build_response(entry.response, request)

        with self._write_lock:
            self._entries.append(entry)
            if mode in (Mode.AUTO, Mode.RECORD):
                if self.store is None:
                    raise ConfigurationError(f"filename is required in {mode.value} mode")
                self.store.write(entry, self._index, started_at, duration)
                self._index += 1

        return response

    def lookup(self, method: str, url: str) -> Optional[Entry]:
        """Return the first entry recorded for ``method`` and ``url``.

        Matching is case-insensitive and ignores the configured selector.
        """

        self._ensure_loaded(coerce_mode(self.mode))
        return first_match(self._entries, method, url)

    def close(self) -> None:
        self.transport.close()


def _header_map(headers: httpx.Headers) -> dict:
    return flatten_headers(
        (name.decode(headers.encoding), value.decode(headers.encoding)) for name, value in headers.raw
    )


def _build_response(recorded: Response, request: httpx.Request) -> httpx.Response:
    content = encode_body(recorded.body)
    headers = httpx.Headers(recorded.headers)
    headers["Content-Length"] = str(len(content))
    return httpx.Response(
        status_code=recorded.status_code,
        headers=headers,
        content=content,
        request=request,
    )
