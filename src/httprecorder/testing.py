"""Helpers for using the recorder from test suites."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple, Union

import httpx

from .filters import Filter
from .modes import Mode
from .transport import Recorder


@contextmanager
def recording_client(
    filename: Optional[Union[str, Path]],
    mode: Union[Mode, str] = Mode.AUTO,
    filters: Iterable[Filter] = (),
    transport: Optional[httpx.BaseTransport] = None,
    selector=None,
    **client_kwargs,
) -> Iterator[Tuple[httpx.Client, Recorder]]:
    """
    Yield an ``httpx.Client`` routed through a fresh :class:`Recorder`

    Example:
        with recording_client("testdata/users", mode="replay_only") as (client, rec):
            client.get("https://api.example.com/users/1")
            assert rec.lookup("GET", "https://api.example.com/users/1")
    """
    recorder = Recorder(filename, mode=mode, filters=filters, transport=transport, selector=selector)
    client = httpx.Client(transport=recorder, **client_kwargs)
    try:
        yield client, recorder
    finally:
        client.close()
