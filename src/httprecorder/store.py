"""Storage helpers for recorded entries.

A backing file holds one YAML document per entry::

    # request 0
    # timestamp 2024-01-01 12:00:00 +0000 UTC
    # roundtrip 12ms
    request:
      method: GET
      url: http://example.com/
    response:
      status_code: 200
      body: hello

    ---

    # request 1
    ...

The comment block is informational and never read back.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import fastjsonschema
import portalocker
import yaml

from .exceptions import SchemaError
from .model import Entry, Request, Response

logger = logging.getLogger(__name__)

FILE_SUFFIX = ".yml"
DOCUMENT_SEPARATOR = "\n---\n"

_HEADERS_SCHEMA = {
    "type": "object",
    "additionalProperties": {"type": "string"},
}

_ENTRY_SCHEMA = {
    "type": "object",
    "required": ["request", "response"],
    "properties": {
        "request": {
            "type": "object",
            "required": ["method", "url"],
            "properties": {
                "method": {"type": "string"},
                "url": {"type": "string"},
                "headers": _HEADERS_SCHEMA,
                "body": {"type": "string"},
            },
            "additionalProperties": False,
        },
        "response": {
            "type": "object",
            "required": ["status_code"],
            "properties": {
                "status_code": {"type": "integer"},
                "headers": _HEADERS_SCHEMA,
                "body": {"type": "string"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}

_VALIDATE = fastjsonschema.compile(_ENTRY_SCHEMA)


def normalize_filename(path: Union[str, Path]) -> Path:
    """Append the ``.yml`` suffix unless ``path`` already ends with it."""

    text = str(path)
    if not text.endswith(FILE_SUFFIX):
        text += FILE_SUFFIX
    return Path(text)


# ---------------------------------------------------------------- serializer
def encode_entry(entry: Entry) -> str:
    """Serialize ``entry`` to one YAML document."""

    request: Dict[str, Any] = {"method": entry.request.method, "url": entry.request.url}
    if entry.request.headers:
        request["headers"] = dict(sorted(entry.request.headers.items()))
    if entry.request.body:
        request["body"] = entry.request.body

    response: Dict[str, Any] = {"status_code": entry.response.status_code}
    if entry.response.headers:
        response["headers"] = dict(sorted(entry.response.headers.items()))
    if entry.response.body:
        response["body"] = entry.response.body

    return yaml.safe_dump(
        {"request": request, "response": response},
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def decode_entry(text: str) -> Entry:
    """Parse one YAML document into an :class:`Entry`.

    Raises ``yaml.YAMLError`` or ``fastjsonschema.JsonSchemaException`` when
    the document is malformed.
    """

    data = yaml.safe_load(text)
    _VALIDATE(data)
    req = data["request"]
    resp = data["response"]
    return Entry(
        request=Request(
            method=req["method"],
            url=req["url"],
            headers=dict(req.get("headers") or {}),
            body=req.get("body", ""),
        ),
        response=Response(
            status_code=resp["status_code"],
            headers=dict(resp.get("headers") or {}),
            body=resp.get("body", ""),
        ),
    )


def format_header(index: int, started_at: datetime, duration: float) -> str:
    """Build the comment block written above each document."""

    stamp = started_at.astimezone(timezone.utc).replace(microsecond=0)
    return (
        f"# request {index}\n"
        f"# timestamp {stamp.strftime('%Y-%m-%d %H:%M:%S +0000 UTC')}\n"
        f"# roundtrip {_format_duration(duration)}\n"
    )


def _format_duration(seconds: float) -> str:
    millis = int(round(seconds * 1000))
    if millis < 1000:
        return f"{millis}ms"
    return f"{millis / 1000:.3f}s"


class EntryStore:
    """Reads and writes the backing file of one recorder."""

    def __init__(self, filename: Union[str, Path], lock_timeout: Optional[float] = 5) -> None:
        self.path = normalize_filename(filename)
        self.lock_timeout = lock_timeout

    # ------------------------------------------------------------------ loading
    def load(self) -> List[Entry]:
        """Return every entry in the file, in file order.

        A missing or blank file yields no entries. Any malformed document
        fails the whole load.
        """

        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"No recording at {self.path}")
            return []
        if not raw.strip():
            return []

        entries: List[Entry] = []
        for index, chunk in enumerate(raw.split(DOCUMENT_SEPARATOR)):
            try:
                entries.append(decode_entry(chunk))
            except (yaml.YAMLError, fastjsonschema.JsonSchemaException) as exc:
                raise SchemaError(f"Failed to load entry {index} from {self.path}: {exc}") from exc
        logger.info(f"Loaded {len(entries)} entries from {self.path}")
        return entries

    # ---------------------------------------------------------------- writing
    def write(self, entry: Entry, index: int, started_at: datetime, duration: float) -> None:
        """Persist ``entry`` as document ``index``.

        Document 0 truncates the file, later documents are appended after a
        separator.
        """

        self.path.parent.mkdir(parents=True, exist_ok=True)
        mode = "w" if index == 0 else "a"
        with portalocker.Lock(self.path, mode, timeout=self.lock_timeout, encoding="utf-8") as handle:
            if index > 0:
                handle.write(DOCUMENT_SEPARATOR + "\n")
            handle.write(format_header(index, started_at, duration))
            handle.write(encode_entry(entry))
        logger.debug(f"Wrote entry {index} to {self.path}")
