"""Recorder modes."""

from __future__ import annotations

from enum import Enum
from typing import Union

from .exceptions import ConfigurationError


class Mode(Enum):
    """Controls whether live calls are made and whether they are persisted."""

    AUTO = "auto"
    REPLAY_ONLY = "replay_only"
    RECORD = "record"
    PASSTHROUGH = "passthrough"


def coerce_mode(value: Union[Mode, str]) -> Mode:
    """Return ``value`` as a :class:`Mode` or raise :class:`ConfigurationError`."""

    if isinstance(value, Mode):
        return value
    if isinstance(value, str):
        try:
            return Mode(value.lower())
        except ValueError:
            pass
    raise ConfigurationError(f"unsupported recorder mode: {value!r}")
