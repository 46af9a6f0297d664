"""
httprecorder: record and replay HTTP traffic for tests
"""

from .exceptions import ConfigurationError, NoRequestError, RecorderError, SchemaError
from .filters import Filter, apply_filters, redact_secrets, remove_request_header, remove_response_header
from .matchers import FirstMatch, OncePerCall, Selector, SelectorFunc
from .model import Entry, Request, Response
from .modes import Mode
from .store import EntryStore, decode_entry, encode_entry
from .testing import recording_client
from .transport import Recorder

__version__ = "0.1.0"
__all__ = [
    "Recorder",
    "Mode",
    "Entry",
    "Request",
    "Response",
    "Filter",
    "apply_filters",
    "remove_request_header",
    "remove_response_header",
    "redact_secrets",
    "Selector",
    "FirstMatch",
    "OncePerCall",
    "SelectorFunc",
    "EntryStore",
    "encode_entry",
    "decode_entry",
    "recording_client",
    "RecorderError",
    "ConfigurationError",
    "NoRequestError",
    "SchemaError",
]
