from datetime import datetime, timezone

import fastjsonschema
import pytest
import yaml

from httprecorder.exceptions import SchemaError
from httprecorder.model import Entry, Request, Response
from httprecorder.store import (
    DOCUMENT_SEPARATOR,
    EntryStore,
    decode_entry,
    encode_entry,
    format_header,
    normalize_filename,
)


STARTED = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def _entry(url="http://x/1", body="hello") -> Entry:
    return Entry(
        request=Request(method="GET", url=url),
        response=Response(status_code=200, body=body),
    )


def test_encode_omits_empty_headers_and_bodies():
    text = encode_entry(_entry(body=""))
    assert "headers" not in text
    assert "body" not in text
    assert yaml.safe_load(text) == {
        "request": {"method": "GET", "url": "http://x/1"},
        "response": {"status_code": 200},
    }


def test_encode_decode_preserves_entry():
    entry = Entry(
        request=Request(
            method="POST",
            url="https://api.example.com/items?q=1",
            headers={"Content-Type": "application/json", "X-Count": "3"},
            body='{"name": "widget"}',
        ),
        response=Response(
            status_code=201,
            headers={"Location": "/items/7"},
            body="line one\nline two\n",
        ),
    )
    assert decode_entry(encode_entry(entry)) == entry


def test_decode_rejects_wrong_shape():
    with pytest.raises(fastjsonschema.JsonSchemaException):
        decode_entry("request:\n  method: GET\n  url: http://x/1\n")


def test_normalize_filename():
    assert str(normalize_filename("testdata/example")) == "testdata/example.yml"
    assert str(normalize_filename("testdata/example.yml")) == "testdata/example.yml"


def test_format_header():
    assert format_header(3, STARTED, 0.0123) == (
        "# request 3\n"
        "# timestamp 2024-01-02 03:04:05 +0000 UTC\n"
        "# roundtrip 12ms\n"
    )
    assert format_header(0, STARTED, 1.5).endswith("# roundtrip 1.500s\n")


def test_load_missing_or_blank_file(tmp_path):
    store = EntryStore(tmp_path / "missing")
    assert store.load() == []

    store.path.write_text("\n  \n", encoding="utf-8")
    assert store.load() == []


def test_write_and_load_in_file_order(tmp_path):
    store = EntryStore(tmp_path / "nested" / "dir" / "session")
    for index, url in enumerate(["http://x/1", "http://x/2", "http://x/3"]):
        store.write(_entry(url=url), index, STARTED, 0.01)

    text = store.path.read_text(encoding="utf-8")
    assert text.count(DOCUMENT_SEPARATOR) == 2
    assert [e.request.url for e in store.load()] == ["http://x/1", "http://x/2", "http://x/3"]


def test_index_zero_truncates(tmp_path):
    store = EntryStore(tmp_path / "session")
    store.write(_entry(url="http://x/old"), 0, STARTED, 0.01)
    store.write(_entry(url="http://x/older"), 1, STARTED, 0.01)

    store.write(_entry(url="http://x/new"), 0, STARTED, 0.01)
    assert [e.request.url for e in store.load()] == ["http://x/new"]


def test_separator_inside_body_does_not_split_documents(tmp_path):
    store = EntryStore(tmp_path / "session")
    store.write(_entry(body="a\n---\nb"), 0, STARTED, 0.01)
    store.write(_entry(body="c"), 1, STARTED, 0.01)

    loaded = store.load()
    assert [e.response.body for e in loaded] == ["a\n---\nb", "c"]


def test_malformed_document_fails_load(tmp_path):
    store = EntryStore(tmp_path / "session")
    store.write(_entry(), 0, STARTED, 0.01)
    with store.path.open("a", encoding="utf-8") as handle:
        handle.write(DOCUMENT_SEPARATOR + "\n# request 1\nrequest:\n  method: GET\n")

    with pytest.raises(SchemaError, match="entry 1"):
        store.load()


def test_non_utf8_body_is_written_as_escapes_and_restored(tmp_path):
    body = b"caf\xe9\xff".decode("utf-8", "surrogateescape")
    store = EntryStore(tmp_path / "session")
    store.write(_entry(body=body), 0, STARTED, 0.01)

    assert "\\uDCE9" in store.path.read_text(encoding="utf-8")
    loaded = store.load()[0].response.body
    assert loaded.encode("utf-8", "surrogateescape") == b"caf\xe9\xff"
