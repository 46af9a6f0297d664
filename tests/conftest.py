"""
Shared fixtures and configuration for httprecorder tests
"""

import os
import sys
from typing import Dict, List, Optional

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))


class FakeServer:
    """Handler for ``httpx.MockTransport`` that counts live calls"""

    def __init__(self):
        self.calls: List[httpx.Request] = []
        self.status = 200
        self.body = b"hello"
        self.headers: Dict[str, str] = {}
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, headers=self.headers, content=self.body)


def _network_forbidden(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected live call to {request.url}")


@pytest.fixture
def server():
    """Fake upstream; inspect ``server.calls`` to count live requests"""
    return FakeServer()


@pytest.fixture
def live(server):
    """Live transport collaborator backed by the fake server"""
    return httpx.MockTransport(server)


@pytest.fixture
def offline():
    """Transport that fails the test if it is ever used"""
    return httpx.MockTransport(_network_forbidden)


@pytest.fixture
def recording_path(tmp_path):
    """Backing file path without extension"""
    return tmp_path / "testdata" / "session"
