"""
Shared fixtures for the Hotmart Payments SDK tests.
"""

import json
from typing import Any, Dict, List, Optional

import pytest

from hotmart_payments import HotmartClient, HotmartConfig, TransportResponse


class RecordingTransport:
    """In-memory transport that records every request and replays canned responses."""

    def __init__(self, responses: Optional[List[Any]] = None) -> None:
        self.calls: List[Dict[str, Any]] = []
        self._responses = list(responses or [])
        self.closed = False

    def queue(self, status_code: int, body: Any = None, raw: Optional[str] = None) -> None:
        """Queue a response; an Exception instance is raised instead."""
        if isinstance(body, Exception):
            self._responses.append(body)
            return
        text = raw if raw is not None else ("" if body is None else json.dumps(body))
        self._responses.append(
            TransportResponse(status_code, text, {"http_code": status_code, "total_time": 0.01})
        )

    def send(self, method, url, headers, body=None):
        self.calls.append({"method": method, "url": url, "headers": list(headers), "body": body})
        response = self._responses.pop(0) if self._responses else TransportResponse(200, "{}", {})
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True

    def header_values(self, name: str, index: int = -1) -> List[str]:
        return [v for k, v in self.calls[index]["headers"] if k.lower() == name.lower()]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(transport: RecordingTransport) -> HotmartClient:
    """Client wired to the recording transport."""
    return HotmartClient(HotmartConfig(
        client_id="client-id",
        client_secret="client-secret",
        token="Bearer access-123",
        basic="Basic YmFzaWM=",
        transport=transport,
    ))
