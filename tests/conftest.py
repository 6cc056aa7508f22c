import json

import httpx
import pytest

from storefront import config


class RecordingBackend:
    """Stand-in for the payment backend: canned responses, remembers requests."""

    def __init__(self, status_code=200, body=None, text=None, exc=None):
        self.status_code = status_code
        self.body = body
        self.text = text
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        if self.body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)

    def async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def backend_base(monkeypatch):
    monkeypatch.setattr(config, "BACKEND_URL", "http://backend.test")
    monkeypatch.setattr(config, "PUBLIC_ORIGIN", "")


@pytest.fixture
def backend():
    return RecordingBackend
