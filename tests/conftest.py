"""Shared pytest fixtures: an in-process mock HTTP server built on httpx.MockTransport."""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx
import pytest

from gotcha import Config, HttpxTransport


@dataclass
class MockResponse:
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    delay: int = 0
    """milliseconds to wait before responding"""


TEST_RESPONSES = {
    "SUCCESS": MockResponse(200, {"content-type": "application/json"}, json.dumps({"success": True, "data": "test"}, separators=(",", ":"))),
    "REDIRECT_301": MockResponse(301, {"location": "https://example.com/new-location"}, "Moved Permanently"),
    "REDIRECT_302": MockResponse(302, {"location": "https://example.com/temp-location"}, "Found"),
    "CLIENT_ERROR_400": MockResponse(400, {"content-type": "application/json"}, json.dumps({"error": "Bad Request", "message": "Invalid parameters"})),
    "CLIENT_ERROR_404": MockResponse(404, {"content-type": "text/html"}, "<html><body><h1>404 Not Found</h1></body></html>"),
    "SERVER_ERROR_500": MockResponse(500, {"content-type": "application/json"}, json.dumps({"error": "Internal Server Error"}, separators=(",", ":"))),
    "SERVER_ERROR_503": MockResponse(503, {"retry-after": "60"}, "Service Unavailable"),
}


class MockServer:
    """Answers requests by ``METHOD:path`` (query included), or with a default response."""

    base_url = "http://localhost:8080"

    def __init__(self):
        self.responses: Dict[str, MockResponse] = {}
        self.requests: List[httpx.Request] = []

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.method}:{request.url.raw_path.decode('ascii')}"
        mock = self.responses.get(key) or self.responses.get("*")
        if mock is None:
            return httpx.Response(404, text="Not Found")

        if mock.delay > 0:
            await asyncio.sleep(mock.delay / 1000)
        return httpx.Response(mock.status_code, headers=mock.headers, content=mock.body.encode("utf-8"))

    def set_response(self, method: str, path: str, response: MockResponse) -> None:
        self.responses[f"{method}:{path}"] = response

    def set_default_response(self, response: MockResponse) -> None:
        self.responses["*"] = response

    def url(self, path: str = "/") -> str:
        return f"{self.base_url}{path}"

    def transport(self) -> HttpxTransport:
        return HttpxTransport(
            config=Config(use_dotenv=False),
            http_transport=httpx.MockTransport(self._handle),
        )


@pytest.fixture
def server() -> MockServer:
    return MockServer()


def run(coro):
    """Run a coroutine on a fresh event loop."""
    return asyncio.run(coro)
