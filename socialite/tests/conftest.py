"""
Pytest fixtures for socialite. Provider HTTP goes through httpx.MockTransport so
no test touches the network.
"""
from urllib.parse import parse_qs

import httpx
import pytest


class FakeServer:
    """Routes requests by (method, url without query) to canned responses and records them."""

    def __init__(self):
        self.routes: dict[tuple[str, str], object] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, status_code: int = 200, json=None, text: str | None = None):
        if text is not None:
            self.routes[(method, url)] = (status_code, {"text": text})
        else:
            self.routes[(method, url)] = (status_code, {"json": json})

    def fail(self, method: str, url: str, exc: Exception):
        self.routes[(method, url)] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url.copy_with(query=None)))
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(route, Exception):
            raise route
        status_code, content = route
        return httpx.Response(status_code, **content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def form(self, index: int = -1) -> dict[str, str]:
        """Decoded form body of a recorded request."""
        body = self.requests[index].content.decode("utf-8")
        return {k: v[0] for k, v in parse_qs(body, keep_blank_values=True).items()}

    def urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def http_client(server):
    return server.client()
