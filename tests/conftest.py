"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from jsonld_cli.adapters import document_loader


class FakeWeb:
    """In-memory HTTP server for `httpx.MockTransport`."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, dict[str, str], bytes]] = {}
        self.requests: list[str] = []

    def add(
        self,
        url: str,
        body: str | dict[str, Any] | list[Any],
        *,
        content_type: str = "application/ld+json",
        status: int = 200,
        headers: dict[str, str] | None = None,
    ) -> str:
        if not isinstance(body, str):
            body = json.dumps(body)
        all_headers = {"content-type": content_type, **(headers or {})}
        self.routes[url] = (status, all_headers, body.encode("utf-8"))
        return url

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url not in self.routes:
            return httpx.Response(404, content=b"not found")
        status, headers, content = self.routes[url]
        return httpx.Response(status, headers=headers, content=content)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler), follow_redirects=True)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def web(monkeypatch) -> FakeWeb:
    """Route every HTTP(S) load of the CLI to an in-memory server."""
    fake = FakeWeb()

    def fake_build_client(settings=None, *, insecure=False, extra_headers=None):
        return fake.client()

    monkeypatch.setattr(document_loader, "build_client", fake_build_client)
    return fake


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep a project `.env` and JSONLD_CLI_* variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "JSONLD_CLI_HTTP_TIMEOUT_SECONDS",
        "JSONLD_CLI_USER_AGENT",
        "JSONLD_CLI_DEFAULT_INDENT",
        "JSONLD_CLI_DEFAULT_ALLOW",
        "JSONLD_CLI_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def person() -> dict[str, Any]:
    """A small JSON-LD document."""
    return {
        "@context": {"name": "http://schema.org/name", "knows": {"@id": "http://schema.org/knows", "@type": "@id"}},
        "@id": "http://example.org/people/alice",
        "name": "Alice",
        "knows": "http://example.org/people/bob",
    }
