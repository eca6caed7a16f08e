"""httpx client factory.

All HTTP(S) loads of an invocation go through one client built here so
timeouts, headers and TLS verification behave the same for the primary
input and every secondary resource.
"""

from __future__ import annotations

import httpx

from jsonld_cli.core.config import AppSettings

ACCEPT_HEADER = (
    "application/ld+json, application/json;q=0.9, application/n-quads;q=0.8, "
    "text/turtle;q=0.7, application/trig;q=0.7, application/n-triples;q=0.6, "
    "application/rdf+xml;q=0.5, */*;q=0.1"
)


def build_client(
    settings: AppSettings | None = None,
    *,
    insecure: bool = False,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with the CLI defaults.

    `insecure` disables certificate verification (`-k/--insecure`).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": ACCEPT_HEADER,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        verify=not insecure,
    )
