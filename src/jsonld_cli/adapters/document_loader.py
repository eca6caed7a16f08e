"""Document loading with the primary/secondary access policy.

The first request made through a `DocumentLoader` is the primary input of
the command and may use any loader (stdin, file, HTTP, HTTPS). Every later
request is a secondary resource (remote contexts, frames, ...) and must use
a loader from the allow list.

A `DocumentLoader` instance is also a pyld document loader: pyld calls it
with `(url, options)` and gets a RemoteDocument dict back.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx
from pyld import jsonld

from jsonld_cli.adapters.http_client import build_client
from jsonld_cli.adapters.input_types import detect_input_type, parse_document
from jsonld_cli.core.config import AppSettings
from jsonld_cli.core.domain.input_type import InputType
from jsonld_cli.core.domain.loaders import ALLOW_DEFAULT, LoaderKind
from jsonld_cli.core.domain.models import RemoteDocument
from jsonld_cli.core.errors import LoaderError
from jsonld_cli.core.logging import get_logger

# rel of the HTTP Link header pointing at a JSON-LD context
LINK_HEADER_REL = "http://www.w3.org/ns/json-ld#context"

logger = get_logger(__name__)


def _has_scheme(url: str) -> bool:
    parsed = urlparse(url)
    # one-letter "schemes" are Windows drive letters
    return len(parsed.scheme) > 1


class DocumentLoader:
    """Fetches documents for one CLI invocation.

    `input_type` applies to the primary input only; secondary documents are
    always auto-detected.
    """

    def __init__(
        self,
        *,
        allow: frozenset[LoaderKind] = ALLOW_DEFAULT,
        insecure: bool = False,
        input_type: InputType | None = None,
        base: str | None = None,
        settings: AppSettings | None = None,
        client: httpx.Client | None = None,
        stdin: TextIO | None = None,
    ) -> None:
        self.allow = allow
        self.insecure = insecure
        self.input_type = input_type
        self.base = base
        self.settings = settings or AppSettings()
        self._client = client
        self._stdin = stdin
        self._primary = True

    @property
    def primary_pending(self) -> bool:
        """True until the first request has been made."""

        return self._primary

    def __call__(self, url: str, options: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.load(url).as_pyld()

    def __deepcopy__(self, memo: dict[int, Any]) -> "DocumentLoader":
        # pyld deep-copies its options; the loader state must stay shared
        return self

    def load(self, url: str, *, rdf_options: dict[str, Any] | None = None) -> RemoteDocument:
        """Request `url` and parse the payload into JSON-LD."""

        primary = self._primary
        remote = self.request(url)
        requested = self.input_type if primary else None
        remote.input_type = detect_input_type(remote, requested)
        remote.document = parse_document(
            remote.text,
            remote.input_type,
            base=self.base if primary else (remote.document_url or url),
            rdf_options=rdf_options,
        )
        return remote

    def request(self, url: str) -> RemoteDocument:
        """Fetch the raw payload, enforcing the allow list for secondary loads."""

        kind = LoaderKind.for_url(url)
        if kind is LoaderKind.FILE and _has_scheme(url) and not url.lower().startswith("file:"):
            raise LoaderError(
                f"Unsupported URL scheme: {url}",
                {"url": url, "scheme": urlparse(url).scheme},
            )

        if self._primary:
            self._primary = False
            logger.debug("primary %s load: %s", kind.value, url)
        else:
            if kind not in self.allow:
                raise LoaderError(
                    f"Loader not allowed for secondary resource: {kind.value}",
                    {
                        "url": url,
                        "loader": kind.value,
                        "allow": sorted(k.value for k in self.allow),
                    },
                )
            logger.debug("secondary %s load: %s", kind.value, url)

        if kind is LoaderKind.STDIN:
            return self._read_stdin(url)
        if kind is LoaderKind.FILE:
            return self._read_file(url)
        return self._fetch_http(url, kind)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "DocumentLoader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = build_client(self.settings, insecure=self.insecure)
        return self._client

    def _read_stdin(self, url: str) -> RemoteDocument:
        stream = self._stdin if self._stdin is not None else sys.stdin
        return RemoteDocument(url=url, kind=LoaderKind.STDIN, text=stream.read())

    def _read_file(self, url: str) -> RemoteDocument:
        if url.lower().startswith("file:"):
            path = Path(url2pathname(urlparse(url).path))
        else:
            path = Path(url)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise LoaderError(
                f"Could not read file: {path}",
                {"url": url, "path": str(path), "error": str(exc)},
            ) from exc
        return RemoteDocument(
            url=url,
            kind=LoaderKind.FILE,
            text=text,
            document_url=path.resolve().as_uri(),
        )

    def _fetch_http(self, url: str, kind: LoaderKind) -> RemoteDocument:
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise LoaderError(
                f"HTTP {exc.response.status_code} while loading {url}",
                {"url": url, "status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            raise LoaderError(
                f"Could not load {url}",
                {"url": url, "error": str(exc)},
            ) from exc

        content_type = response.headers.get("content-type")
        return RemoteDocument(
            url=url,
            kind=kind,
            text=response.text,
            document_url=str(response.url),
            content_type=content_type,
            context_url=self._context_url(response, content_type),
        )

    @staticmethod
    def _context_url(response: httpx.Response, content_type: str | None) -> str | None:
        media_type = (content_type or "").split(";", 1)[0].strip().lower()
        if media_type == "application/ld+json" or not media_type.endswith("json"):
            return None
        header = response.headers.get("link")
        if not header:
            return None
        links = jsonld.parse_link_header(header)
        link = links.get(LINK_HEADER_REL)
        if isinstance(link, list):
            raise LoaderError(
                "URL could not be dereferenced, it has more than one associated HTTP Link Header.",
                {"url": str(response.url)},
            )
        if link is None:
            return None
        return link["target"]
