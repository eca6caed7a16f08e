"""Domain models (Pydantic v2).

These describe what was loaded and what linting found; they know nothing
about HTTP or the terminal.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from jsonld_cli.core.domain.input_type import InputType
from jsonld_cli.core.domain.loaders import LoaderKind


class RemoteDocument(BaseModel):
    """A document fetched by the loader, before and after parsing.

    `text` is the raw payload; `document` is filled once the payload has
    been parsed into JSON-LD (or is `None` while still raw).
    """

    url: str = Field(
        ...,
        min_length=1,
        description="URL, path or `-` as requested.",
    )
    kind: LoaderKind = Field(
        ...,
        description="Loader used to fetch the document.",
    )
    text: str = Field(
        default="",
        description="Raw payload as read from the source.",
    )
    document_url: str | None = Field(
        default=None,
        description="Final location (after redirects) used as documentUrl.",
    )
    content_type: str | None = Field(
        default=None,
        description="Media type reported by the source (HTTP only).",
    )
    context_url: str | None = Field(
        default=None,
        description="Context URL from an HTTP Link header, if any.",
    )
    input_type: InputType | None = Field(
        default=None,
        description="Detected or requested input type.",
    )
    document: Any = Field(
        default=None,
        description="Parsed JSON-LD document.",
    )

    def as_pyld(self) -> dict[str, Any]:
        """RemoteDocument shape expected from a pyld document loader."""

        return {
            "contextUrl": self.context_url,
            "documentUrl": self.document_url or self.url,
            "document": self.document,
        }


class LintWarning(BaseModel):
    """A lossy or suspicious construct found while expanding a document."""

    code: str = Field(
        ...,
        min_length=1,
        description="Stable warning code, e.g. 'invalid property'.",
    )
    message: str = Field(
        ...,
        min_length=1,
        description="Human readable description.",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Offending term/IRI and related values.",
    )
