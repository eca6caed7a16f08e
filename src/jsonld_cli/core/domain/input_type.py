"""Input data types understood by the document loader.

Names and media types are both accepted for `-t/--type`. HTML/RDFa input is
recognised only to reject it with a clear message.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from urllib.parse import urlparse

from jsonld_cli.core.errors import InputTypeError


class InputType(str, Enum):
    """Supported primary input formats."""

    JSON = "json"
    NQUADS = "nquads"
    TURTLE = "turtle"
    TRIG = "trig"
    NTRIPLES = "ntriples"
    RDFXML = "rdfxml"

    @classmethod
    def from_name(cls, value: str) -> "InputType":
        """Resolve a `-t/--type` value (simple name or media type)."""

        key = value.strip().lower()
        if key in _UNSUPPORTED:
            raise InputTypeError(
                f"Unsupported input type: {value} (HTML/RDFa input is not supported)",
                {"type": value},
            )
        try:
            return _ALIASES[key]
        except KeyError:
            raise InputTypeError(
                f"Unknown input type: {value}",
                {"type": value, "valid": sorted(_ALIASES)},
            ) from None

    @classmethod
    def from_media_type(cls, content_type: str | None) -> "InputType | None":
        """Map an HTTP `Content-Type` header; unknown types give `None`."""

        if not content_type:
            return None
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type in _UNSUPPORTED:
            raise InputTypeError(
                f"Unsupported input type: {media_type} (HTML/RDFa input is not supported)",
                {"contentType": content_type},
            )
        if media_type.endswith("+json"):
            return cls.JSON
        return _ALIASES.get(media_type) if "/" in media_type else None

    @classmethod
    def from_location(cls, location: str) -> "InputType | None":
        """Guess from a file extension (of a path or a URL path)."""

        path = urlparse(location).path if "://" in location else location
        suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower()
        return _EXTENSIONS.get(suffix)

    @property
    def is_rdf(self) -> bool:
        return self is not InputType.JSON

    @property
    def rdflib_format(self) -> str:
        """Parser name used by rdflib for the non-JSON types."""

        return _RDFLIB_FORMATS[self]


_ALIASES: dict[str, InputType] = {
    "json": InputType.JSON,
    "jsonld": InputType.JSON,
    "json-ld": InputType.JSON,
    "ld+json": InputType.JSON,
    "application/json": InputType.JSON,
    "application/ld+json": InputType.JSON,
    "nquads": InputType.NQUADS,
    "n-quads": InputType.NQUADS,
    "nq": InputType.NQUADS,
    "application/n-quads": InputType.NQUADS,
    "application/nquads": InputType.NQUADS,
    "turtle": InputType.TURTLE,
    "ttl": InputType.TURTLE,
    "text/turtle": InputType.TURTLE,
    "trig": InputType.TRIG,
    "application/trig": InputType.TRIG,
    "ntriples": InputType.NTRIPLES,
    "n-triples": InputType.NTRIPLES,
    "nt": InputType.NTRIPLES,
    "application/n-triples": InputType.NTRIPLES,
    "rdfxml": InputType.RDFXML,
    "rdf/xml": InputType.RDFXML,
    "xml": InputType.RDFXML,
    "application/rdf+xml": InputType.RDFXML,
}

_UNSUPPORTED = frozenset(
    {"html", "xhtml", "rdfa", "text/html", "application/xhtml+xml"}
)

_EXTENSIONS: dict[str, InputType] = {
    ".json": InputType.JSON,
    ".jsonld": InputType.JSON,
    ".nq": InputType.NQUADS,
    ".nquads": InputType.NQUADS,
    ".ttl": InputType.TURTLE,
    ".trig": InputType.TRIG,
    ".nt": InputType.NTRIPLES,
    ".rdf": InputType.RDFXML,
    ".owl": InputType.RDFXML,
    ".xml": InputType.RDFXML,
}

_RDFLIB_FORMATS: dict[InputType, str] = {
    InputType.NQUADS: "nquads",
    InputType.TURTLE: "turtle",
    InputType.TRIG: "trig",
    InputType.NTRIPLES: "nt",
    InputType.RDFXML: "xml",
}
