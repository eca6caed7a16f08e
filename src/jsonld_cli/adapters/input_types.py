"""Parsing loaded payloads into JSON-LD.

JSON is parsed directly. N-Quads goes through pyld's `from_rdf`. The other
RDF syntaxes are parsed with rdflib and handed to pyld as N-Quads, so every
RDF input ends up converted by the same algorithm.
"""

from __future__ import annotations

import json
from typing import Any

from pyld import jsonld
from rdflib import Dataset, Graph
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID

from jsonld_cli.core.domain.input_type import InputType
from jsonld_cli.core.domain.models import RemoteDocument
from jsonld_cli.core.errors import InputTypeError
from jsonld_cli.core.logging import get_logger

NQUADS = "application/n-quads"

logger = get_logger(__name__)


def detect_input_type(remote: RemoteDocument, requested: InputType | None = None) -> InputType | None:
    """Explicit type, then Content-Type, then file extension.

    `None` means the payload has to be guessed.
    """

    if requested is not None:
        return requested
    detected = InputType.from_media_type(remote.content_type)
    if detected is None:
        detected = InputType.from_location(remote.document_url or remote.url)
    return detected


def parse_document(
    text: str,
    input_type: InputType | None,
    *,
    base: str | None = None,
    rdf_options: dict[str, Any] | None = None,
) -> Any:
    """Parse `text` as `input_type`, guessing when the type is unknown."""

    if not text.strip():
        raise InputTypeError("No input data", {"type": input_type.value if input_type else None})

    if input_type is None:
        return _guess(text, base=base, rdf_options=rdf_options)
    if input_type is InputType.JSON:
        try:
            return json.loads(text)
        except ValueError as exc:
            raise InputTypeError("Invalid JSON input", {"error": str(exc)}) from exc
    return rdf_to_jsonld(text, input_type, base=base, rdf_options=rdf_options)


def rdf_to_jsonld(
    text: str,
    input_type: InputType,
    *,
    base: str | None = None,
    rdf_options: dict[str, Any] | None = None,
) -> Any:
    """Convert an RDF payload into (expanded) JSON-LD with pyld."""

    options: dict[str, Any] = {"format": NQUADS}
    options.update(rdf_options or {})
    nquads = text if input_type is InputType.NQUADS else to_nquads(text, input_type, base=base)
    return jsonld.from_rdf(nquads, options)


def to_nquads(text: str, input_type: InputType, *, base: str | None = None) -> str:
    """Re-serialize Turtle, TriG, N-Triples or RDF/XML as N-Quads."""

    if input_type is InputType.NQUADS:
        return text
    try:
        if input_type is InputType.TRIG:
            dataset = Dataset()
            dataset.parse(data=text, format=input_type.rdflib_format, publicID=base)
            return _dataset_to_nquads(dataset)
        graph = Graph()
        graph.parse(data=text, format=input_type.rdflib_format, publicID=base)
        return graph.serialize(format="nt")
    except Exception as exc:
        raise InputTypeError(
            f"Could not parse input as {input_type.value}",
            {"type": input_type.value, "error": str(exc)},
        ) from exc


def _dataset_to_nquads(dataset: Dataset) -> str:
    lines: list[str] = []
    for graph in dataset.graphs():
        name = None if graph.identifier == DATASET_DEFAULT_GRAPH_ID else graph.identifier.n3()
        for line in graph.serialize(format="nt").splitlines():
            line = line.strip()
            if not line:
                continue
            if name is not None:
                # "<s> <p> <o> ." -> "<s> <p> <o> <g> ."
                line = f"{line[:-1].rstrip()} {name} ."
            lines.append(line)
    return "\n".join(lines) + "\n" if lines else ""


def _guess(text: str, *, base: str | None, rdf_options: dict[str, Any] | None) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        logger.debug("input is not JSON, trying N-Quads")

    try:
        jsonld.JsonLdProcessor.parse_nquads(text)
    except jsonld.JsonLdError:
        logger.debug("input is not N-Quads, trying Turtle")
    else:
        return rdf_to_jsonld(text, InputType.NQUADS, rdf_options=rdf_options)

    try:
        return rdf_to_jsonld(text, InputType.TURTLE, base=base, rdf_options=rdf_options)
    except InputTypeError as exc:
        raise InputTypeError(
            "Unable to detect input type, use -t/--type",
            {"tried": ["json", "nquads", "turtle"]},
        ) from exc
