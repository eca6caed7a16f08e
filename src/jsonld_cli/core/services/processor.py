"""JSON-LD processing service.

Translates command options into pyld options and delegates every algorithm
to pyld. The CLI layer only parses arguments and prints; this module owns
the order of operations for one invocation:

1. load the primary input through the `DocumentLoader` (first request),
2. lint / safe-mode checks when requested,
3. run the pyld operation, whose own loads are secondary requests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlparse

from pyld import jsonld

from jsonld_cli.adapters.document_loader import DocumentLoader
from jsonld_cli.adapters.input_types import NQUADS, detect_input_type, rdf_to_jsonld
from jsonld_cli.core.config import AppSettings
from jsonld_cli.core.domain.input_type import InputType
from jsonld_cli.core.domain.loaders import ALLOW_DEFAULT, LoaderKind
from jsonld_cli.core.domain.models import LintWarning, RemoteDocument
from jsonld_cli.core.errors import InputTypeError, OptionError
from jsonld_cli.core.logging import get_logger
from jsonld_cli.core.services.lint import enforce_safe_mode, lint_document

logger = get_logger(__name__)

JSON_FORMATS = frozenset(
    {"json", "jsonld", "json-ld", "ld+json", "application/json", "application/ld+json"}
)
NQUADS_FORMATS = frozenset({"nquads", "n-quads", "application/nquads", "application/n-quads"})


class CanonicalizationAlgorithm(str, Enum):
    """RDF dataset canonicalization algorithms provided by pyld."""

    URDNA2015 = "URDNA2015"
    URGNA2012 = "URGNA2012"


def normalize_rdf_format(value: str) -> str:
    """Map N-Quads aliases to `application/n-quads`; other values pass through."""

    if value.strip().lower() in NQUADS_FORMATS:
        return NQUADS
    return value


def source_base(source: str) -> str:
    """Base IRI derived from where the primary input comes from."""

    if source == "-":
        return "stdin://"
    if LoaderKind.for_url(source) in (LoaderKind.HTTP, LoaderKind.HTTPS):
        return source
    if source.lower().startswith("file:"):
        return source
    return Path(os.path.abspath(source)).as_uri()


def document_iri(value: Any) -> Any:
    """Turn a local path (or `-`) given for a context or frame into a URL.

    pyld only dereferences absolute IRIs. URLs and inline objects pass
    through unchanged.
    """

    if value == "-":
        return "stdin://"
    if not isinstance(value, str) or LoaderKind.for_url(value) is not LoaderKind.FILE:
        return value
    # one-letter "schemes" are Windows drive letters
    if len(urlparse(value).scheme) > 1:
        return value
    return Path(value).resolve().as_uri()


def resolve_base(source: str, *, base: str | None = None, auto_base: bool = False) -> str | None:
    """`--base` wins, then `--auto-base`; otherwise there is no base IRI."""

    if base:
        return base
    if auto_base:
        return source_base(source)
    return None


@dataclass
class ProcessingOptions:
    """Options shared by every command."""

    allow: frozenset[LoaderKind] = ALLOW_DEFAULT
    insecure: bool = False
    input_type: InputType | None = None
    base: str | None = None
    lint: bool = False
    safe: bool = False


@dataclass
class ProcessorHooks:
    """Optional callbacks for the UI layer."""

    warning: Callable[[LintWarning], None] | None = None


@dataclass
class Processor:
    """Runs one JSON-LD operation for one primary input."""

    options: ProcessingOptions = field(default_factory=ProcessingOptions)
    hooks: ProcessorHooks = field(default_factory=ProcessorHooks)
    settings: AppSettings | None = None
    loader: DocumentLoader | None = None

    def __post_init__(self) -> None:
        if self.loader is None:
            self.loader = DocumentLoader(
                allow=self.options.allow,
                insecure=self.options.insecure,
                input_type=self.options.input_type,
                base=self.options.base,
                settings=self.settings,
            )

    def close(self) -> None:
        assert self.loader is not None
        self.loader.close()

    def __enter__(self) -> "Processor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def pyld_options(self, **extra: Any) -> dict[str, Any]:
        # base None keeps relative IRIs untouched
        options: dict[str, Any] = {"documentLoader": self.loader, "base": self.options.base}
        options.update({k: v for k, v in extra.items() if v is not None})
        return options

    def load_input(self, source: str) -> RemoteDocument:
        """Load the primary input (always the first request of the loader)."""

        assert self.loader is not None
        if not self.loader.primary_pending:
            raise RuntimeError("primary input already loaded")
        return self.loader.load(source)

    # -- commands ---------------------------------------------------------

    def format_document(self, source: str, output_format: str, *, context: str | None = None) -> Any:
        key = output_format.strip().lower()
        if key in JSON_FORMATS:
            # basic JSON formatting, no JSON-LD processing
            return self.load_input(source).document
        if key in NQUADS_FORMATS:
            return self.to_rdf(source, output_format=NQUADS, context=context)
        raise OptionError(f"Unknown format: {output_format}", {"format": output_format})

    def lint(self, source: str, *, context: str | None = None) -> list[LintWarning]:
        options = self.pyld_options(expandContext=document_iri(context))
        document = self._load_for_processing(source, options)
        warnings = lint_document(document, options)
        self._emit(warnings)
        if self.options.safe:
            enforce_safe_mode(warnings)
        return warnings

    def compact(
        self,
        source: str,
        context: str,
        *,
        compact_arrays: bool = True,
        graph: bool = False,
    ) -> Any:
        options = self.pyld_options(compactArrays=compact_arrays, graph=graph)
        document = self._prepare(source, options)
        return jsonld.compact(document, document_iri(context), options)

    def expand(
        self,
        source: str,
        *,
        context: str | None = None,
        keep_free_floating_nodes: bool = False,
    ) -> Any:
        options = self.pyld_options(
            expandContext=document_iri(context),
            keepFreeFloatingNodes=keep_free_floating_nodes,
        )
        document = self._prepare(source, options)
        return jsonld.expand(document, options)

    def flatten(self, source: str, *, context: str | None = None) -> Any:
        options = self.pyld_options()
        document = self._prepare(source, options)
        return jsonld.flatten(document, document_iri(context), options)

    def frame(
        self,
        source: str,
        frame: str,
        *,
        embed: bool | str = True,
        explicit: bool = False,
        omit_default: bool = False,
    ) -> Any:
        options = self.pyld_options(embed=embed, explicit=explicit, omitDefault=omit_default)
        document = self._prepare(source, options)
        return jsonld.frame(document, document_iri(frame), options)

    def to_rdf(
        self,
        source: str,
        *,
        output_format: str | None = None,
        generalized_rdf: bool = False,
        context: str | None = None,
    ) -> Any:
        options = self.pyld_options(
            format=normalize_rdf_format(output_format) if output_format else None,
            produceGeneralizedRdf=generalized_rdf or None,
            expandContext=document_iri(context),
        )
        document = self._prepare(source, options)
        return jsonld.to_rdf(document, options)

    def canonize(
        self,
        source: str,
        *,
        output_format: str | None = None,
        algorithm: CanonicalizationAlgorithm = CanonicalizationAlgorithm.URDNA2015,
    ) -> str:
        options = self.pyld_options(
            format=normalize_rdf_format(output_format) if output_format else NQUADS,
            algorithm=CanonicalizationAlgorithm(algorithm).value,
        )
        document = self._prepare(source, options)
        return jsonld.normalize(document, options)

    def from_rdf(
        self,
        source: str,
        *,
        use_rdf_type: bool = False,
        use_native_types: bool = False,
    ) -> Any:
        assert self.loader is not None
        remote = self.loader.request(source)
        input_type = detect_input_type(remote, self.options.input_type) or InputType.NQUADS
        if not input_type.is_rdf:
            raise InputTypeError(
                f"fromRdf needs RDF input, got {input_type.value}",
                {"type": input_type.value},
            )
        return rdf_to_jsonld(
            remote.text,
            input_type,
            base=self.options.base,
            rdf_options={"useRdfType": use_rdf_type, "useNativeTypes": use_native_types},
        )

    # -- helpers ----------------------------------------------------------

    def _load_for_processing(self, source: str, options: dict[str, Any]) -> Any:
        remote = self.load_input(source)
        if remote.context_url is not None:
            # Link header context applies after any expand context
            contexts = [remote.context_url]
            if "expandContext" in options:
                contexts.insert(0, options["expandContext"])
            options["expandContext"] = contexts if len(contexts) > 1 else contexts[0]
        return remote.document

    def _prepare(self, source: str, options: dict[str, Any]) -> Any:
        document = self._load_for_processing(source, options)
        if self.options.lint or self.options.safe:
            warnings = lint_document(document, options)
            if self.options.lint:
                self._emit(warnings)
            if self.options.safe:
                enforce_safe_mode(warnings)
        return document

    def _emit(self, warnings: list[LintWarning]) -> None:
        for warning in warnings:
            logger.debug("lint %s: %s", warning.code, warning.details)
            if self.hooks.warning is not None:
                self.hooks.warning(warning)
