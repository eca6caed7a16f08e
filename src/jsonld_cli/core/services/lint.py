"""Lint warnings and safe mode.

pyld does not report lossy expansion, so the document is expanded a second
time with a sentinel `@vocab` in front of any user supplied expand context.
Terms that are only defined through the sentinel are the ones a normal
expansion drops; `@type` values that resolve through it are relative type
references. Relative `@id` values are found directly in the expanded output.

The second expansion keeps free-floating nodes, so top-level (or `@graph`)
objects a normal expansion removes are still there to be reported.
Keyword-like keys and free-floating scalars never survive expansion and are
found in the input document instead.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from pyld import jsonld

from jsonld_cli.core.domain.models import LintWarning
from jsonld_cli.core.errors import ValidationError

LINT_VOCAB = "urn:jsonld-cli:lint:"

_ABSOLUTE_IRI = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_KEYWORD_LIKE = re.compile(r"^@[A-Za-z]+$")

# JSON-LD 1.1 keywords, framing keywords included
KEYWORDS = frozenset(
    {
        "@base", "@container", "@context", "@default", "@direction", "@embed",
        "@explicit", "@graph", "@id", "@import", "@included", "@index", "@json",
        "@language", "@list", "@nest", "@none", "@omitDefault", "@prefix",
        "@preserve", "@propagate", "@protected", "@requireAll", "@reverse",
        "@set", "@type", "@value", "@version", "@vocab",
    }
)

INVALID_PROPERTY = "invalid property"
RELATIVE_TYPE = "relative @type reference"
RELATIVE_ID = "relative @id reference"
FREE_FLOATING_SCALAR = "free-floating scalar"
ONLY_ID = "object with only @id"
ONLY_LIST = "object with only @list"

_DROPPED_PROPERTY = "Dropping property that did not expand into an absolute IRI or keyword."


def lint_document(document: Any, options: dict[str, Any]) -> list[LintWarning]:
    """Expand `document` with the sentinel vocabulary and collect warnings.

    `options` are the pyld options of the actual operation; they are copied,
    never modified.
    """

    opts = dict(options)
    opts["expandContext"] = _with_sentinel(opts.get("expandContext"))
    keeps_free_floating = bool(options.get("keepFreeFloatingNodes"))
    opts["keepFreeFloatingNodes"] = True
    expanded = jsonld.expand(document, opts)

    collector = _Collector(check_free_floating=not keeps_free_floating)
    collector.scan_input(document, in_graph=True)
    collector.walk_top_level(expanded)
    return collector.warnings


def enforce_safe_mode(warnings: Iterable[LintWarning]) -> None:
    """Raise on the first warning; safe mode treats lossy input as an error."""

    for warning in warnings:
        raise ValidationError(
            "Safe mode validation error.",
            {"event": warning.model_dump()},
        )


def _with_sentinel(expand_context: Any) -> list[Any]:
    contexts: list[Any] = [{"@vocab": LINT_VOCAB}]
    if expand_context is None:
        return contexts
    if isinstance(expand_context, dict) and "@context" in expand_context:
        expand_context = expand_context["@context"]
    if isinstance(expand_context, list):
        contexts.extend(expand_context)
    else:
        contexts.append(expand_context)
    return contexts


def _is_relative(iri: str) -> bool:
    return iri.startswith(LINT_VOCAB) or not (
        iri.startswith("_:") or _ABSOLUTE_IRI.match(iri)
    )


def _strip(iri: str) -> str:
    return iri[len(LINT_VOCAB):] if iri.startswith(LINT_VOCAB) else iri


class _Collector:
    def __init__(self, *, check_free_floating: bool = True) -> None:
        self.warnings: list[LintWarning] = []
        self.check_free_floating = check_free_floating
        self._seen: set[tuple[str, str]] = set()

    def add(self, code: str, message: str, key: str, value: Any) -> None:
        marker = (code, repr(value))
        if marker in self._seen:
            return
        self._seen.add(marker)
        self.warnings.append(LintWarning(code=code, message=message, details={key: value}))

    # -- input document ---------------------------------------------------

    def scan_input(self, element: Any, *, in_graph: bool = False) -> None:
        """Find keyword-like keys and scalars directly inside `@graph`."""

        if isinstance(element, list):
            for item in element:
                self.scan_input(item, in_graph=in_graph)
            return
        if not isinstance(element, dict):
            if in_graph and element is not None:
                self.add(
                    FREE_FLOATING_SCALAR,
                    "Dropping free-floating scalar not in a list.",
                    "value",
                    element,
                )
            return

        for key, value in element.items():
            # contexts and literal values are not node data
            if key in ("@context", "@value"):
                continue
            if _KEYWORD_LIKE.match(key) and key not in KEYWORDS:
                self.add(INVALID_PROPERTY, _DROPPED_PROPERTY, "property", key)
                continue
            self.scan_input(value, in_graph=key == "@graph")

    # -- expanded document ------------------------------------------------

    def walk_top_level(self, expanded: list[Any]) -> None:
        for item in expanded:
            self.free_floating(item)
        self.walk(expanded)

    def free_floating(self, element: Any) -> None:
        if not self.check_free_floating or not isinstance(element, dict):
            return
        if "@value" in element:
            self.add(
                FREE_FLOATING_SCALAR,
                "Dropping free-floating scalar not in a list.",
                "value",
                element["@value"],
            )
        elif "@list" in element:
            self.add(ONLY_LIST, "Dropping object with only @list.", "list", element["@list"])
        elif set(element) == {"@id"}:
            self.add(ONLY_ID, "Dropping object with only @id.", "id", _strip(element["@id"]))

    def walk(self, element: Any) -> None:
        if isinstance(element, list):
            for item in element:
                self.walk(item)
            return
        if not isinstance(element, dict):
            return

        if "@value" in element:
            value_type = element.get("@type")
            if isinstance(value_type, str) and value_type != "@json" and _is_relative(value_type):
                self.add(RELATIVE_TYPE, "Relative @type reference found.", "type", _strip(value_type))
            return

        node_id = element.get("@id")
        if isinstance(node_id, str) and _is_relative(node_id):
            self.add(RELATIVE_ID, "Relative @id reference found.", "id", _strip(node_id))

        for type_ in jsonld.JsonLdProcessor.arrayify(element.get("@type", [])):
            if isinstance(type_, str) and _is_relative(type_):
                self.add(RELATIVE_TYPE, "Relative @type reference found.", "type", _strip(type_))

        for key, value in element.items():
            if key in ("@id", "@type"):
                continue
            if key == "@reverse" and isinstance(value, dict):
                for prop, reverse_values in value.items():
                    self._check_property(prop)
                    self.walk(reverse_values)
                continue
            if key == "@graph":
                for item in jsonld.JsonLdProcessor.arrayify(value):
                    self.free_floating(item)
            self._check_property(key)
            self.walk(value)

    def _check_property(self, key: str) -> None:
        if key.startswith(LINT_VOCAB):
            self.add(INVALID_PROPERTY, _DROPPED_PROPERTY, "property", _strip(key))
