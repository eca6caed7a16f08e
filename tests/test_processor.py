"""Tests for the processing service and lint checks."""

import io
import json
import os
from pathlib import Path

import pytest
from pyld import jsonld

from jsonld_cli.adapters.document_loader import DocumentLoader
from jsonld_cli.core.domain.loaders import ALLOW_ALL
from jsonld_cli.core.errors import OptionError, ValidationError
from jsonld_cli.core.services.lint import (
    FREE_FLOATING_SCALAR,
    INVALID_PROPERTY,
    ONLY_ID,
    ONLY_LIST,
    RELATIVE_ID,
    RELATIVE_TYPE,
    enforce_safe_mode,
    lint_document,
)
from jsonld_cli.core.services.processor import (
    CanonicalizationAlgorithm,
    Processor,
    ProcessingOptions,
    ProcessorHooks,
    document_iri,
    normalize_rdf_format,
    resolve_base,
    source_base,
)

LOSSY = {
    "@context": {"name": "http://schema.org/name"},
    "@id": "thing",
    "@type": "Thing",
    "name": "A thing",
    "colour": "red",
}


def make_processor(document, *, web=None, hooks=None, **options) -> Processor:
    """Processor whose primary input is `document` on a fake stdin."""
    text = document if isinstance(document, str) else json.dumps(document)
    opts = ProcessingOptions(**options)
    loader = DocumentLoader(
        allow=opts.allow,
        input_type=opts.input_type,
        base=opts.base,
        stdin=io.StringIO(text),
        client=web.client() if web is not None else None,
    )
    return Processor(options=opts, hooks=hooks or ProcessorHooks(), loader=loader)


def test_source_base():
    assert source_base("-") == "stdin://"
    assert source_base("https://example.org/doc") == "https://example.org/doc"
    assert source_base("file:///tmp/doc.jsonld") == "file:///tmp/doc.jsonld"
    assert source_base("doc.jsonld") == Path(os.path.abspath("doc.jsonld")).as_uri()


def test_resolve_base_precedence():
    assert resolve_base("-", base="http://example.org/", auto_base=True) == "http://example.org/"
    assert resolve_base("-", auto_base=True) == "stdin://"
    assert resolve_base("-") is None


def test_document_iri(tmp_path):
    path = tmp_path / "ctx.jsonld"
    assert document_iri(str(path)) == path.resolve().as_uri()
    assert document_iri("https://example.org/ctx.jsonld") == "https://example.org/ctx.jsonld"
    assert document_iri("file:///tmp/ctx.jsonld") == "file:///tmp/ctx.jsonld"
    assert document_iri("-") == "stdin://"
    assert document_iri({"@vocab": "http://example.org/"}) == {"@vocab": "http://example.org/"}
    assert document_iri(None) is None


def test_document_iri_relative_path():
    assert document_iri("ctx.jsonld") == Path("ctx.jsonld").resolve().as_uri()


def test_normalize_rdf_format():
    assert normalize_rdf_format("nquads") == "application/n-quads"
    assert normalize_rdf_format("application/nquads") == "application/n-quads"
    assert normalize_rdf_format("text/turtle") == "text/turtle"


def test_lint_reports_lossy_constructs():
    warnings = lint_document(LOSSY, {"base": None})
    found = {(w.code, next(iter(w.details.values()))) for w in warnings}
    assert found == {
        (RELATIVE_ID, "thing"),
        (RELATIVE_TYPE, "Thing"),
        (INVALID_PROPERTY, "colour"),
    }


def test_lint_with_base_has_no_relative_id():
    warnings = lint_document(LOSSY, {"base": "http://example.org/"})
    assert RELATIVE_ID not in {w.code for w in warnings}


def test_lint_clean_document(person):
    assert lint_document(person, {"base": None}) == []


def test_lint_respects_expand_context():
    document = {"colour": "red"}
    options = {"base": None, "expandContext": {"@context": {"colour": "http://example.org/colour"}}}
    assert lint_document(document, options) == []
    assert "expandContext" in options and "@context" in options["expandContext"]


def test_lint_deduplicates():
    document = [{"@context": {}, "colour": "red"}, {"@context": {}, "colour": "blue"}]
    warnings = lint_document(document, {"base": None})
    assert [w.code for w in warnings] == [INVALID_PROPERTY]


def lint_codes(document, **options):
    return [(w.code, next(iter(w.details.values()))) for w in lint_document(document, {"base": None, **options})]


def test_lint_keyword_like_key():
    document = {"@id": "http://example.org/a", "@foo": "x", "http://example.org/p": 1}
    assert lint_codes(document) == [(INVALID_PROPERTY, "@foo")]


def test_lint_keyword_like_key_in_nested_node():
    document = {"http://example.org/p": {"@bar": 1, "http://example.org/q": 2}}
    assert lint_codes(document) == [(INVALID_PROPERTY, "@bar")]


def test_lint_known_keywords_are_not_flagged(person):
    document = {**person, "@type": "http://schema.org/Person"}
    assert lint_codes(document) == []


def test_lint_object_with_only_id():
    assert lint_codes({"@id": "http://example.org/only"}) == [(ONLY_ID, "http://example.org/only")]


def test_lint_free_floating_scalar_in_graph():
    document = {"@graph": [5, {"@id": "http://example.org/a", "http://example.org/p": 1}]}
    assert lint_codes(document) == [(FREE_FLOATING_SCALAR, 5)]


def test_lint_free_floating_value_object():
    assert lint_codes({"@graph": [{"@value": "x"}]}) == [(FREE_FLOATING_SCALAR, "x")]


def test_lint_object_with_only_list():
    assert [code for code, _ in lint_codes({"@graph": [{"@list": [1]}]})] == [ONLY_LIST]


def test_lint_nested_graph_only_id():
    document = {
        "@id": "http://example.org/g",
        "@graph": [{"@id": "http://example.org/member"}],
    }
    assert lint_codes(document) == [(ONLY_ID, "http://example.org/member")]


def test_lint_skips_free_floating_when_kept():
    assert lint_codes({"@id": "http://example.org/only"}, keepFreeFloatingNodes=True) == []


def test_enforce_safe_mode():
    enforce_safe_mode([])
    warnings = lint_document(LOSSY, {"base": None})
    with pytest.raises(ValidationError, match="Safe mode validation error.") as exc_info:
        enforce_safe_mode(warnings)
    assert exc_info.value.details["event"]["code"] == warnings[0].code


def test_expand_matches_pyld(person):
    with make_processor(person) as processor:
        assert processor.expand("-") == jsonld.expand(person)


def test_lint_flag_calls_warning_hook():
    seen = []
    processor = make_processor(LOSSY, hooks=ProcessorHooks(warning=seen.append), lint=True)
    result = processor.expand("-")
    assert result == jsonld.expand(LOSSY, {"base": None})
    assert {w.code for w in seen} == {INVALID_PROPERTY, RELATIVE_ID, RELATIVE_TYPE}


def test_safe_mode_stops_processing():
    processor = make_processor(LOSSY, safe=True)
    with pytest.raises(ValidationError):
        processor.compact("-", "https://example.test/processor/never-loaded.jsonld")


def test_lint_command_returns_warnings():
    seen = []
    processor = make_processor(LOSSY, hooks=ProcessorHooks(warning=seen.append))
    warnings = processor.lint("-")
    assert warnings == seen
    assert len(warnings) == 3


def test_compact_with_remote_context(web, person):
    ctx = {"@context": {"name": "http://schema.org/name", "id": "@id"}}
    ctx_url = web.add("https://example.test/processor/compact-ctx.jsonld", ctx)
    with make_processor(person, web=web) as processor:
        result = processor.compact("-", ctx_url)
    assert result["@context"] == ctx_url
    assert result["id"] == "http://example.org/people/alice"
    assert result["name"] == "Alice"


def test_primary_is_loaded_once(web, person):
    ctx_url = web.add("https://example.test/processor/once-ctx.jsonld", {"@context": {}})
    processor = make_processor(person, web=web)
    processor.flatten("-", context=ctx_url)
    with pytest.raises(RuntimeError):
        processor.load_input("-")


def test_link_header_context_is_applied(web):
    web.add(
        "https://example.test/processor/link-ctx.jsonld",
        {"@context": {"name": "http://schema.org/name"}},
    )
    url = web.add(
        "https://example.test/processor/link-doc.json",
        {"@id": "http://example.org/x", "name": "X"},
        content_type="application/json",
        headers={
            "link": '<https://example.test/processor/link-ctx.jsonld>; '
            'rel="http://www.w3.org/ns/json-ld#context"'
        },
    )
    loader = DocumentLoader(client=web.client())
    processor = Processor(loader=loader)
    result = processor.expand(url)
    assert result == [{"@id": "http://example.org/x", "http://schema.org/name": [{"@value": "X"}]}]


def test_to_rdf_nquads(person):
    processor = make_processor(person)
    nquads = processor.to_rdf("-", output_format="nquads")
    assert (
        "<http://example.org/people/alice> <http://schema.org/knows> "
        "<http://example.org/people/bob> ." in nquads
    )


def test_to_rdf_dataset(person):
    processor = make_processor(person)
    dataset = processor.to_rdf("-")
    assert len(dataset["@default"]) == 2


def test_canonize_defaults_to_nquads():
    document = {"@id": "http://example.org/a", "http://example.org/p": "v"}
    processor = make_processor(document)
    assert processor.canonize("-") == '<http://example.org/a> <http://example.org/p> "v" .\n'


def test_canonize_algorithms_agree_on_simple_input():
    document = {"@id": "http://example.org/a", "http://example.org/p": "v"}
    urgna = make_processor(document).canonize("-", algorithm=CanonicalizationAlgorithm.URGNA2012)
    urdna = make_processor(document).canonize("-", algorithm=CanonicalizationAlgorithm.URDNA2015)
    assert urgna == urdna


def test_format_json_skips_processing():
    document = {"colour": "red"}
    assert make_processor(document).format_document("-", "json") == document


def test_format_unknown():
    with pytest.raises(OptionError, match="Unknown format: yaml"):
        make_processor({}).format_document("-", "yaml")


def test_from_rdf_native_types():
    text = '<http://example.org/a> <http://example.org/n> "5"^^<http://www.w3.org/2001/XMLSchema#integer> .\n'
    plain = make_processor(text).from_rdf("-")
    native = make_processor(text).from_rdf("-", use_native_types=True)
    assert plain[0]["http://example.org/n"][0]["@value"] == "5"
    assert native[0]["http://example.org/n"][0]["@value"] == 5


def test_turtle_primary_with_auto_base(tmp_path):
    path = tmp_path / "data.ttl"
    path.write_text('<a> <http://example.org/p> "v" .\n', encoding="utf-8")
    base = resolve_base(str(path), auto_base=True)
    options = ProcessingOptions(base=base, allow=ALLOW_ALL)
    with Processor(options=options) as processor:
        result = processor.expand(str(path))
    assert result[0]["@id"] == (tmp_path / "a").as_uri()
