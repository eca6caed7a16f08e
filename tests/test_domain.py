"""Tests for loader kinds, allow lists and input types."""

import pytest

from jsonld_cli.core.domain.input_type import InputType
from jsonld_cli.core.domain.loaders import (
    ALLOW_ALL,
    ALLOW_DEFAULT,
    ALLOW_NONE,
    LoaderKind,
    parse_allow,
)
from jsonld_cli.core.errors import InputTypeError, OptionError


@pytest.mark.parametrize(
    "url,kind",
    [
        ("-", LoaderKind.STDIN),
        ("stdin://", LoaderKind.STDIN),
        ("http://example.org/doc", LoaderKind.HTTP),
        ("HTTPS://example.org/doc", LoaderKind.HTTPS),
        ("doc.jsonld", LoaderKind.FILE),
        ("/tmp/doc.jsonld", LoaderKind.FILE),
        ("file:///tmp/doc.jsonld", LoaderKind.FILE),
    ],
)
def test_loader_kind_for_url(url, kind):
    assert LoaderKind.for_url(url) is kind


def test_parse_allow_default():
    """No -a/--allow means HTTP and HTTPS only."""
    assert parse_allow(None) == ALLOW_DEFAULT
    assert ALLOW_DEFAULT == {LoaderKind.HTTP, LoaderKind.HTTPS}


def test_parse_allow_list():
    assert parse_allow("file, https") == {LoaderKind.FILE, LoaderKind.HTTPS}
    assert parse_allow("stdin") == {LoaderKind.STDIN}


def test_parse_allow_all_wins_over_none():
    assert parse_allow("none,all") == ALLOW_ALL
    assert parse_allow("file,none") == ALLOW_NONE
    assert parse_allow("ALL") == ALLOW_ALL


def test_parse_allow_unknown_loader():
    with pytest.raises(OptionError) as exc_info:
        parse_allow("http,ftp")
    assert exc_info.value.message == "Unknown loader in allow list: ftp"
    assert "stdin" in exc_info.value.details["valid"]


@pytest.mark.parametrize(
    "value,expected",
    [
        ("json", InputType.JSON),
        ("application/ld+json", InputType.JSON),
        ("nquads", InputType.NQUADS),
        ("application/n-quads", InputType.NQUADS),
        ("Turtle", InputType.TURTLE),
        ("text/turtle", InputType.TURTLE),
        ("trig", InputType.TRIG),
        ("nt", InputType.NTRIPLES),
        ("application/rdf+xml", InputType.RDFXML),
    ],
)
def test_input_type_from_name(value, expected):
    assert InputType.from_name(value) is expected


def test_input_type_rejects_html():
    with pytest.raises(InputTypeError, match="HTML/RDFa input is not supported"):
        InputType.from_name("text/html")


def test_input_type_unknown_name():
    with pytest.raises(InputTypeError, match="Unknown input type: yaml"):
        InputType.from_name("yaml")


def test_input_type_from_media_type():
    assert InputType.from_media_type("application/ld+json; charset=utf-8") is InputType.JSON
    assert InputType.from_media_type("application/activity+json") is InputType.JSON
    assert InputType.from_media_type("application/n-quads") is InputType.NQUADS
    assert InputType.from_media_type("text/plain") is None
    assert InputType.from_media_type(None) is None
    with pytest.raises(InputTypeError):
        InputType.from_media_type("text/html; charset=utf-8")


def test_input_type_from_location():
    assert InputType.from_location("data/doc.jsonld") is InputType.JSON
    assert InputType.from_location("https://example.org/data.ttl?x=1") is InputType.TURTLE
    assert InputType.from_location("C:\\data\\graph.nq") is InputType.NQUADS
    assert InputType.from_location("-") is None


def test_input_type_is_rdf():
    assert not InputType.JSON.is_rdf
    assert all(t.is_rdf for t in InputType if t is not InputType.JSON)
