import pytest
from rdflib import Literal, URIRef

from microdata_rdf.errors import ValidationError
from microdata_rdf.terms import XSD, TermPolicy, canonicalize_uri, frag_escape, is_absolute, is_language_tag, resolve


@pytest.mark.parametrize("value, expected", [
    ("http://example/", True),
    ("urn:isbn:123", True),
    ("mailto:a@example.org", True),
    ("/relative", False),
    ("name", False),
    ("", False),
    (None, False),
])
def test_is_absolute(value, expected):
    assert is_absolute(value) is expected


def test_frag_escape():
    assert frag_escape('a"b#c%d<e>f[g\\h]i^j{k|l}') == "a%22b%23c%25d%3Ce%3Ef%5Bg%5Ch%5Di%5Ej%7Bk%7Cl%7D"
    assert frag_escape("plain-name_1") == "plain-name_1"


def test_is_language_tag():
    assert is_language_tag("en")
    assert is_language_tag("en-US")
    assert not is_language_tag("en_US")
    assert not is_language_tag("")


def test_resolve():
    assert resolve("b", "http://example/a/") == URIRef("http://example/a/b")
    assert resolve("../c", "http://example/a/b/") == URIRef("http://example/a/c")
    assert resolve("http://other/x", "http://example/") == URIRef("http://other/x")
    assert resolve("rel") == URIRef("rel")
    assert resolve(None, "http://example/") == URIRef("http://example/")


def test_strict_policy_rejects_relative_uris():
    policy = TermPolicy(strict=True)

    assert policy.uri("http://example/") == URIRef("http://example/")
    with pytest.raises(ValidationError):
        policy.uri("relative")
    with pytest.raises(ValidationError):
        resolve("relative", policy=policy)


def test_interned_uris_are_shared():
    policy = TermPolicy()

    assert policy.uri("http://example/a") is policy.uri("http://example/a")
    assert TermPolicy(intern=False).uri("http://example/a") == URIRef("http://example/a")


def test_canonicalize():
    assert canonicalize_uri("HTTP://Example.ORG/Path") == "http://example.org/Path"
    assert TermPolicy(canonicalize=True).uri("HTTP://Example.ORG/") == URIRef("http://example.org/")


def test_literals_keep_lexical_form():
    literal = TermPolicy().literal("1.1e1", datatype=XSD.double)

    assert str(literal) == "1.1e1"
    assert literal.datatype == XSD.double
    assert TermPolicy().literal("hi", language="en") == Literal("hi", lang="en")
