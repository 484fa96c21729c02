import json

import pytest
from rdflib import URIRef

from microdata_rdf.data_models import PropertyMetadata
from microdata_rdf.errors import RegistryError
from microdata_rdf.registry import Registry, RegistryIndex, predicate_uri
from microdata_rdf.terms import RDF


def test_property_base_appends_fragment_separator():
    assert Registry("http://microformats.org/profile/hcard").property_base == \
        "http://microformats.org/profile/hcard#"
    assert Registry("http://schema.org/").property_base == "http://schema.org/"
    assert Registry("http://example/vocab#").property_base == "http://example/vocab#"


@pytest.mark.parametrize("type_uri, prefix", [
    ("http://foo/bar", "http://foo/"),
    ("http://foo#bar", "http://foo#"),
    ("http://foo/a/b#Thing", "http://foo/a/b#"),
    ("http://foo/", "http://foo/"),
])
def test_derive_strips_last_segment(type_uri, prefix):
    assert Registry.derive(type_uri).prefix_uri == URIRef(prefix)


def test_find_uses_registration_order(registry):
    index = RegistryIndex()
    index.register("http://example/")
    index.register("http://example/vocab/")

    assert index.find("http://example/vocab/Thing").prefix_uri == URIRef("http://example/")
    assert registry.find("http://schema.org/Person").prefix_uri == URIRef("http://schema.org/")
    assert registry.find("http://unknown/Thing") is None
    assert registry.find(None) is None


def test_find_matches_prefix_without_separator(registry):
    vocab = registry.find("http://microformats.org/profile/hcard")

    assert vocab is not None
    assert predicate_uri("fn", vocab, "http://example/") == \
        URIRef("http://microformats.org/profile/hcard#fn")


def test_expand_yields_sub_properties_then_equivalents():
    vocab = Registry("http://example/", {
        "name": PropertyMetadata.model_validate({
            "equivalentProperty": "http://xmlns.com/foaf/0.1/name",
            "subPropertyOf": ["http://www.w3.org/2000/01/rdf-schema#label"],
        }),
    })

    assert list(vocab.expand(URIRef("http://example/name"))) == [
        URIRef("http://www.w3.org/2000/01/rdf-schema#label"),
        URIRef("http://xmlns.com/foaf/0.1/name"),
    ]
    assert list(vocab.expand(URIRef("http://example/other"))) == []


def test_expand_is_restartable(registry):
    vocab = registry.find("http://schema.org/Person")
    predicate = URIRef("http://schema.org/additionalType")

    assert list(vocab.expand(predicate)) == list(vocab.expand(predicate)) == [RDF.type]


@pytest.mark.parametrize("name, expected", [
    ("http://example/abs", "http://example/abs"),
    ("name", "http://schema.org/name"),
    ("q#r", "http://schema.org/q%23r"),
])
def test_predicate_uri_with_vocabulary(name, expected):
    assert predicate_uri(name, Registry("http://schema.org/"), "http://example/") == URIRef(expected)


def test_predicate_uri_without_vocabulary_uses_document_base():
    assert predicate_uri("name", None, "http://example/doc#frag") == URIRef("http://example/doc#name")
    assert predicate_uri("x%y", None, "http://example/doc") == URIRef("http://example/doc#x%25y")


def test_from_dict_skips_non_object_entries():
    index = RegistryIndex.from_dict({
        "http://example/": {"properties": {"p": {"subPropertyOf": "http://example/q"}}},
        "@comment": "not a vocabulary",
    })

    assert index.prefixes() == ["http://example/"]
    assert "http://example/" in index
    assert index.get("http://example/").properties["p"].sub_property_of == ["http://example/q"]


def test_from_dict_rejects_malformed_entries():
    with pytest.raises(RegistryError, match="http://example/"):
        RegistryIndex.from_dict({"http://example/": {"properties": ["not", "a", "mapping"]}})

    with pytest.raises(RegistryError):
        RegistryIndex.from_dict(["not", "a", "mapping"])


def test_from_json_rejects_invalid_json():
    with pytest.raises(RegistryError, match="Failed to parse registry"):
        RegistryIndex.from_json("{ not json")


def test_from_file_round_trips(tmp_path):
    path = tmp_path / "registry.json"
    path.write_text(json.dumps({"http://example/": {}}), encoding="utf-8")

    index = RegistryIndex.from_file(path)

    assert len(index) == 1
    assert [vocab.prefix_uri for vocab in index] == [URIRef("http://example/")]


def test_from_file_missing_raises(tmp_path):
    with pytest.raises(RegistryError, match="Failed to read registry"):
        RegistryIndex.from_file(tmp_path / "missing.json")


def test_default_registry_knows_schema_org():
    index = RegistryIndex.default()

    for prefix in ("http://schema.org/", "https://schema.org/"):
        vocab = index.find(prefix + "Person")
        assert vocab is not None
        assert list(vocab.expand(prefix + "additionalType")) == [RDF.type]
