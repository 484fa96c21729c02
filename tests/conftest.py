import os

import pytest

# Keep a developer's .env from leaking into the defaults under test
os.environ.setdefault("MICRODATA_BASE_URI", "")
os.environ.setdefault("MICRODATA_REGISTRY", "")
os.environ.setdefault("MICRODATA_STRICT", "false")
os.environ.setdefault("MICRODATA_VOCAB_EXPANSION", "false")

from microdata_rdf.dom import SoupDocument
from microdata_rdf.reader import extract
from microdata_rdf.registry import RegistryIndex
from microdata_rdf.terms import TermPolicy

BASE = "http://example/"

REGISTRY = {
    "http://schema.org/": {
        "properties": {
            "additionalType": {"subPropertyOf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"},
        }
    },
    "http://microformats.org/profile/hcard": {},
    "http://expansion/": {
        "properties": {
            "subPropertyOf": {"subPropertyOf": "http://expansion/subPropertyOf_ext"},
            "equivalentProperty": {"equivalentProperty": ["http://expansion/eq1", "http://expansion/eq2"]},
        }
    },
}


@pytest.fixture
def registry():
    return RegistryIndex.from_dict(REGISTRY)


@pytest.fixture
def parse(registry):
    """Extract the triples of an HTML fragment against the test registry."""
    def _parse(html, base_uri=BASE, strict=False, parser="html.parser"):
        document = SoupDocument.parse(html, parser)
        return extract(document, base_uri, registry, TermPolicy(strict=strict))
    return _parse
