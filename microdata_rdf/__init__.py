"""
HTML Microdata to RDF extraction.

Parses Microdata items out of HTML/XML documents, maps them to RDF triples
through a vocabulary registry, and optionally expands the result with
rdfs:subPropertyOf / owl:equivalentProperty entailment.
"""

from .builder import CrawlResult, EvaluationContext, ItemGraphBuilder
from .data_models import PropertyMetadata, ReaderOptions, RegistrySource
from .dom import Element, SoupDocument, SoupElement
from .errors import MicrodataError, RegistryError, ValidationError
from .expansion import RULES, Rule, owl_entailment
from .reader import MicrodataReader, detect, expand, extract, load_registry
from .registry import Registry, RegistryIndex, predicate_uri
from .terms import MD, TermPolicy, Triple, frag_escape, is_absolute, resolve
from .values import ITEM, ValueCoercer

__all__ = [
    "CrawlResult",
    "EvaluationContext",
    "ItemGraphBuilder",
    "PropertyMetadata",
    "ReaderOptions",
    "RegistrySource",
    "Element",
    "SoupDocument",
    "SoupElement",
    "MicrodataError",
    "RegistryError",
    "ValidationError",
    "RULES",
    "Rule",
    "owl_entailment",
    "MicrodataReader",
    "detect",
    "expand",
    "extract",
    "load_registry",
    "Registry",
    "RegistryIndex",
    "predicate_uri",
    "MD",
    "TermPolicy",
    "Triple",
    "frag_escape",
    "is_absolute",
    "resolve",
    "ITEM",
    "ValueCoercer",
]
