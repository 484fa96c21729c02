"""
Reader: the public entry points of the Microdata extractor.

MicrodataReader parses a document, runs the item graph builder over it and
optionally the vocabulary expansion pass, and hands the triples to a sink, a
list or an rdflib Graph.
"""

import logging
import re
from typing import IO, Callable, List, Optional, Union

from bs4 import BeautifulSoup
from rdflib import Graph

from .builder import ItemGraphBuilder
from .config import config
from .data_models import ReaderOptions
from .dom import Element, SoupDocument, SoupElement
from .errors import ValidationError
from .expansion import expand
from .registry import RegistryIndex
from .terms import MD, OWL, RDF, RDFS, SCHEMA, XSD, TermPolicy, Triple

logger = logging.getLogger(__name__)

Source = Union[str, bytes, IO, BeautifulSoup, SoupDocument]

_MICRODATA_RE = re.compile(r"<[^>]*\s(itemprop|itemtype|itemref|itemscope|itemid)\b[^>]*>", re.IGNORECASE)

__all__ = ["MicrodataReader", "extract", "expand", "detect"]


def detect(sample: Union[str, bytes]) -> bool:
    """True if a text sample looks like it carries Microdata markup."""
    if isinstance(sample, bytes):
        sample = sample.decode("utf-8", errors="replace")
    return bool(_MICRODATA_RE.search(sample))


def load_registry(path: Optional[str] = None) -> RegistryIndex:
    """
    Load a registry index.

    Args:
        path: Registry JSON file; falls back to MICRODATA_REGISTRY, then to the
            registry bundled with the package

    Returns:
        The loaded RegistryIndex
    """
    path = path or config.REGISTRY
    if path:
        return RegistryIndex.from_file(path)
    return RegistryIndex.default()


def extract(document_root: Union[Element, SoupDocument],
            base_uri: str = "",
            registry_index: Optional[RegistryIndex] = None,
            policy: Optional[TermPolicy] = None) -> List[Triple]:
    """
    Extract the triples of every item at or below document_root.

    Args:
        document_root: Root element of a parsed document, or the whole document
        base_uri: Base URI supplied by the caller
        registry_index: Vocabulary registry; an empty index when omitted
        policy: Term construction policy

    Returns:
        Triples in emission order
    """
    triples: List[Triple] = []
    builder = ItemGraphBuilder(triples.append, registry_index, policy)

    if isinstance(document_root, SoupDocument):
        builder.parse_document(document_root, base_uri)
        return triples

    if isinstance(document_root, SoupElement):
        base = builder.document_base(document_root.document, base_uri)
    else:
        base = (base_uri or "").split("#")[0]
    builder.parse_element(document_root, base)
    return triples


class MicrodataReader:
    """Reads the Microdata items of one HTML or XML document as RDF."""

    def __init__(self,
                 source: Source,
                 options: Optional[ReaderOptions] = None,
                 registry: Optional[RegistryIndex] = None):
        """
        Initialize the reader.

        Args:
            source: Markup text or bytes, a file-like object, a BeautifulSoup tree
                or an already wrapped SoupDocument
            options: Reader options; defaults come from the environment
            registry: Vocabulary registry; the configured or bundled one when omitted
        """
        self.options = options or ReaderOptions()
        self.registry = registry if registry is not None else load_registry()
        self.document = self._document(source)

        if self.options.strict and self.document.root() is None:
            raise ValidationError("Empty document")

    def _document(self, source: Source) -> SoupDocument:
        if isinstance(source, SoupDocument):
            return source
        if isinstance(source, BeautifulSoup):
            return SoupDocument(source)
        if hasattr(source, "read"):
            source = source.read()
        return SoupDocument.parse(source, self.options.parser)

    def policy(self) -> TermPolicy:
        return TermPolicy(strict=self.options.strict,
                          canonicalize=self.options.canonicalize,
                          intern=self.options.intern)

    def each_triple(self, sink: Callable[[Triple], None]) -> None:
        """
        Stream every triple of the document to a sink.

        With vocabulary expansion enabled the extracted triples are collected and
        expanded first, then streamed.
        """
        if not self.options.vocab_expansion:
            builder = ItemGraphBuilder(sink, self.registry, self.policy())
            builder.parse_document(self.document, self.options.base_uri)
            return

        triples: List[Triple] = []
        ItemGraphBuilder(triples.append, self.registry, self.policy()).parse_document(
            self.document, self.options.base_uri)
        expanded = expand(triples)
        logger.debug(f"Vocabulary expansion added {len(expanded) - len(set(triples))} triples")
        for triple in expanded:
            sink(triple)

    def triples(self) -> List[Triple]:
        triples: List[Triple] = []
        self.each_triple(triples.append)
        return triples

    def graph(self) -> Graph:
        """Triples of the document as an rdflib Graph with the common prefixes bound."""
        graph = Graph()
        for prefix, namespace in (("rdf", RDF), ("rdfs", RDFS), ("owl", OWL),
                                  ("xsd", XSD), ("md", MD), ("schema", SCHEMA)):
            graph.bind(prefix, namespace)
        self.each_triple(graph.add)
        return graph

    def serialize(self, format: str = "nt") -> str:
        return self.graph().serialize(format=format)
