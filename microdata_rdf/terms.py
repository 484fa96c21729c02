"""
RDF term model for the Microdata extractor.

Terms are plain rdflib terms (URIRef, BNode, Literal). This module adds the
triple record, the namespaces the extractor needs and the URI helpers used by
every other module: absoluteness checks, fragment escaping and resolution
against a base, with optional strict / canonicalize / intern policy hooks.
"""

import re
from typing import Dict, NamedTuple, Optional, Union
from urllib.parse import urljoin, urlsplit, urlunsplit

from rdflib import BNode, Literal, Namespace, URIRef
from rdflib.namespace import OWL, RDF, RDFS, XSD

from .errors import ValidationError

MD = Namespace("http://www.w3.org/ns/md#")
SCHEMA = Namespace("http://schema.org/")

Subject = Union[URIRef, BNode]
Term = Union[URIRef, BNode, Literal]

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_FRAG_UNSAFE_RE = re.compile(r'["#%<>\[\\\]^{|}]')
_LANGTAG_RE = re.compile(r"^[a-zA-Z]+(?:-[a-zA-Z0-9]+)*$")

__all__ = [
    "MD", "SCHEMA", "RDF", "RDFS", "OWL", "XSD",
    "Subject", "Term", "Triple", "TermPolicy",
    "is_absolute", "is_language_tag", "frag_escape", "resolve",
]


class Triple(NamedTuple):
    """A single RDF statement. Plain tuple, so it can go straight into rdflib.Graph.add."""
    subject: Subject
    predicate: URIRef
    object: Term


def is_absolute(value: Optional[str]) -> bool:
    """True if value carries a URI scheme."""
    if value is None:
        return False
    return bool(_SCHEME_RE.match(str(value)))


def is_language_tag(tag: Optional[str]) -> bool:
    return bool(tag) and bool(_LANGTAG_RE.match(tag))


def frag_escape(name: str) -> str:
    """
    Percent-encode the characters that may not appear in a URI fragment.

    Args:
        name: Raw property name

    Returns:
        The name with " # % < > [ \\ ] ^ { | } replaced by uppercase %XX escapes
    """
    return _FRAG_UNSAFE_RE.sub(
        lambda m: "".join(f"%{b:02X}" for b in m.group(0).encode("utf-8")),
        str(name),
    )


def canonicalize_uri(value: str) -> str:
    """Lower-case the scheme and host of an absolute URI."""
    if not is_absolute(value):
        return value
    parts = urlsplit(value)
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, parts.fragment))


class TermPolicy:
    """
    Term construction hooks applied to every URI and literal the extractor creates.

    strict: raise ValidationError for URIs that are not absolute
    canonicalize: lower-case scheme/host of URIs, let rdflib normalise literals
    intern: hand out one shared URIRef per distinct URI string
    """

    def __init__(self, strict: bool = False, canonicalize: bool = False, intern: bool = True):
        self.strict = strict
        self.canonicalize = canonicalize
        self.intern = intern
        self._interned: Dict[str, URIRef] = {}

    def uri(self, value: str) -> URIRef:
        if self.strict and not is_absolute(value):
            raise ValidationError(f"URI is not absolute: {value!r}")
        if self.canonicalize:
            value = canonicalize_uri(value)
        if not self.intern:
            return URIRef(value)
        uri = self._interned.get(value)
        if uri is None:
            uri = self._interned[value] = URIRef(value)
        return uri

    def literal(self, value: str,
                datatype: Optional[URIRef] = None,
                language: Optional[str] = None) -> Literal:
        # Lexical forms are kept verbatim unless canonicalization is requested
        if datatype is not None:
            return Literal(value, datatype=datatype, normalize=self.canonicalize)
        return Literal(value, lang=language or None, normalize=self.canonicalize)


def resolve(value: Optional[str], base: Optional[str] = None, policy: Optional[TermPolicy] = None) -> URIRef:
    """
    Resolve a URI reference.

    Args:
        value: URI reference, possibly relative; None is treated as ""
        base: Base URI to join against; itself resolved once before joining
        policy: Term policy to apply to the result

    Returns:
        URIRef for the resolved reference
    """
    value = "" if value is None else str(value)
    if base:
        value = urljoin(str(resolve(base)), value)
    if policy is None:
        return URIRef(value)
    return policy.uri(value)
