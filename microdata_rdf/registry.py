"""
Vocabulary registry: maps a vocabulary prefix to property metadata.

A registry entry knows how to turn a bare property name into a predicate URI
and which alias properties (subPropertyOf / equivalentProperty) a predicate
expands to. The RegistryIndex holds all entries of a loaded registry
description and is read-only once built.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from rdflib import URIRef

from .data_models import PropertyMetadata, RegistrySource
from .errors import RegistryError
from .terms import frag_escape, is_absolute

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_PATH = Path(__file__).resolve().parent / "registry.json"

_LAST_SEGMENT_RE = re.compile(r"([/#])[^/#]*$")


class Registry:
    """Property metadata for a single vocabulary prefix."""

    def __init__(self, prefix_uri: str, properties: Optional[Dict[str, PropertyMetadata]] = None):
        self.prefix_uri = URIRef(prefix_uri)
        self.properties: Dict[str, PropertyMetadata] = properties or {}
        self.property_base = str(prefix_uri)
        # Predicates are built by concatenation, so the base must end in a separator
        if not self.property_base.endswith(("/", "#")):
            self.property_base += "#"

    def __repr__(self) -> str:
        return f"Registry({str(self.prefix_uri)!r}, {len(self.properties)} properties)"

    @staticmethod
    def derive(type_uri: str) -> "Registry":
        """
        Build an ad-hoc registry from an item type with no registry entry.

        Args:
            type_uri: Absolute item type, e.g. http://foo/bar or http://foo#Bar

        Returns:
            Registry whose prefix is the type with its last path segment
            (after the final / or #) removed
        """
        return Registry(_LAST_SEGMENT_RE.sub(r"\1", str(type_uri)))

    def tokenize(self, predicate: str) -> str:
        predicate = str(predicate)
        if predicate.startswith(self.property_base):
            return predicate[len(self.property_base):]
        return predicate

    def expand(self, predicate: str) -> Iterator[URIRef]:
        """Yield every subPropertyOf alias of predicate, then every equivalentProperty alias."""
        metadata = self.properties.get(self.tokenize(predicate))
        if metadata is None:
            return
        for uri in metadata.sub_property_of:
            yield URIRef(uri)
        for uri in metadata.equivalent_property:
            yield URIRef(uri)


def predicate_uri(name: str, vocabulary: Optional[Registry], document_base: str) -> URIRef:
    """
    Generate the predicate URI for a property name.

    Args:
        name: Property name from itemprop / itemprop-reverse
        vocabulary: Vocabulary of the current item type; None when the item
            has no type in effect
        document_base: Document base URI

    Returns:
        name itself when absolute; otherwise the fragment-escaped name appended
        to the vocabulary, or set as the fragment of the document base when
        there is no vocabulary
    """
    if is_absolute(name):
        return URIRef(name)

    escaped = frag_escape(name)
    if vocabulary is None:
        return URIRef(str(document_base).split("#")[0] + "#" + escaped)
    return URIRef(vocabulary.property_base + escaped)


class RegistryIndex:
    """
    All vocabulary entries of a registry description, in registration order.

    Lookup returns the first registered prefix that is a literal prefix of the
    type URI, so overlapping prefixes resolve in registration order.
    """

    def __init__(self, entries: Optional[Mapping[str, Registry]] = None):
        self._entries: Dict[str, Registry] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, prefix: object) -> bool:
        return str(prefix) in self._entries

    def __iter__(self) -> Iterator[Registry]:
        return iter(self._entries.values())

    def prefixes(self) -> List[str]:
        return list(self._entries)

    def get(self, prefix: str) -> Optional[Registry]:
        return self._entries.get(str(prefix))

    def register(self, prefix: str, properties: Optional[Dict[str, PropertyMetadata]] = None) -> Registry:
        registry = Registry(prefix, properties)
        self._entries[str(prefix)] = registry
        return registry

    def find(self, type_uri: Optional[str]) -> Optional[Registry]:
        """Registry for the first prefix matching type_uri, or None."""
        if type_uri is None:
            return None
        type_uri = str(type_uri)
        for prefix, registry in self._entries.items():
            if type_uri.startswith(prefix):
                return registry
        return None

    @classmethod
    def from_dict(cls, description: Mapping[str, Any]) -> "RegistryIndex":
        """
        Build an index from a parsed registry description.

        Args:
            description: Mapping of vocabulary prefix to {"properties": {...}}

        Returns:
            RegistryIndex with one entry per prefix

        Raises:
            RegistryError: If the description is malformed
        """
        if not isinstance(description, Mapping):
            raise RegistryError(f"Registry description must be an object, got {type(description).__name__}")

        index = cls()
        for prefix, entry in description.items():
            if not isinstance(entry, Mapping):
                logger.debug(f"Skipping registry entry {prefix!r}: not an object")
                continue
            try:
                source = RegistrySource.model_validate(entry)
            except PydanticValidationError as e:
                raise RegistryError(f"Invalid registry entry {prefix!r}: {e}") from e
            index.register(prefix, source.properties)

        logger.debug(f"Loaded registry with {len(index)} vocabularies")
        return index

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "RegistryIndex":
        try:
            description = json.loads(text)
        except json.JSONDecodeError as e:
            raise RegistryError(f"Failed to parse registry: {e}") from e
        return cls.from_dict(description)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RegistryIndex":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise RegistryError(f"Failed to read registry {path}: {e}") from e
        logger.info(f"Loading registry from {path}")
        return cls.from_json(text)

    @classmethod
    def default(cls) -> "RegistryIndex":
        """Registry bundled with the package."""
        return cls.from_file(DEFAULT_REGISTRY_PATH)
