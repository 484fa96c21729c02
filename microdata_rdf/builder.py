"""
Item graph builder: turns Microdata items into RDF triples.

Walks every top-level item depth-first, assigning each item a subject
(memoized per element for the whole document), emitting type triples,
discovering properties through children and itemref, and emitting one triple
per property name, plus registry alias triples and reverse-property triples.
"""

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, NamedTuple, Optional

from rdflib import BNode, Literal, URIRef

from .dom import Element, SoupDocument
from .errors import ValidationError
from .registry import Registry, RegistryIndex, predicate_uri
from .terms import RDF, Subject, Term, TermPolicy, Triple, is_absolute, resolve
from .values import ITEM, ValueCoercer

logger = logging.getLogger(__name__)

Sink = Callable[[Triple], None]


@dataclass(frozen=True)
class EvaluationContext:
    """
    State threaded through the recursion.

    memory is shared by every derived context of one document parse; the
    current type and vocabulary are overridden per item.
    """
    document_base: str = ""
    memory: Dict[int, Subject] = field(default_factory=dict)
    current_type: Optional[URIRef] = None
    current_vocabulary: Optional[Registry] = None


class CrawlResult(NamedTuple):
    """Elements found by a property crawl, or the reason the crawl failed."""
    elements: List[Element]
    error: Optional[str] = None


class ItemGraphBuilder:
    """Generates triples for the items of a document and feeds them to a sink."""

    def __init__(self,
                 sink: Sink,
                 registry_index: Optional[RegistryIndex] = None,
                 policy: Optional[TermPolicy] = None):
        self.sink = sink
        self.registry_index = registry_index if registry_index is not None else RegistryIndex()
        self.policy = policy or TermPolicy()
        self.values = ValueCoercer(self.policy)

    @staticmethod
    def document_base(document: SoupDocument, base_uri: Optional[str] = None) -> str:
        """
        Effective base of a document.

        Args:
            document: Parsed document
            base_uri: Base supplied by the caller (e.g. the retrieval URL)

        Returns:
            The <base href> resolved against base_uri if present, else base_uri,
            with any fragment removed
        """
        base = base_uri or ""
        href = document.base_href()
        if href is not None:
            base = str(resolve(href, base)) if base else href
        return base.split("#")[0]

    def parse_document(self, document: SoupDocument, base_uri: Optional[str] = None) -> List[Subject]:
        """
        Generate triples for every top-level item of a document.

        Args:
            document: Parsed document
            base_uri: Base supplied by the caller

        Returns:
            Subjects of the top-level items, in document order
        """
        return self.parse_items(document.top_level_items(), self.document_base(document, base_uri))

    def parse_element(self, root: Element, document_base: str = "") -> List[Subject]:
        """Generate triples for the top-level items at or below an arbitrary element."""
        return self.parse_items(self.top_level_items(root), document_base)

    def parse_items(self, items: List[Element], document_base: str) -> List[Subject]:
        logger.debug(f"parse_items: base={document_base!r}, {len(items)} top-level items")
        if items and not is_absolute(document_base):
            logger.warning(f"Document base {document_base!r} is not absolute; "
                           f"predicates of untyped items will be relative")
        ctx = EvaluationContext(document_base=document_base)
        return [self.generate_triples(item, ctx) for item in items]

    @staticmethod
    def top_level_items(root: Element) -> List[Element]:
        """Self-or-descendant items of root that are not property values, in document order."""
        items: List[Element] = []
        stack = [root]
        while stack:
            element = stack.pop()
            if (element.has_attribute("itemscope")
                    and not element.has_attribute("itemprop")
                    and not element.has_attribute("itemprop-reverse")):
                items.append(element)
            stack.extend(reversed(element.children()))
        return items

    def generate_triples(self, item: Element, ctx: EvaluationContext) -> Subject:
        """
        Generate the triples for one item.

        Args:
            item: Element carrying itemscope
            ctx: Evaluation context of the enclosing item

        Returns:
            The item's subject
        """
        subject = ctx.memory.get(item.identity())
        if subject is not None:
            # Already generated (or in progress further up the recursion)
            logger.debug(f"{item.path()}: reusing subject={subject.n3()}")
            return subject

        subject = self._item_subject(item, ctx)
        ctx.memory[item.identity()] = subject
        logger.debug(f"{item.path()}: subject={subject.n3()}, current_type={ctx.current_type}")

        item_type: Optional[URIRef] = None
        for token in (item.attribute("itemtype") or "").split():
            if not is_absolute(token):
                continue
            type_uri = self.policy.uri(token)
            if item_type is None:
                item_type = type_uri
            self._emit(item, Triple(subject, RDF.type, type_uri))

        if item_type is None:
            item_type = ctx.current_type

        vocabulary = None
        if item_type is not None:
            vocabulary = self.registry_index.find(item_type) or Registry.derive(item_type)
        item_ctx = replace(ctx, current_type=item_type, current_vocabulary=vocabulary)

        for element in self.item_properties(item):
            value = self._value(element, item_ctx)
            for name in (element.attribute("itemprop") or "").split():
                predicate = self._predicate(name, item_ctx)
                self._emit(element, Triple(subject, predicate, value))
                if vocabulary is not None:
                    for alias in vocabulary.expand(predicate):
                        self._emit(element, Triple(subject, self.policy.uri(str(alias)), value))

        for element in self.item_properties(item, reverse=True):
            value = self._value(element, item_ctx)
            for name in (element.attribute("itemprop-reverse") or "").split():
                if isinstance(value, Literal):
                    self._error(element, f"reverse property {name!r} has literal value {value!r}, skipped")
                    continue
                self._emit(element, Triple(value, self._predicate(name, item_ctx), subject))

        return subject

    def item_properties(self, item: Element, reverse: bool = False) -> List[Element]:
        """
        Property elements of an item.

        A failed crawl (itemref recursion) is logged and yields no properties;
        it never propagates further.

        Args:
            item: Element carrying itemscope
            reverse: Select itemprop-reverse elements instead of itemprop ones

        Returns:
            Property elements in discovery order
        """
        result = self.crawl_properties(item, [], reverse)
        if result.error is not None:
            self._error(item, f"itemref recursion: {result.error}")
            return []
        return result.elements

    def crawl_properties(self, root: Element, memory: List[Element], reverse: bool = False) -> CrawlResult:
        """
        Crawl the properties of root, failing if a root repeats along the crawl.

        Nested items are crawled whatever their property direction, since the
        builder recurses into both.
        """
        if any(seen.identity() == root.identity() for seen in memory):
            return CrawlResult([], f"{root.path()} is crawled again through its own properties")

        found = self.elements_in_item(root)
        if found.error is not None:
            return found

        properties = [
            element for element in found.elements
            if element.has_attribute("itemprop") or element.has_attribute("itemprop-reverse")
        ]

        new_memory = memory + [root]
        for element in properties:
            if element.has_attribute("itemscope"):
                nested = self.crawl_properties(element, new_memory)
                if nested.error is not None:
                    return CrawlResult([], nested.error)

        attribute = "itemprop-reverse" if reverse else "itemprop"
        return CrawlResult([element for element in properties if element.has_attribute(attribute)])

    def elements_in_item(self, root: Element) -> CrawlResult:
        """
        Breadth-first collection of the elements of an item.

        Starts from root's children plus the elements named by its itemref,
        without descending into nested items. An itemref naming root itself, or
        any element dequeued a second time, fails the collection. Root reached
        through an itemref'd ancestor is an ordinary opaque result.
        """
        pending = deque(root.children())
        for ident in (root.attribute("itemref") or "").split():
            referenced = root.find_by_id(ident)
            if referenced is None:
                logger.debug(f"{root.path()}: itemref {ident!r} matches no element")
                continue
            if referenced.identity() == root.identity():
                return CrawlResult([], f"{root.path()} references itself through itemref {ident!r}")
            pending.append(referenced)

        results: List[Element] = []
        seen = set()
        while pending:
            current = pending.popleft()
            if current.identity() in seen:
                return CrawlResult([], f"{current.path()} reached twice from {root.path()}")
            seen.add(current.identity())
            results.append(current)
            if not current.has_attribute("itemscope"):
                pending.extend(current.children())

        return CrawlResult(results)

    def _item_subject(self, item: Element, ctx: EvaluationContext) -> Subject:
        itemid = item.attribute("itemid")
        if itemid is not None:
            uri = resolve(itemid, item.base() or ctx.document_base)
            if is_absolute(uri):
                return self.policy.uri(str(uri))
            logger.debug(f"{item.path()}: itemid {itemid!r} is not absolute, using a blank node")
        return BNode()

    def _predicate(self, name: str, ctx: EvaluationContext) -> URIRef:
        return self.policy.uri(str(predicate_uri(name, ctx.current_vocabulary, ctx.document_base)))

    def _value(self, element: Element, ctx: EvaluationContext) -> Term:
        value = self.values.property_value(element, ctx.document_base)
        if value is ITEM:
            return self.generate_triples(element, ctx)
        return value

    def _emit(self, element: Element, triple: Triple) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"{element.path()}: {' '.join(term.n3() for term in triple)} .")
        self.sink(triple)

    def _error(self, element: Element, message: str) -> None:
        message = f"{element.path()}: {message}"
        if self.policy.strict:
            raise ValidationError(message)
        logger.warning(message)
