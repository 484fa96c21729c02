"""
Element facade consumed by the item graph builder, plus its BeautifulSoup adapter.

The builder never touches bs4 directly. It only sees `Element` objects, whose
identity is a stable integer index into the document's element arena (bs4 tags
compare by content, so two identical tags would otherwise collide).
"""

import logging
from typing import Dict, List, Optional, Union
from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

XML_PARSERS = {"xml", "lxml-xml"}


class Element:
    """Minimal capability surface the extraction core needs from a document node."""

    def identity(self) -> int:
        raise NotImplementedError

    def tag_name(self) -> str:
        raise NotImplementedError

    def attribute(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def has_attribute(self, name: str) -> bool:
        raise NotImplementedError

    def children(self) -> List["Element"]:
        raise NotImplementedError

    def parent(self) -> Optional["Element"]:
        raise NotImplementedError

    def text(self) -> str:
        raise NotImplementedError

    def base(self) -> Optional[str]:
        raise NotImplementedError

    def language(self) -> Optional[str]:
        raise NotImplementedError

    def find_by_id(self, ident: str) -> Optional["Element"]:
        raise NotImplementedError

    def path(self) -> str:
        """Display path used to prefix diagnostics."""
        return f"<{self.tag_name()}>"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.path()}>"


class SoupElement(Element):
    """Element facade over a single bs4 Tag."""

    def __init__(self, document: "SoupDocument", tag: Tag, index: int):
        self.document = document
        self.tag = tag
        self._index = index

    def identity(self) -> int:
        return self._index

    def tag_name(self) -> str:
        return self.tag.name

    def attribute(self, name: str) -> Optional[str]:
        value = self.tag.get(name)
        # bs4 splits multi-valued attributes (class, rel, ...) into lists
        if isinstance(value, list):
            return " ".join(value)
        return value

    def has_attribute(self, name: str) -> bool:
        return self.tag.has_attr(name)

    def children(self) -> List[Element]:
        return [self.document.element(child) for child in self.tag.children if isinstance(child, Tag)]

    def parent(self) -> Optional[Element]:
        parent = self.tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return self.document.element(parent)

    def text(self) -> str:
        return self.tag.get_text()

    def base(self) -> Optional[str]:
        """Nearest self-or-ancestor xml:base."""
        node: Optional[Element] = self
        while node is not None:
            value = node.attribute("xml:base")
            if value is not None:
                return value
            node = node.parent()
        return None

    def language(self) -> Optional[str]:
        """
        Language in effect for this element.

        In XML documents xml:lang takes precedence over lang; in HTML documents
        lang does. An empty value means "unknown" and stops inheritance.
        """
        names = ("xml:lang", "lang") if self.document.is_xml else ("lang", "xml:lang")
        node: Optional[Element] = self
        while node is not None:
            for name in names:
                value = node.attribute(name)
                if value is not None:
                    return value
            node = node.parent()
        return None

    def find_by_id(self, ident: str) -> Optional[Element]:
        return self.document.find_by_id(ident)

    def path(self) -> str:
        names = [tag.name for tag in reversed(list(self.tag.parents)) if not isinstance(tag, BeautifulSoup)]
        names.append(self.tag.name)
        return "/" + "/".join(names)


class SoupDocument:
    """
    A parsed HTML/XML document with an arena of its elements.

    Every tag is numbered in document order; that number is the element's identity.
    """

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup
        self.is_xml = bool(getattr(soup, "is_xml", False))
        self._tags: List[Tag] = soup.find_all(True)
        self._positions: Dict[int, int] = {id(tag): i for i, tag in enumerate(self._tags)}
        self._elements: Dict[int, SoupElement] = {}
        self._ids: Dict[str, int] = {}

        for i, tag in enumerate(self._tags):
            ident = tag.get("id")
            if ident is not None and ident not in self._ids:
                self._ids[ident] = i

        logger.debug(f"Indexed {len(self._tags)} elements, {len(self._ids)} ids")

    @classmethod
    def parse(cls, markup: Union[str, bytes], parser: str = "html.parser") -> "SoupDocument":
        """
        Parse markup into a document.

        Args:
            markup: HTML or XML text
            parser: BeautifulSoup tree builder ("html.parser", "lxml", "html5lib", "xml")

        Returns:
            SoupDocument for the parsed tree
        """
        return cls(BeautifulSoup(markup, "xml" if parser in XML_PARSERS else parser))

    def element(self, tag: Tag) -> SoupElement:
        index = self._positions[id(tag)]
        element = self._elements.get(index)
        if element is None:
            element = self._elements[index] = SoupElement(self, tag, index)
        return element

    def root(self) -> Optional[SoupElement]:
        return self.element(self._tags[0]) if self._tags else None

    def find_by_id(self, ident: str) -> Optional[SoupElement]:
        index = self._ids.get(ident)
        return None if index is None else self.element(self._tags[index])

    def base_href(self) -> Optional[str]:
        """Value of the first <base href>, without any fragment."""
        base = self.soup.find("base", href=True)
        if base is None:
            return None
        return base["href"].split("#")[0]

    def top_level_items(self) -> List[SoupElement]:
        """Elements with itemscope that are not themselves property values, in document order."""
        return [
            self.element(tag)
            for tag in self._tags
            if tag.has_attr("itemscope")
            and not tag.has_attr("itemprop")
            and not tag.has_attr("itemprop-reverse")
        ]
