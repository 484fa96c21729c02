"""
Property value coercion.

Turns a property element into an RDF term, dispatching on the element's tag
name and attributes. Numeric (data/meter) and temporal (time) values are
scanned lexically and given the first matching XML Schema datatype.
"""

import logging
import re
from typing import Optional, Tuple, Union

from rdflib import URIRef

from .dom import Element
from .errors import ValidationError
from .terms import XSD, Term, TermPolicy, is_language_tag, resolve

logger = logging.getLogger(__name__)


class ItemMarker:
    """Property value that is itself an item; the caller recurses into it."""

    def __repr__(self) -> str:
        return "ITEM"


ITEM = ItemMarker()

# ASCII digits only; every grammar is applied with fullmatch
INTEGER_RE = re.compile(r"[+\-]?[0-9]+")
DOUBLE_RE = re.compile(r"NaN|[+\-]?INF|[+\-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+\-]?[0-9]+)?")
FLOAT_RE = DOUBLE_RE

_TZ = r"(?:Z|[+\-][0-9]{2}:[0-9]{2})?"
DATE_RE = re.compile(r"-?[0-9]{4,}-[0-9]{2}-[0-9]{2}" + _TZ)
TIME_RE = re.compile(r"[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]+)?" + _TZ)
DATETIME_RE = re.compile(r"-?[0-9]{4,}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]+)?" + _TZ)
DURATION_RE = re.compile(
    r"-?P(?=[0-9]|T[0-9])(?:[0-9]+Y)?(?:[0-9]+M)?(?:[0-9]+D)?"
    r"(?:T(?=[0-9])(?:[0-9]+H)?(?:[0-9]+M)?(?:[0-9]+(?:\.[0-9]+)?S)?)?"
)

NUMERIC_GRAMMARS: Tuple[Tuple[URIRef, "re.Pattern[str]"], ...] = (
    (XSD.integer, INTEGER_RE),
    (XSD.float, FLOAT_RE),
    (XSD.double, DOUBLE_RE),
)

TEMPORAL_GRAMMARS: Tuple[Tuple[URIRef, "re.Pattern[str]"], ...] = (
    (XSD.date, DATE_RE),
    (XSD.time, TIME_RE),
    (XSD.dateTime, DATETIME_RE),
    (XSD.duration, DURATION_RE),
)


def classify_numeric(value: str) -> Optional[URIRef]:
    """Datatype for a data/meter value, or None if it is not numeric."""
    for datatype, grammar in NUMERIC_GRAMMARS:
        if grammar.fullmatch(value):
            # float and double share a lexical space; double wins
            if datatype == XSD.float and DOUBLE_RE.fullmatch(value):
                return XSD.double
            return datatype
    return None


def classify_temporal(value: str) -> Optional[URIRef]:
    """Datatype for a time value, or None if no temporal grammar matches."""
    for datatype, grammar in TEMPORAL_GRAMMARS:
        if grammar.fullmatch(value):
            return datatype
    return None


class ValueCoercer:
    """Computes the property value of property elements within one document."""

    SRC_ELEMENTS = {"audio", "embed", "iframe", "img", "source", "track", "video"}
    HREF_ELEMENTS = {"a", "area", "link"}
    DATA_ELEMENTS = {"object"}
    NUMERIC_ELEMENTS = {"data", "meter"}

    def __init__(self, policy: Optional[TermPolicy] = None):
        self.policy = policy or TermPolicy()

    def property_value(self, element: Element, document_base: str = "") -> Union[Term, ItemMarker]:
        """
        Determine the value of a property element.

        Args:
            element: Element carrying itemprop or itemprop-reverse
            document_base: Base URI used where no xml:base is in effect

        Returns:
            ITEM if the element is itself an item, otherwise a URIRef or Literal
        """
        name = element.tag_name().lower()

        if element.has_attribute("itemscope"):
            return ITEM

        if element.has_attribute("content"):
            return self.policy.literal(element.attribute("content"), language=self._language(element))

        if name in self.NUMERIC_ELEMENTS and element.has_attribute("value"):
            value = element.attribute("value")
            return self.policy.literal(value, datatype=classify_numeric(value))

        if name in self.SRC_ELEMENTS:
            return self._uri(element, "src", document_base)
        if name in self.HREF_ELEMENTS:
            return self._uri(element, "href", document_base)
        if name in self.DATA_ELEMENTS:
            return self._uri(element, "data", document_base)

        if name == "time":
            if element.has_attribute("datetime"):
                value = element.attribute("datetime")
            else:
                value = element.text()
            datatype = classify_temporal(value)
            if datatype is not None:
                return self.policy.literal(value, datatype=datatype)
            return self.policy.literal(value, language=self._language(element))

        return self.policy.literal(element.text(), language=self._language(element))

    def _uri(self, element: Element, attribute: str, document_base: str) -> URIRef:
        value = element.attribute(attribute)
        if value is None:
            message = f"{element.path()}: missing {attribute} attribute"
            if self.policy.strict:
                raise ValidationError(message)
            logger.debug(f"{message}, resolving empty reference")
        return resolve(value, element.base() or document_base, self.policy)

    def _language(self, element: Element) -> Optional[str]:
        language = element.language()
        if not language:
            return None
        if not is_language_tag(language):
            message = f"{element.path()}: invalid language tag {language!r}"
            if self.policy.strict:
                raise ValidationError(message)
            logger.warning(f"{message}, ignoring it")
            return None
        return language
