"""
Vocabulary expansion: a small forward-chaining evaluator for a subset of the
OWL 2 RL property rules (prp-spo1, prp-eqp1, prp-eqp2).

The input triples are loaded into an rdflib Graph, every rule (a SPARQL
CONSTRUCT query) is evaluated against a snapshot of that graph, and the
consequences are added until a pass adds nothing.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from rdflib import Graph
from rdflib.plugins.sparql import prepareQuery

from .terms import OWL, RDFS, Triple

logger = logging.getLogger(__name__)


class Rule:
    """An entailment rule expressed as a SPARQL CONSTRUCT query."""

    def __init__(self, name: str, query: str):
        self.name = name
        self.query = prepareQuery(query, initNs={"rdfs": RDFS, "owl": OWL})

    def __repr__(self) -> str:
        return f"Rule({self.name!r})"

    def execute(self, graph: Graph) -> Iterator[Triple]:
        """
        Evaluate the rule against a graph.

        Args:
            graph: Graph queried for antecedent matches; not modified

        Returns:
            Iterator over the constructed triples
        """
        for triple in graph.query(self.query):
            yield Triple(*triple)


RULES: List[Rule] = [
    Rule("prp-spo1", """
        CONSTRUCT { ?x ?p2 ?y }
        WHERE { ?p1 rdfs:subPropertyOf ?p2 . ?x ?p1 ?y }
    """),
    Rule("prp-eqp1", """
        CONSTRUCT { ?x ?p2 ?y }
        WHERE { ?p1 owl:equivalentProperty ?p2 . ?x ?p1 ?y }
    """),
    Rule("prp-eqp2", """
        CONSTRUCT { ?x ?p1 ?y }
        WHERE { ?p1 owl:equivalentProperty ?p2 . ?x ?p2 ?y }
    """),
]


def owl_entailment(graph: Graph, rules: Optional[List[Rule]] = None) -> List[Triple]:
    """
    Saturate a graph under the entailment rules, in place.

    Each pass evaluates every rule against a snapshot taken at the start of the
    pass, so facts derived in a pass only feed the next one. Stops on the first
    pass that does not grow the graph.

    Args:
        graph: Working graph
        rules: Rules to apply (RULES by default)

    Returns:
        The derived triples that were new, in derivation order
    """
    rules = RULES if rules is None else rules
    derived: List[Triple] = []

    old_count = -1
    count = len(graph)
    while old_count < count:
        logger.debug(f"entailment: old: {old_count} count: {count}")
        old_count = count

        snapshot = Graph()
        for triple in graph:
            snapshot.add(triple)

        for rule in rules:
            for triple in rule.execute(snapshot):
                if triple in graph:
                    continue
                logger.debug(f"entailment({rule.name}): {' '.join(term.n3() for term in triple)} .")
                graph.add(triple)
                derived.append(triple)

        count = len(graph)

    logger.debug(f"entailment: final count: {count}")
    return derived


def expand(triples: Iterable[Triple]) -> List[Triple]:
    """
    Perform vocabulary expansion on a set of triples.

    Args:
        triples: Extracted triples, typically the default graph of one document

    Returns:
        The distinct input triples in input order, followed by every entailed
        triple in the order it was derived
    """
    graph = Graph()
    result: List[Triple] = []
    for triple in triples:
        triple = Triple(*triple)
        if triple not in graph:
            graph.add(triple)
            result.append(triple)

    logger.debug(f"expand: loaded {len(graph)} triples into the default graph")
    result.extend(owl_entailment(graph))
    return result
