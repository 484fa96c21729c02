from rdflib import Graph, Literal, URIRef

from microdata_rdf.expansion import RULES, Rule, expand, owl_entailment
from microdata_rdf.terms import OWL, RDFS, Triple

EX = "http://example/"
FOAF_NAME = URIRef("http://xmlns.com/foaf/0.1/name")
NAME = URIRef(EX + "name")
ME = URIRef(EX + "#me")


def test_sub_property_entailment():
    triples = [
        Triple(NAME, RDFS.subPropertyOf, FOAF_NAME),
        Triple(ME, NAME, Literal("G")),
    ]

    expanded = expand(triples)

    assert expanded == triples + [Triple(ME, FOAF_NAME, Literal("G"))]


def test_expansion_is_idempotent():
    triples = [
        Triple(NAME, RDFS.subPropertyOf, FOAF_NAME),
        Triple(ME, NAME, Literal("G")),
    ]

    once = expand(triples)
    twice = expand(once)

    assert set(twice) == set(once)
    assert len(twice) == len(once)


def test_equivalent_property_works_both_ways():
    label = URIRef(EX + "label")
    triples = [
        Triple(NAME, OWL.equivalentProperty, label),
        Triple(ME, NAME, Literal("forward")),
        Triple(ME, label, Literal("backward")),
    ]

    expanded = set(expand(triples))

    assert Triple(ME, label, Literal("forward")) in expanded
    assert Triple(ME, NAME, Literal("backward")) in expanded


def test_chained_sub_properties_need_another_pass():
    p1, p2, p3 = (URIRef(EX + name) for name in ("p1", "p2", "p3"))
    triples = [
        Triple(p1, RDFS.subPropertyOf, p2),
        Triple(p2, RDFS.subPropertyOf, p3),
        Triple(ME, p1, Literal("v")),
    ]

    expanded = expand(triples)

    assert expanded[3:] == [Triple(ME, p2, Literal("v")), Triple(ME, p3, Literal("v"))]


def test_duplicate_input_triples_collapse():
    triple = Triple(ME, NAME, Literal("G"))

    assert expand([triple, triple]) == [triple]


def test_no_rules_fire_without_declarations():
    triples = [Triple(ME, NAME, Literal("G")), Triple(ME, FOAF_NAME, Literal("H"))]

    assert expand(triples) == triples


def test_owl_entailment_saturates_graph_in_place():
    graph = Graph()
    graph.add((NAME, RDFS.subPropertyOf, FOAF_NAME))
    graph.add((ME, NAME, Literal("G")))

    derived = owl_entailment(graph)

    assert derived == [Triple(ME, FOAF_NAME, Literal("G"))]
    assert len(graph) == 3
    assert owl_entailment(graph) == []


def test_rule_executes_construct_query_without_touching_graph():
    graph = Graph()
    graph.add((NAME, OWL.equivalentProperty, FOAF_NAME))
    graph.add((ME, FOAF_NAME, Literal("G")))
    eqp2 = next(rule for rule in RULES if rule.name == "prp-eqp2")

    assert list(eqp2.execute(graph)) == [Triple(ME, NAME, Literal("G"))]
    assert len(graph) == 2


def test_custom_rule():
    label = URIRef(EX + "label")
    rule = Rule("name-is-label", f"CONSTRUCT {{ ?x <{label}> ?y }} WHERE {{ ?x <{NAME}> ?y }}")
    graph = Graph()
    graph.add((ME, NAME, Literal("G")))

    assert owl_entailment(graph, [rule]) == [Triple(ME, label, Literal("G"))]


def test_rule_set():
    assert [rule.name for rule in RULES] == ["prp-spo1", "prp-eqp1", "prp-eqp2"]
