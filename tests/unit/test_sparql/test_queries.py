"""Unit tests for SPARQL query construction."""

from __future__ import annotations

import pytest

from rdf_explorer.sparql import queries

NODE = "http://example.org/alice"
LABEL = "http://www.w3.org/2000/01/rdf-schema#label"
PARENT = "http://www.w3.org/2000/01/rdf-schema#subClassOf"
BROADER = "http://www.w3.org/2004/02/skos/core#broader"


def test_wrap_iri():
    assert queries.wrap_iri(NODE) == f"<{NODE}>"


@pytest.mark.parametrize("iri", ["", "http://x/a b", "http://x/<a>", 'http://x/"a"', "http://x/{a}"])
def test_wrap_iri_rejects_unsafe(iri):
    assert not queries.is_safe_iri(iri)
    with pytest.raises(ValueError):
        queries.wrap_iri(iri)


def test_node_query():
    query = queries.node_query(NODE)
    assert "SELECT DISTINCT ?pred ?obj" in query
    assert f"<{NODE}> ?pred ?obj ." in query


def test_incoming_relations_query_has_limit():
    query = queries.incoming_relations_query(NODE, 500)
    assert f"?sub ?pred <{NODE}>" in query
    assert query.rstrip().endswith("LIMIT 500")


def test_ancestry_query_unions_per_predicate_closures():
    query = queries.ancestry_query(NODE, [PARENT, BROADER], [LABEL], 500)
    assert f"<{NODE}> <{PARENT}>*|<{BROADER}>* ?id ." in query
    assert f"(<{PARENT}>|<{BROADER}>)*" not in query
    assert f"OPTIONAL {{ ?id <{LABEL}> ?title . }}" in query
    assert f"OPTIONAL {{ ?id <{PARENT}>|<{BROADER}> ?parent . }}" in query
    assert "LIMIT 500" in query


def test_ancestry_query_without_labels_drops_title_clause():
    query = queries.ancestry_query(NODE, [PARENT], [], 10)
    assert "?title ." not in query
    assert "?parent" in query


def test_labels_query_batches_ids():
    query = queries.labels_query([NODE, "http://example.org/bob"], [LABEL], 100)
    assert "VALUES ?s {" in query
    assert f"<{NODE}>" in query
    assert "<http://example.org/bob>" in query
    assert f"?s <{LABEL}> ?label ." in query


def test_object_ids_query():
    query = queries.object_ids_query(NODE, [PARENT, BROADER], 10)
    assert f"<{NODE}> <{PARENT}>|<{BROADER}> ?o ." in query
