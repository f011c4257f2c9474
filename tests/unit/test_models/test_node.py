"""Unit tests for the graph node model accessors."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rdf_explorer.models.node import (
    Direction,
    NodeObj,
    endpoint_id_of,
    id_of,
    is_resolved,
    make_node,
    object_values_for,
    objects_for,
    predicates_of,
)

KNOWS = "http://xmlns.com/foaf/0.1/knows"
NAME = "http://xmlns.com/foaf/0.1/name"
MISSING = "http://example.org/missing"


def _out(value: str) -> NodeObj:
    return NodeObj(value=value, direction=Direction.OUTGOING)


def _in(value: str) -> NodeObj:
    return NodeObj(value=value, direction=Direction.INCOMING)


@pytest.fixture
def node():
    return make_node(
        "http://example.org/alice",
        {
            KNOWS: [_out("http://example.org/bob"), _in("http://example.org/carol"), _out("http://example.org/bob")],
            NAME: [_out("Alice"), _out("")],
        },
        endpoint_id="A",
    )


def test_objects_for_follows_predicate_then_insertion_order(node):
    objs = objects_for(node, [NAME, KNOWS])
    assert [o.value for o in objs] == [
        "Alice",
        "http://example.org/bob",
        "http://example.org/carol",
        "http://example.org/bob",
    ]


def test_objects_for_skips_missing_predicates_and_empty_values(node):
    assert [o.value for o in objects_for(node, [MISSING, NAME])] == ["Alice"]


def test_objects_for_none_node():
    assert objects_for(None, [KNOWS]) == []


def test_object_values_by_direction_do_not_leak(node):
    incoming = object_values_for(node, [KNOWS, NAME], direction=Direction.INCOMING)
    outgoing = object_values_for(node, [KNOWS, NAME], direction=Direction.OUTGOING)
    assert incoming == ["http://example.org/carol"]
    assert outgoing == ["http://example.org/bob", "http://example.org/bob", "Alice"]
    assert not set(incoming) & set(outgoing)


def test_object_values_unique_keeps_first_occurrence(node):
    assert object_values_for(node, [KNOWS], unique=True) == [
        "http://example.org/bob",
        "http://example.org/carol",
    ]


def test_id_and_endpoint(node):
    assert id_of(node) == "http://example.org/alice"
    assert endpoint_id_of(node) == "A"


def test_id_of_unresolved_node():
    assert id_of({}) is None
    assert id_of(None) is None
    assert endpoint_id_of(make_node("http://example.org/x")) is None


def test_predicates_and_resolution(node):
    assert set(predicates_of(node)) == {"@id", "endpointId", KNOWS, NAME}
    assert is_resolved(node)
    assert not is_resolved(make_node("http://example.org/x", endpoint_id="A"))


def test_node_obj_is_immutable():
    obj = _out("x")
    with pytest.raises(ValidationError):
        obj.value = "y"
