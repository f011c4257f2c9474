"""SPARQL query templates for node resolution and enrichment."""

from __future__ import annotations

import re
from typing import Iterable

# Characters that may not appear inside an IRIREF.
_UNSAFE_IRI = re.compile(r'[<>"{}|\\^`\s]')

NODE_QUERY = """
SELECT DISTINCT ?pred ?obj WHERE {{
  {node} ?pred ?obj .
}}"""

INCOMING_RELATIONS_QUERY = """
SELECT DISTINCT ?sub ?pred WHERE {{
  ?sub ?pred {node}
}}
LIMIT {limit}"""

ANCESTRY_QUERY = """
SELECT DISTINCT ?id ?title ?parent WHERE {{
  {node} {closures} ?id .
{label_clause}  OPTIONAL {{ ?id {parents} ?parent . }}
}}
LIMIT {limit}"""

LABELS_QUERY = """
SELECT DISTINCT ?s ?label WHERE {{
  VALUES ?s {{
    {ids}
  }}
  ?s {labels} ?label .
}}
LIMIT {limit}"""

OBJECT_IDS_QUERY = """
SELECT DISTINCT ?o WHERE {{
  {node} {preds} ?o .
}}
LIMIT {limit}"""

HEALTH_CHECK_QUERY = "ASK {}"


def is_safe_iri(iri: str) -> bool:
    return bool(iri) and not _UNSAFE_IRI.search(iri)


def wrap_iri(iri: str) -> str:
    if not is_safe_iri(iri):
        raise ValueError(f"IRI cannot be embedded in a query: {iri[:100]!r}")
    return f"<{iri}>"


def _alternation(iris: Iterable[str]) -> str:
    return "|".join(wrap_iri(iri) for iri in iris)


def _closure_union(iris: Iterable[str]) -> str:
    return "|".join(f"{wrap_iri(iri)}*" for iri in iris)


def _label_clause(label_predicates: Iterable[str]) -> str:
    labels = _alternation(label_predicates)
    if not labels:
        return ""
    return f"  OPTIONAL {{ ?id {labels} ?title . }}\n"


def node_query(node_id: str) -> str:
    return NODE_QUERY.format(node=wrap_iri(node_id))


def incoming_relations_query(node_id: str, limit: int = 500) -> str:
    return INCOMING_RELATIONS_QUERY.format(node=wrap_iri(node_id), limit=limit)


def ancestry_query(
    node_id: str,
    parent_predicates: Iterable[str],
    label_predicates: Iterable[str],
    limit: int = 500,
) -> str:
    """Each parent predicate is followed on its own; chains that mix them are not."""
    parents = list(parent_predicates)
    return ANCESTRY_QUERY.format(
        node=wrap_iri(node_id),
        closures=_closure_union(parents),
        parents=_alternation(parents),
        label_clause=_label_clause(label_predicates),
        limit=limit,
    )


def labels_query(ids: Iterable[str], label_predicates: Iterable[str], limit: int = 10_000) -> str:
    return LABELS_QUERY.format(
        ids="\n    ".join(wrap_iri(i) for i in ids),
        labels=_alternation(label_predicates),
        limit=limit,
    )


def object_ids_query(node_id: str, predicates: Iterable[str], limit: int = 10_000) -> str:
    return OBJECT_IDS_QUERY.format(
        node=wrap_iri(node_id),
        preds=_alternation(predicates),
        limit=limit,
    )
