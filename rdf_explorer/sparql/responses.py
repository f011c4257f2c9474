"""Normalization of SPARQL response bodies into flat rows.

Two shapes are accepted:

* standard SPARQL-JSON: ``{"results": {"bindings": [{"var": {"value": ...}}]}}``
* a bare JSON array of row objects, whose cells are either plain strings or
  ``{"value": ...}`` objects

Anything else raises :class:`MalformedResponseWarning`; callers treat that
as an empty result set.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from rdf_explorer.utils.exceptions import MalformedResponseWarning
from rdf_explorer.utils.logging import get_logger

logger = get_logger(__name__)

Row = dict[str, str | None]


def _describe(body: Any) -> str:
    if isinstance(body, dict):
        return f"object with keys {sorted(body)[:10]}"
    return type(body).__name__


def _raw_rows(body: Any, endpoint_id: str) -> list[Any]:
    if isinstance(body, dict):
        results = body.get("results")
        if isinstance(results, dict) and isinstance(results.get("bindings"), list):
            return results["bindings"]
    elif isinstance(body, list):
        return body
    raise MalformedResponseWarning(endpoint_id, _describe(body))


def _cell(raw: Any) -> str | None:
    if isinstance(raw, dict):
        raw = raw.get("value")
    if raw is None:
        return None
    return raw if isinstance(raw, str) else str(raw)


def parse_rows(
    body: Any,
    columns: Sequence[str],
    endpoint_id: str,
    required: Iterable[str] | None = None,
) -> list[Row]:
    """Flatten ``body`` into ``{column: value}`` rows.

    Rows missing any ``required`` column (all columns by default) are dropped.
    Optional columns that are absent come back as ``None``.
    """
    required_cols = set(columns if required is None else required)
    rows: list[Row] = []
    dropped = 0
    for raw in _raw_rows(body, endpoint_id):
        if not isinstance(raw, dict):
            dropped += 1
            continue
        row = {col: _cell(raw.get(col)) for col in columns}
        if any(not row[col] for col in required_cols):
            dropped += 1
            continue
        rows.append(row)

    if dropped:
        logger.warning(
            "sparql_rows_dropped",
            endpoint_id=endpoint_id,
            dropped=dropped,
            columns=list(columns),
        )
    return rows
