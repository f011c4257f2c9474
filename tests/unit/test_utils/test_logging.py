"""Unit tests for the logging setup."""

from __future__ import annotations

import logging

from rdf_explorer.utils.logging import setup_logging, truncate_bulky_fields


def test_long_query_and_error_fields_are_truncated():
    processor = truncate_bulky_fields(10)
    event = processor(None, "info", {
        "event": "sparql_query_failed",
        "query": "SELECT ?s WHERE { ?s ?p ?o }",
        "error": "short",
        "endpoint_id": "A" * 50,
    })

    assert event["query"] == "SELECT ?s ... (28 chars)"
    assert event["error"] == "short"
    assert event["endpoint_id"] == "A" * 50


def test_setup_logging_sets_level_and_quiets_http_clients():
    setup_logging("DEBUG", "console")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
