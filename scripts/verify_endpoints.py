"""Verify every configured SPARQL endpoint and search index answers."""

from __future__ import annotations

import asyncio
import sys

import httpx

from rdf_explorer.config import get_settings
from rdf_explorer.models.endpoint import EndpointUrls
from rdf_explorer.sparql.connection import SparqlConnection
from rdf_explorer.utils.exceptions import TransportError


async def check_sparql(conn: SparqlConnection, endpoint: EndpointUrls) -> bool:
    try:
        ok = await conn.health_check(endpoint)
    except TransportError as exc:
        print(f"[FAIL] SPARQL {endpoint.id}: {exc}")
        return False
    status = "OK" if ok else "WARN"
    print(f"[{status}] SPARQL {endpoint.id}: {endpoint.sparql} {'answers ASK' if ok else 'unexpected ASK result'}")
    return ok


async def check_index(endpoint: EndpointUrls) -> bool:
    if not endpoint.elastic:
        print(f"[SKIP] Index {endpoint.id}: no elastic URL configured")
        return True
    try:
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                f"{endpoint.elastic.rstrip('/')}/_search",
                json={"size": 0, "query": {"match_all": {}}},
                timeout=15,
            )
            resp.raise_for_status()
            total = resp.json().get("hits", {}).get("total", {})
        count = total.get("value") if isinstance(total, dict) else total
        print(f"[OK] Index {endpoint.id}: {count} documents")
        return True
    except Exception as exc:
        print(f"[FAIL] Index {endpoint.id}: {exc}")
        return False


async def main() -> None:
    settings = get_settings()
    print("=" * 50)
    print("rdf-explorer: Endpoint Verification")
    print("=" * 50)

    if not settings.ENDPOINTS:
        print("[FAIL] ENDPOINTS is empty; nothing to check")
        sys.exit(1)

    async with SparqlConnection(settings) as conn:
        results = await asyncio.gather(
            *(check_sparql(conn, endpoint) for endpoint in settings.ENDPOINTS),
            *(check_index(endpoint) for endpoint in settings.ENDPOINTS),
        )

    print("=" * 50)
    passed = sum(results)
    total = len(results)
    print(f"Results: {passed}/{total} checks passed")
    if not all(results):
        print("Some checks failed. Review output above.")
        sys.exit(1)
    print("All endpoints operational.")


if __name__ == "__main__":
    asyncio.run(main())
