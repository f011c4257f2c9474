"""Search orchestration: query + filter state, paging and result publication."""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, Protocol

from rdf_explorer.config import Settings
from rdf_explorer.models.node import NodeModel, id_of
from rdf_explorer.models.search import (
    NO_FILTERS,
    NO_RESULTS,
    ElasticFiltersModel,
    SearchResultsModel,
)
from rdf_explorer.search.hits import hits_from_responses, parse_to_nodes, type_counts_from_responses
from rdf_explorer.services.enrichment_service import EnrichmentService
from rdf_explorer.utils.logging import get_logger
from rdf_explorer.utils.observable import StateChannel

logger = get_logger(__name__)


class SearchConnector(Protocol):
    async def search_entities(
        self,
        query_str: str,
        filters: ElasticFiltersModel,
        offset: int,
        limit: int,
    ) -> list[dict[str, Any]]: ...


class SearchService:
    """Owns the search state and republishes results on every change.

    ``filters``, ``results`` and ``is_loading`` are state channels. Publishing
    new filters schedules a fresh search on the running event loop. Hits are
    published as soon as the index answers; incoming-relation enrichment runs
    in the background, mutates the already-published nodes in place and then
    republishes the results so subscribers see the added edges.

    Each search captures the current generation; clearing the results starts
    a new generation, and responses from an older one are dropped.
    """

    def __init__(
        self,
        connector: SearchConnector,
        enricher: EnrichmentService,
        settings: Settings,
    ) -> None:
        self._connector = connector
        self._enricher = enricher
        self._page_size = settings.RESULTS_PER_PAGE_PER_ENDPOINT
        self._dedupe_by_id = settings.DEDUPE_RESULTS_BY_ID

        self.query_str: str = settings.DEFAULT_SEARCH_QUERY
        self.page: int = 0
        self.filters: StateChannel[ElasticFiltersModel] = StateChannel("filters", NO_FILTERS)
        self.results: StateChannel[SearchResultsModel] = StateChannel("results", NO_RESULTS)
        self.is_loading: StateChannel[bool] = StateChannel("is_loading", False)

        self._generation = 0
        self._in_flight = 0
        self._background: set[asyncio.Task] = set()
        self._unsubscribe_filters = self.filters.subscribe(self._on_filter_change)

    # ── Filters ──────────────────────────────────────────────────────

    def has_filter(self, filter_id: str, value: str) -> bool:
        return self.filters.value.has(filter_id, value)

    def active_filters(self) -> list[tuple[str, str]]:
        return [
            (filter_id, value)
            for filter_id, values in self.filters.value.as_lists().items()
            for value in values
        ]

    def toggle_filter(self, filter_id: str, value: str) -> None:
        updated = self.filters.value.toggled(filter_id, value)
        self.filters.publish(updated)

    def clear_filters(self) -> None:
        self.filters.publish(NO_FILTERS)

    def _on_filter_change(self, filters: ElasticFiltersModel) -> None:
        logger.info("filters_changed", filters=filters.as_lists())
        self._spawn(self.execute(clear_first=True), "search")

    # ── Searching ────────────────────────────────────────────────────

    def clear_results(self) -> None:
        self._generation += 1
        self.page = 0
        self.results.publish(NO_RESULTS)

    async def search(self, query_str: str | None = None) -> None:
        """Start a fresh search, optionally with a new query string."""
        if query_str is not None:
            self.query_str = query_str
        await self.execute(clear_first=True)

    async def execute(self, clear_first: bool = False) -> None:
        if clear_first:
            self.clear_results()

        generation = self._generation
        page = self.page
        self._set_loading(1)
        try:
            responses = await self._connector.search_entities(
                self.query_str,
                self.filters.value,
                page * self._page_size,
                self._page_size,
            )
            if generation != self._generation:
                logger.info(
                    "stale_search_discarded",
                    generation=generation,
                    current_generation=self._generation,
                    page=page,
                )
                return

            type_counts = type_counts_from_responses(responses)
            hit_nodes = parse_to_nodes(hits_from_responses(responses))
            if hit_nodes:
                self.page += 1

            existing = self.results.value.nodes
            new_nodes = self._dedupe(existing, hit_nodes) if self._dedupe_by_id else hit_nodes
            if new_nodes:
                self._spawn(self._enrich_page(new_nodes, generation), "enrichment")

            self.results.publish(
                SearchResultsModel(nodes=(*existing, *new_nodes), type_counts=type_counts)
            )
            logger.info(
                "search_page_published",
                query=self.query_str,
                page=page,
                hits=len(hit_nodes),
                total=len(existing) + len(new_nodes),
            )
        except Exception as exc:
            logger.error(
                "search_failed",
                query=self.query_str,
                page=page,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        finally:
            self._set_loading(-1)

    async def _enrich_page(self, nodes: list[NodeModel], generation: int) -> None:
        await self._enricher.enrich_with_incoming_relations(nodes)
        if generation != self._generation:
            return
        # Same node references, republished so subscribers see the new edges.
        current = self.results.value
        self.results.publish(SearchResultsModel(nodes=current.nodes, type_counts=current.type_counts))

    @staticmethod
    def _dedupe(existing: tuple[NodeModel, ...], hit_nodes: list[NodeModel]) -> list[NodeModel]:
        seen = {id_of(node) for node in existing}
        unique: list[NodeModel] = []
        for node in hit_nodes:
            node_id = id_of(node)
            if node_id in seen:
                continue
            seen.add(node_id)
            unique.append(node)
        return unique

    def _set_loading(self, delta: int) -> None:
        self._in_flight = max(self._in_flight + delta, 0)
        loading = self._in_flight > 0
        if loading != self.is_loading.value:
            self.is_loading.publish(loading)

    # ── Background tasks ─────────────────────────────────────────────

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning("background_task_skipped", task=name, reason="no running event loop")
            return None

        task = loop.create_task(coro, name=name)
        self._background.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("background_task_failed", task=task.get_name(), error=str(task.exception()))

    async def wait_for_background(self) -> None:
        """Wait until every scheduled search and enrichment has finished."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def aclose(self) -> None:
        self._unsubscribe_filters()
        tasks = list(self._background)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
