"""Search state: filter terms and accumulated results."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from rdf_explorer.models.node import NodeModel


class ElasticFiltersModel(BaseModel):
    """Active term filters, keyed by filter id.

    A key is present only while its value set is non-empty, so two filter
    states with the same active values always compare equal.
    """

    model_config = ConfigDict(frozen=True)

    terms: dict[str, frozenset[str]] = Field(default_factory=dict)

    def has(self, filter_id: str, value: str) -> bool:
        return value in self.terms.get(filter_id, frozenset())

    def toggled(self, filter_id: str, value: str) -> ElasticFiltersModel:
        values = self.terms.get(filter_id, frozenset()) ^ {value}
        terms = dict(self.terms)
        if values:
            terms[filter_id] = frozenset(values)
        else:
            terms.pop(filter_id, None)
        return ElasticFiltersModel(terms=terms)

    def as_lists(self) -> dict[str, list[str]]:
        return {filter_id: sorted(values) for filter_id, values in sorted(self.terms.items())}


NO_FILTERS = ElasticFiltersModel()

TypeCountsModel = dict[str, int]


@dataclass(frozen=True)
class SearchResultsModel:
    # Nodes are held by reference so later in-place enrichment stays visible.
    nodes: tuple[NodeModel, ...] = ()
    type_counts: TypeCountsModel = field(default_factory=dict)


NO_RESULTS = SearchResultsModel()
