from collections.abc import Iterable
from typing import Any

from pricing.conditions.enums import ConditionScope
from pricing.pipeline.context import PhaseContext
from pricing.pipeline.resolvers.dataset import DatasetScopeResolver


class FulfillmentsScopeResolver(DatasetScopeResolver):
    scope = ConditionScope.FULFILLMENTS

    def fetch_datasets(self, phase_context: PhaseContext) -> Iterable[Any]:
        return phase_context.pipeline_context.get_fulfillments()

    def initial_amount(self, current_amount: float, datasets: list[Any]) -> float:
        return current_amount + sum(self.extract_base_amount(entry) for entry in datasets)
