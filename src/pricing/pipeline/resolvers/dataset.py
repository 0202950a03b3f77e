"""Shared algorithm for resolvers backed by a dataset of entries.

Conditions applied ``aggregate`` act once on the sum of the entries' base
amounts; every other application acts on each entry on its own. Only the
net delta of each application is added to the running amount, after the
resolver-specific ``initial_amount`` has been folded in.
"""

from abc import abstractmethod
from collections.abc import Iterable
from typing import Any

from pricing.conditions.collection import CartConditionCollection
from pricing.conditions.enums import ConditionScope
from pricing.pipeline.adapters import extract_base_amount
from pricing.pipeline.context import PhaseContext
from pricing.pipeline.resolvers.base import ConditionScopeResolver
from pricing.utils.logging import get_logger

logger = get_logger(__name__)


class DatasetScopeResolver(ConditionScopeResolver):
    scope: ConditionScope

    def supports(self, scope: ConditionScope) -> bool:
        return scope is self.scope

    @abstractmethod
    def fetch_datasets(self, phase_context: PhaseContext) -> Iterable[Any]:
        ...

    def initial_amount(self, current_amount: float, datasets: list[Any]) -> float:
        return current_amount

    def extract_base_amount(self, entry: Any) -> float:
        return extract_base_amount(entry)

    def resolve(
        self,
        phase_context: PhaseContext,
        scope: ConditionScope,
        conditions: CartConditionCollection,
        current_amount: float,
    ) -> float:
        datasets = list(self.fetch_datasets(phase_context))

        if not datasets:
            logger.debug(
                "No dataset entries, applying conditions as aggregate",
                scope=scope.value,
                phase=phase_context.phase.value,
                conditions=len(conditions),
            )
            return current_amount + (conditions.apply_all(current_amount) - current_amount)

        aggregate = conditions.filter(lambda condition: condition.target.application.is_aggregate)
        per_entry = conditions.reject(lambda condition: condition.target.application.is_aggregate)

        amount = self.initial_amount(current_amount, datasets)

        if not aggregate.is_empty():
            total = sum(self.extract_base_amount(entry) for entry in datasets)
            amount += aggregate.apply_all(total) - total

        if not per_entry.is_empty():
            for entry in datasets:
                base = self.extract_base_amount(entry)
                amount += per_entry.apply_all(base) - base

        return amount
