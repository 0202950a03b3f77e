from collections.abc import Iterable
from typing import Any

from pricing.conditions.enums import ConditionScope
from pricing.pipeline.context import PhaseContext
from pricing.pipeline.resolvers.dataset import DatasetScopeResolver


class PaymentsScopeResolver(DatasetScopeResolver):
    """Payments settle the running amount; only the excess is added.

    Payment entries usually cover the cart total already counted in the
    running amount, so ``initial_amount`` adds ``max(sum - current, 0)``.
    """

    scope = ConditionScope.PAYMENTS

    def fetch_datasets(self, phase_context: PhaseContext) -> Iterable[Any]:
        return phase_context.pipeline_context.get_payments()

    def initial_amount(self, current_amount: float, datasets: list[Any]) -> float:
        paid = sum(self.extract_base_amount(entry) for entry in datasets)
        return current_amount + max(paid - current_amount, 0.0)
