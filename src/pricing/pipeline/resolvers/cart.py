from collections.abc import Iterable
from typing import Any

from pricing.conditions.enums import ConditionScope
from pricing.pipeline.context import PhaseContext
from pricing.pipeline.resolvers.dataset import DatasetScopeResolver


class CartScopeResolver(DatasetScopeResolver):
    """The whole cart is one entry whose base is the phase's base amount."""

    scope = ConditionScope.CART

    def fetch_datasets(self, phase_context: PhaseContext) -> Iterable[Any]:
        return [{"base_amount": phase_context.base_amount}]
