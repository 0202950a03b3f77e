"""Resolver for scopes without an external dataset."""

from pricing.conditions.collection import CartConditionCollection
from pricing.conditions.enums import ConditionScope
from pricing.pipeline.context import PhaseContext
from pricing.pipeline.resolvers.base import ConditionScopeResolver


class DefaultScopeResolver(ConditionScopeResolver):
    """Folds the scope's conditions, in order, over the running amount."""

    def __init__(self, scope: ConditionScope) -> None:
        self.scope = scope

    def supports(self, scope: ConditionScope) -> bool:
        return scope is self.scope

    def resolve(
        self,
        phase_context: PhaseContext,
        scope: ConditionScope,
        conditions: CartConditionCollection,
        current_amount: float,
    ) -> float:
        return conditions.apply_all(current_amount)
