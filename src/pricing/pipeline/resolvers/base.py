"""Scope resolver port.

A resolver turns the conditions of one scope, within one phase, into a new
running amount. Hosts may register their own resolver per scope.
"""

from abc import ABC, abstractmethod

from pricing.conditions.collection import CartConditionCollection
from pricing.conditions.enums import ConditionScope
from pricing.pipeline.context import PhaseContext


class ConditionScopeResolver(ABC):
    @abstractmethod
    def supports(self, scope: ConditionScope) -> bool:
        ...

    @abstractmethod
    def resolve(
        self,
        phase_context: PhaseContext,
        scope: ConditionScope,
        conditions: CartConditionCollection,
        current_amount: float,
    ) -> float:
        """Return the running amount after applying ``conditions``."""
        ...
