"""Contexts handed to phase processors and scope resolvers."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pricing.conditions.collection import CartConditionCollection
from pricing.conditions.enums import ConditionPhase
from pricing.pipeline.port import ConditionDataSource


class PipelineContext:
    """Binds a data source (and optionally an explicit condition set or
    starting amount) to one pipeline run.
    """

    def __init__(
        self,
        source: ConditionDataSource,
        conditions: CartConditionCollection | None = None,
        initial_amount: float | None = None,
    ) -> None:
        self._source = source
        self._conditions = conditions
        self._initial_amount = float(initial_amount) if initial_amount is not None else None

    @property
    def source(self) -> ConditionDataSource:
        return self._source

    def conditions(self) -> CartConditionCollection:
        if self._conditions is None:
            self._conditions = self._source.get_conditions()
        return self._conditions

    def initial_amount(self) -> float:
        """Sum of the items' raw subtotals unless an explicit amount was given."""
        if self._initial_amount is None:
            self._initial_amount = float(self._source.items_subtotal())
        return self._initial_amount

    def has_shipments_resolver(self) -> bool:
        return self._source.has_shipments_resolver()

    def get_shipments(self) -> Iterable[Any]:
        return self._source.get_shipments() if self.has_shipments_resolver() else []

    def has_payments_resolver(self) -> bool:
        return self._source.has_payments_resolver()

    def get_payments(self) -> Iterable[Any]:
        return self._source.get_payments() if self.has_payments_resolver() else []

    def has_fulfillments_resolver(self) -> bool:
        return self._source.has_fulfillments_resolver()

    def get_fulfillments(self) -> Iterable[Any]:
        return self._source.get_fulfillments() if self.has_fulfillments_resolver() else []


@dataclass(frozen=True)
class PhaseContext:
    """Read-only view of one phase: its base amount and its conditions."""

    phase: ConditionPhase
    base_amount: float
    conditions: CartConditionCollection
    pipeline_context: PipelineContext

    def is_empty(self) -> bool:
        return self.conditions.is_empty()
