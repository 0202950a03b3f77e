"""Fluent construction of condition targets.

``Target.items()``, ``Target.cart()`` and friends return a builder seeded
with the usual phase and application for that scope::

    Target.items().where_attribute("category", "=", "electronics").grouping_preset("seller").build()
"""

from typing import Any

from pricing.conditions.enums import (
    ConditionApplication,
    ConditionFilterOperator,
    ConditionPhase,
    ConditionScope,
)
from pricing.conditions.filters import ConditionFilter
from pricing.conditions.grouping import ConditionGrouping
from pricing.conditions.selector import ConditionSelector
from pricing.conditions.target import ConditionTarget


class ConditionTargetBuilder:
    def __init__(
        self,
        scope: ConditionScope,
        phase: ConditionPhase,
        application: ConditionApplication,
    ) -> None:
        self._scope = scope
        self._phase = phase
        self._application = application
        self._filters: list[ConditionFilter] = []
        self._grouping: ConditionGrouping | None = None
        self._meta: dict[str, Any] = {}

    def phase(self, phase: ConditionPhase | str) -> "ConditionTargetBuilder":
        self._phase = ConditionPhase.from_string(phase)
        return self

    def apply(self, application: ConditionApplication | str) -> "ConditionTargetBuilder":
        self._application = ConditionApplication.from_string(application)
        return self

    def apply_aggregate(self) -> "ConditionTargetBuilder":
        return self.apply(ConditionApplication.AGGREGATE)

    def apply_per_item(self) -> "ConditionTargetBuilder":
        return self.apply(ConditionApplication.PER_ITEM)

    def apply_per_unit(self) -> "ConditionTargetBuilder":
        return self.apply(ConditionApplication.PER_UNIT)

    def apply_per_group(self) -> "ConditionTargetBuilder":
        return self.apply(ConditionApplication.PER_GROUP)

    def apply_per_payment(self) -> "ConditionTargetBuilder":
        return self.apply(ConditionApplication.PER_PAYMENT)

    def where(self, field: str, operator: ConditionFilterOperator | str, value: Any) -> "ConditionTargetBuilder":
        self._filters.append(ConditionFilter(field, ConditionFilterOperator.from_string(operator), value))
        return self

    def where_attribute(
        self, attribute: str, operator: ConditionFilterOperator | str, value: Any
    ) -> "ConditionTargetBuilder":
        return self.where(f"attributes.{attribute}", operator, value)

    def group_by(
        self, field: str | None, weight_field: str | None = None, limit: int | None = None
    ) -> "ConditionTargetBuilder":
        """Group entries by ``field``; passing ``None`` clears any grouping."""
        self._grouping = None if field is None else ConditionGrouping(field, weight_field, limit)
        return self

    def grouping_preset(self, preset: str) -> "ConditionTargetBuilder":
        self._grouping = ConditionGrouping.for_preset(preset)
        return self

    def with_meta(self, meta: dict[str, Any]) -> "ConditionTargetBuilder":
        self._meta = {**self._meta, **meta}
        return self

    def build(self) -> ConditionTarget:
        selector = ConditionSelector(tuple(self._filters), self._grouping)

        return ConditionTarget(
            self._scope,
            self._phase,
            self._application,
            None if selector.is_empty() else selector,
            dict(self._meta),
        )


class Target:
    """Entry points for building targets, one per scope."""

    @staticmethod
    def items() -> ConditionTargetBuilder:
        return ConditionTargetBuilder(ConditionScope.ITEMS, ConditionPhase.ITEM_DISCOUNT, ConditionApplication.PER_ITEM)

    @staticmethod
    def cart() -> ConditionTargetBuilder:
        return ConditionTargetBuilder(ConditionScope.CART, ConditionPhase.CART_SUBTOTAL, ConditionApplication.AGGREGATE)

    @staticmethod
    def shipments() -> ConditionTargetBuilder:
        return ConditionTargetBuilder(ConditionScope.SHIPMENTS, ConditionPhase.SHIPPING, ConditionApplication.PER_GROUP)

    @staticmethod
    def payments() -> ConditionTargetBuilder:
        return ConditionTargetBuilder(ConditionScope.PAYMENTS, ConditionPhase.PAYMENT, ConditionApplication.PER_PAYMENT)

    @staticmethod
    def fulfillments() -> ConditionTargetBuilder:
        return ConditionTargetBuilder(
            ConditionScope.FULFILLMENTS, ConditionPhase.SHIPPING, ConditionApplication.PER_GROUP
        )

    @staticmethod
    def custom() -> ConditionTargetBuilder:
        return ConditionTargetBuilder(ConditionScope.CUSTOM, ConditionPhase.CUSTOM, ConditionApplication.AGGREGATE)
