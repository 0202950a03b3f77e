"""In-memory priced cart.

``PricedCart`` is the reference ``ConditionDataSource``: it holds line items
and the active conditions, and supplies shipments, payments and
fulfillments through callbacks registered by the host.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pricing.conditions.collection import CartConditionCollection
from pricing.conditions.condition import CartCondition
from pricing.conditions.exceptions import ConditionConfigurationError
from pricing.conditions.target import ConditionTarget
from pricing.config import PricingSettings, get_settings
from pricing.pipeline.context import PipelineContext
from pricing.pipeline.pipeline import ConditionPipeline
from pricing.pipeline.port import ConditionDataSource
from pricing.pipeline.results import PipelineResult
from pricing.utils.logging import get_logger

logger = get_logger(__name__)

DatasetResolver = Callable[["PricedCart"], Iterable[Any]]


@dataclass
class PricedItem:
    id: str
    name: str
    price: float
    quantity: int = 1
    attributes: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.quantity < 1:
            raise ConditionConfigurationError(f"Quantity of item [{self.id}] must be at least 1.")
        if self.price < 0:
            raise ConditionConfigurationError(f"Price of item [{self.id}] cannot be negative.")

    @property
    def raw_subtotal(self) -> float:
        return float(self.price) * self.quantity


class PricedCart(ConditionDataSource):
    def __init__(self, settings: PricingSettings | None = None) -> None:
        self.settings = settings or get_settings()
        self._items: dict[str, PricedItem] = {}
        self._conditions = CartConditionCollection()
        self._dynamic_conditions = CartConditionCollection()
        self._shipments_resolver: DatasetResolver | None = None
        self._payments_resolver: DatasetResolver | None = None
        self._fulfillments_resolver: DatasetResolver | None = None

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------
    def add(
        self,
        item_id: str,
        name: str,
        price: float,
        quantity: int = 1,
        attributes: Mapping[str, Any] | None = None,
    ) -> PricedItem:
        """Add a line item; adding an existing id increases its quantity."""
        existing = self._items.get(item_id)
        if existing is not None:
            if quantity < 1:
                raise ConditionConfigurationError(f"Quantity of item [{item_id}] must be at least 1.")
            existing.quantity += quantity
            return existing

        item = PricedItem(item_id, name, price, quantity, dict(attributes or {}))
        self._items[item_id] = item
        return item

    def remove(self, item_id: str) -> None:
        self._items.pop(item_id, None)

    def get(self, item_id: str) -> PricedItem | None:
        return self._items.get(item_id)

    @property
    def items(self) -> list[PricedItem]:
        return list(self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def items_matching(self, target: ConditionTarget | str | Mapping[str, Any]) -> list[PricedItem]:
        """Items selected by ``target``'s filters (all items when it has none)."""
        target = ConditionTarget.from_any(target)
        if target.selector is None:
            return self.items
        return [item for item in self._items.values() if target.selector.matches(item)]

    def items_subtotal(self) -> float:
        return sum(item.raw_subtotal for item in self._items.values())

    # -------------------------------------------------------------------
    # Conditions
    # -------------------------------------------------------------------
    def add_condition(self, condition: CartCondition) -> "PricedCart":
        self._conditions.add_condition(condition)
        return self

    def remove_condition(self, name: str) -> "PricedCart":
        self._conditions.remove_condition(name)
        return self

    def clear_conditions(self) -> "PricedCart":
        self._conditions = CartConditionCollection()
        return self

    def get_conditions(self) -> CartConditionCollection:
        return self._conditions

    def register_dynamic_condition(self, condition: CartCondition) -> "PricedCart":
        if not condition.is_dynamic:
            raise ConditionConfigurationError(f"Condition [{condition.name}] has no rules to evaluate.")
        self._dynamic_conditions.add_condition(condition)
        return self

    def evaluate_dynamic_conditions(self) -> CartConditionCollection:
        """Apply dynamic conditions whose rules pass, remove the others.

        Returns the conditions that were applied.
        """
        applied = CartConditionCollection()
        for condition in self._dynamic_conditions:
            if condition.should_apply(self):
                static = condition.without_rules()
                self._conditions.add_condition(static)
                applied.add_condition(static)
            else:
                self._conditions.remove_condition(condition.name)

        logger.debug(
            "Dynamic conditions evaluated",
            registered=len(self._dynamic_conditions),
            applied=applied.names(),
        )
        return applied

    # -------------------------------------------------------------------
    # Datasets
    # -------------------------------------------------------------------
    def resolve_shipments_using(self, resolver: DatasetResolver | None) -> "PricedCart":
        self._shipments_resolver = resolver
        return self

    def resolve_payments_using(self, resolver: DatasetResolver | None) -> "PricedCart":
        self._payments_resolver = resolver
        return self

    def resolve_fulfillments_using(self, resolver: DatasetResolver | None) -> "PricedCart":
        self._fulfillments_resolver = resolver
        return self

    def has_shipments_resolver(self) -> bool:
        return self._shipments_resolver is not None

    def get_shipments(self) -> Iterable[Any]:
        return list(self._shipments_resolver(self)) if self._shipments_resolver else []

    def has_payments_resolver(self) -> bool:
        return self._payments_resolver is not None

    def get_payments(self) -> Iterable[Any]:
        return list(self._payments_resolver(self)) if self._payments_resolver else []

    def has_fulfillments_resolver(self) -> bool:
        return self._fulfillments_resolver is not None

    def get_fulfillments(self) -> Iterable[Any]:
        return list(self._fulfillments_resolver(self)) if self._fulfillments_resolver else []

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def pipeline_result(self, pipeline: ConditionPipeline | None = None) -> PipelineResult:
        return (pipeline or ConditionPipeline()).process(PipelineContext(self))

    def subtotal(self, pipeline: ConditionPipeline | None = None) -> float:
        return round(self.pipeline_result(pipeline).subtotal(), self.settings.money_precision)

    def total(self, pipeline: ConditionPipeline | None = None) -> float:
        return round(self.pipeline_result(pipeline).total(), self.settings.money_precision)

    def quote(self, pipeline: ConditionPipeline | None = None) -> dict:
        """Rounded subtotal and total with the per-phase breakdown."""
        result = self.pipeline_result(pipeline)
        precision = self.settings.money_precision
        return {
            "currency": self.settings.currency,
            "subtotal": round(result.subtotal(), precision),
            "total": round(result.total(), precision),
            "pipeline": result.to_dict(),
        }
