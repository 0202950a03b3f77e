"""Data source port consumed by the pricing pipeline.

Any cart-like object can be priced as long as it exposes its conditions and
the raw subtotal of its items. Shipments, payments and fulfillments are
optional datasets; a source that does not provide them keeps the defaults
(no resolver, no entries).
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from pricing.conditions.collection import CartConditionCollection


class ConditionDataSource(ABC):
    """Abstract cart-like data source."""

    @abstractmethod
    def get_conditions(self) -> CartConditionCollection:
        """Currently active conditions."""
        ...

    @abstractmethod
    def items_subtotal(self) -> float:
        """Sum of the raw subtotals of all line items."""
        ...

    def has_shipments_resolver(self) -> bool:
        return False

    def get_shipments(self) -> Iterable[Any]:
        return []

    def has_payments_resolver(self) -> bool:
        return False

    def get_payments(self) -> Iterable[Any]:
        return []

    def has_fulfillments_resolver(self) -> bool:
        return False

    def get_fulfillments(self) -> Iterable[Any]:
        return []
