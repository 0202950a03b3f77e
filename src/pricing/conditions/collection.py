"""Ordered, name-keyed collection of cart conditions.

Insertion order is the iteration order. ``add_condition`` is an upsert by
name. All filtering and grouping helpers return new collections and never
mutate the receiver.
"""

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from pricing.conditions.condition import CartCondition
from pricing.conditions.enums import ConditionApplication, ConditionPhase, ConditionScope
from pricing.conditions.target import ConditionTarget


class CartConditionCollection:
    def __init__(self, conditions: Iterable[CartCondition] = ()) -> None:
        self._conditions: dict[str, CartCondition] = {}
        for condition in conditions:
            self.add_condition(condition)

    @classmethod
    def from_list(cls, conditions: Iterable[Mapping[str, Any]]) -> "CartConditionCollection":
        return cls(CartCondition.from_dict(data) for data in conditions)

    def __iter__(self) -> Iterator[CartCondition]:
        return iter(list(self._conditions.values()))

    def __len__(self) -> int:
        return len(self._conditions)

    def __contains__(self, name: object) -> bool:
        return name in self._conditions

    def __repr__(self) -> str:
        return f"<CartConditionCollection {list(self._conditions)!r}>"

    # -------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------
    def add_condition(self, condition: CartCondition) -> "CartConditionCollection":
        """Add or replace (by name) a condition."""
        self._conditions[condition.name] = condition
        return self

    def remove_condition(self, name: str) -> "CartConditionCollection":
        self._conditions.pop(name, None)
        return self

    def get_condition(self, name: str) -> CartCondition | None:
        return self._conditions.get(name)

    def has_condition(self, name: str) -> bool:
        return name in self._conditions

    def count(self) -> int:
        return len(self._conditions)

    def is_empty(self) -> bool:
        return not self._conditions

    def names(self) -> list[str]:
        return list(self._conditions)

    def first(self, predicate: Callable[[CartCondition], bool] | None = None) -> CartCondition | None:
        for condition in self._conditions.values():
            if predicate is None or predicate(condition):
                return condition
        return None

    # -------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------
    def filter(self, predicate: Callable[[CartCondition], bool]) -> "CartConditionCollection":
        return CartConditionCollection(c for c in self._conditions.values() if predicate(c))

    def reject(self, predicate: Callable[[CartCondition], bool]) -> "CartConditionCollection":
        return self.filter(lambda condition: not predicate(condition))

    def by_type(self, condition_type: str) -> "CartConditionCollection":
        return self.filter(lambda condition: condition.type == condition_type)

    def by_target(self, target: ConditionTarget | str | Mapping[str, Any]) -> "CartConditionCollection":
        """Conditions whose target DSL equals ``target``'s DSL."""
        dsl = ConditionTarget.from_any(target).to_dsl()
        return self.filter(lambda condition: condition.target_dsl == dsl)

    def by_scope(self, scope: ConditionScope | str) -> "CartConditionCollection":
        scope = ConditionScope.from_string(scope)
        return self.filter(lambda condition: condition.target.scope is scope)

    def by_phase(self, phase: ConditionPhase | str) -> "CartConditionCollection":
        phase = ConditionPhase.from_string(phase)
        return self.filter(lambda condition: condition.target.phase is phase)

    def by_application(self, application: ConditionApplication | str) -> "CartConditionCollection":
        application = ConditionApplication.from_string(application)
        return self.filter(lambda condition: condition.target.application is application)

    def by_value(self, value: str | float) -> "CartConditionCollection":
        return self.filter(lambda condition: condition.value == value)

    def discounts(self) -> "CartConditionCollection":
        return self.filter(lambda condition: condition.is_discount)

    def charges(self) -> "CartConditionCollection":
        return self.filter(lambda condition: condition.is_charge)

    def percentages(self) -> "CartConditionCollection":
        return self.filter(lambda condition: condition.is_percentage)

    def dynamic(self) -> "CartConditionCollection":
        return self.filter(lambda condition: condition.is_dynamic)

    def with_attribute(self, key: str, value: Any = None) -> "CartConditionCollection":
        if value is None:
            return self.filter(lambda condition: condition.has_attribute(key))
        return self.filter(lambda condition: condition.get_attribute(key) == value)

    def find_by_attribute(self, key: str, value: Any) -> CartCondition | None:
        return self.first(lambda condition: condition.get_attribute(key) == value)

    def remove_by_type(self, condition_type: str) -> "CartConditionCollection":
        return self.reject(lambda condition: condition.type == condition_type)

    def remove_by_target(self, target: ConditionTarget | str | Mapping[str, Any]) -> "CartConditionCollection":
        dsl = ConditionTarget.from_any(target).to_dsl()
        return self.reject(lambda condition: condition.target_dsl == dsl)

    def has_discounts(self) -> bool:
        return any(condition.is_discount for condition in self._conditions.values())

    def has_charges(self) -> bool:
        return any(condition.is_charge for condition in self._conditions.values())

    def sort_by_order(self) -> "CartConditionCollection":
        """New collection sorted by ``order``; ties keep insertion order."""
        return CartConditionCollection(sorted(self._conditions.values(), key=lambda condition: condition.order))

    # -------------------------------------------------------------------
    # Grouping
    # -------------------------------------------------------------------
    def group_by(self, key: Callable[[CartCondition], str]) -> dict[str, "CartConditionCollection"]:
        groups: dict[str, CartConditionCollection] = {}
        for condition in self._conditions.values():
            groups.setdefault(key(condition), CartConditionCollection()).add_condition(condition)
        return groups

    def group_by_type(self) -> dict[str, "CartConditionCollection"]:
        return self.group_by(lambda condition: condition.type)

    def group_by_target(self) -> dict[str, "CartConditionCollection"]:
        return self.group_by(lambda condition: condition.target_dsl)

    def group_by_scope(self) -> dict[str, "CartConditionCollection"]:
        return self.group_by(lambda condition: condition.target.scope.value)

    def group_by_phase(self) -> dict[str, "CartConditionCollection"]:
        return self.group_by(lambda condition: condition.target.phase.value)

    # -------------------------------------------------------------------
    # Calculation
    # -------------------------------------------------------------------
    def reduce(self, function: Callable[[float, CartCondition], float], initial: float) -> float:
        result = initial
        for condition in self._conditions.values():
            result = function(result, condition)
        return result

    def apply_all(self, amount: float) -> float:
        """Apply every condition in ``order``, each on the previous result."""
        return self.sort_by_order().reduce(lambda carry, condition: condition.apply(carry), float(amount))

    def get_total_discount(self, base: float) -> float:
        """Sum of discount magnitudes, each computed independently on ``base``."""
        return sum(abs(condition.calculated_value(base)) for condition in self.discounts())

    def get_total_charges(self, base: float) -> float:
        """Sum of charges, each computed independently on ``base``."""
        return sum(condition.calculated_value(base) for condition in self.charges())

    def get_summary(self, base: float = 0.0) -> dict[str, Any]:
        has_base = base > 0
        return {
            "total_conditions": self.count(),
            "discounts": self.discounts().count(),
            "charges": self.charges().count(),
            "percentages": self.percentages().count(),
            "total_discount_amount": self.get_total_discount(base) if has_base else 0.0,
            "total_charges_amount": self.get_total_charges(base) if has_base else 0.0,
            "net_adjustment": self.apply_all(base) - base if has_base else 0.0,
        }

    def to_detailed_list(self, base: float = 0.0) -> dict[str, Any]:
        return {
            "conditions": [
                {
                    **condition.to_dict(),
                    "calculated_value": condition.calculated_value(base) if base > 0 else 0.0,
                }
                for condition in self._conditions.values()
            ],
            "summary": self.get_summary(base),
        }

    def to_list(self) -> list[dict[str, Any]]:
        return [condition.to_dict() for condition in self._conditions.values()]
