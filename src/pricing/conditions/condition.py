"""Cart condition: a single pricing rule (discount, tax, fee, shipping...)."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pricing.conditions.exceptions import ConditionConfigurationError
from pricing.conditions.target import ConditionTarget
from pricing.conditions.values import ConditionValue

Rule = Callable[[Any], bool]


class CartCondition:
    """An immutable pricing rule with a target and a value expression.

    ``target`` may be a ``ConditionTarget``, a DSL string or a structured
    mapping; it is normalized (and validated) at construction so a malformed
    target fails when the condition is authored, not when a cart is priced.

    A condition carrying ``rules`` is dynamic: an outside caller decides
    whether it is active for a cart (see ``should_apply``). The pricing
    pipeline never evaluates rules itself.
    """

    def __init__(
        self,
        name: str,
        condition_type: str,
        target: ConditionTarget | str | Mapping[str, Any],
        value: str | int | float,
        attributes: Mapping[str, Any] | None = None,
        order: int = 0,
        rules: Iterable[Rule] | None = None,
    ) -> None:
        if not name or not str(name).strip():
            raise ConditionConfigurationError("Condition name cannot be empty.")
        if not condition_type or not str(condition_type).strip():
            raise ConditionConfigurationError("Condition type cannot be empty.")
        if isinstance(order, bool) or not isinstance(order, int):
            raise ConditionConfigurationError(f"Condition order must be an integer, got {order!r}")

        self._name = str(name)
        self._type = str(condition_type)
        self._target = ConditionTarget.from_any(target)
        self._value = value
        self._parsed = ConditionValue.parse(value)
        self._attributes = dict(attributes or {})
        self._order = order
        self._rules = tuple(rules) if rules else None

        if self._rules and not all(callable(rule) for rule in self._rules):
            raise ConditionConfigurationError(f"Rules of condition [{name}] must be callables.")

    def __repr__(self) -> str:
        return f"<CartCondition {self._name!r} {self._value!r} @ {self._target.to_dsl()}>"

    # -------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> str:
        return self._type

    @property
    def target(self) -> ConditionTarget:
        return self._target

    @property
    def target_dsl(self) -> str:
        return self._target.to_dsl()

    @property
    def value(self) -> str | int | float:
        return self._value

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    @property
    def order(self) -> int:
        return self._order

    @property
    def rules(self) -> tuple[Rule, ...] | None:
        return self._rules

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def has_attribute(self, key: str) -> bool:
        return key in self._attributes

    # -------------------------------------------------------------------
    # Derived flags
    # -------------------------------------------------------------------
    @property
    def is_dynamic(self) -> bool:
        return bool(self._rules)

    @property
    def is_discount(self) -> bool:
        return self._parsed.is_discount

    @property
    def is_charge(self) -> bool:
        return self._parsed.is_charge

    @property
    def is_percentage(self) -> bool:
        return self._parsed.is_percentage

    @property
    def operator(self) -> str:
        return self._parsed.sign.value

    @property
    def parsed_value(self) -> float:
        return self._parsed.signed_magnitude

    # -------------------------------------------------------------------
    # Calculation
    # -------------------------------------------------------------------
    def apply(self, base: float) -> float:
        """Return ``base`` with this condition applied."""
        return self._parsed.apply(float(base))

    def calculated_value(self, base: float) -> float:
        """Signed amount this condition adds to ``base`` on its own."""
        return self._parsed.delta(float(base))

    def should_apply(self, subject: Any) -> bool:
        """Evaluate dynamic rules against ``subject``; static conditions always apply."""
        if not self._rules:
            return True
        return all(rule(subject) for rule in self._rules)

    def without_rules(self) -> "CartCondition":
        """Static copy of this condition, as it is applied once its rules pass."""
        return CartCondition(
            self._name,
            self._type,
            self._target,
            self._value,
            self._attributes,
            self._order,
        )

    # -------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "name": self._name,
            "type": self._type,
            "target": self._target.to_dsl(),
            "target_definition": self._target.to_dict(),
            "value": self._value,
            "operator": self.operator,
            "parsed_value": self.parsed_value,
            "is_charge": self.is_charge,
            "is_discount": self.is_discount,
            "is_percentage": self.is_percentage,
            "is_dynamic": self.is_dynamic,
            "attributes": self.attributes,
            "order": self._order,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartCondition":
        """Build from ``to_dict`` output; ``target_definition`` wins over ``target``."""
        for key in ("name", "type", "value"):
            if data.get(key) is None:
                raise ConditionConfigurationError(f"Condition {key} is required.")

        target = data.get("target_definition") or data.get("target")
        if target is None:
            raise ConditionConfigurationError(f"Condition [{data['name']}] requires a target.")

        return cls(
            name=data["name"],
            condition_type=data["type"],
            target=target,
            value=data["value"],
            attributes=data.get("attributes") or {},
            order=data.get("order") or 0,
            rules=data.get("rules"),
        )
