"""Enumerations used by condition targets.

Every enum accepts loose input through ``from_string`` (case-insensitive,
surrounding whitespace ignored) and raises ``TargetParseError`` for unknown
tokens.
"""

from enum import Enum

from pricing.conditions.exceptions import TargetParseError


class ConditionScope(Enum):
    """Dataset a condition's base amount is drawn from.

    Declaration order is the order scopes are resolved inside a phase.
    """

    CART = "cart"
    ITEMS = "items"
    SHIPMENTS = "shipments"
    PAYMENTS = "payments"
    FULFILLMENTS = "fulfillments"
    CUSTOM = "custom"

    @classmethod
    def from_string(cls, scope: "str | ConditionScope") -> "ConditionScope":
        if isinstance(scope, cls):
            return scope

        normalized = str(scope).strip().lower()
        for case in cls:
            if case.value == normalized:
                return case

        raise TargetParseError(f"Unknown condition scope [{scope}].")


class ConditionPhase(Enum):
    PRE_ITEM = "pre_item"
    ITEM_DISCOUNT = "item_discount"
    ITEM_POST = "item_post"
    CART_SUBTOTAL = "cart_subtotal"
    SHIPPING = "shipping"
    TAXABLE = "taxable"
    TAX = "tax"
    PAYMENT = "payment"
    GRAND_TOTAL = "grand_total"
    CUSTOM = "custom"

    @classmethod
    def from_string(cls, phase: "str | ConditionPhase") -> "ConditionPhase":
        if isinstance(phase, cls):
            return phase

        normalized = str(phase).strip().lower()
        for case in cls:
            if case.value == normalized:
                return case

        raise TargetParseError(f"Unknown condition phase [{phase}].")

    @property
    def order(self) -> int:
        """Fixed position of the phase in the pricing pipeline."""
        return _PHASE_ORDER[self]

    @classmethod
    def in_order(cls) -> list["ConditionPhase"]:
        return sorted(cls, key=lambda phase: phase.order)


_PHASE_ORDER = {
    ConditionPhase.PRE_ITEM: 10,
    ConditionPhase.ITEM_DISCOUNT: 20,
    ConditionPhase.ITEM_POST: 30,
    ConditionPhase.CART_SUBTOTAL: 40,
    ConditionPhase.SHIPPING: 50,
    ConditionPhase.TAXABLE: 60,
    ConditionPhase.TAX: 70,
    ConditionPhase.PAYMENT: 80,
    ConditionPhase.GRAND_TOTAL: 90,
    ConditionPhase.CUSTOM: 100,
}


class ConditionApplication(Enum):
    """Whether a condition is computed once on a combined total or per entry."""

    AGGREGATE = "aggregate"
    PER_ITEM = "per-item"
    PER_UNIT = "per-unit"
    PER_GROUP = "per-group"
    PER_PAYMENT = "per-payment"

    @classmethod
    def from_string(cls, application: "str | ConditionApplication") -> "ConditionApplication":
        if isinstance(application, cls):
            return application

        normalized = str(application).strip().lower().replace("_", "-")
        for case in cls:
            if case.value == normalized:
                return case

        raise TargetParseError(f"Unknown condition application [{application}].")

    @property
    def is_aggregate(self) -> bool:
        return self is ConditionApplication.AGGREGATE


class ConditionFilterOperator(Enum):
    EQ = "="
    NEQ = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    IN = "in"
    NOT_IN = "not-in"
    CONTAINS = "~"
    NOT_CONTAINS = "!~"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"

    @classmethod
    def from_string(cls, operator: "str | ConditionFilterOperator") -> "ConditionFilterOperator":
        if isinstance(operator, cls):
            return operator

        normalized = str(operator).strip().lower()
        normalized = normalized.replace(" ", "-").replace("__", "-").replace("_", "-")

        try:
            return _OPERATOR_ALIASES[normalized]
        except KeyError:
            raise TargetParseError(f"Unknown operator [{operator}]") from None

    def to_dsl_token(self) -> str:
        """Operator as written in the DSL; word operators are padded with spaces."""
        if self.value.isalpha() or "_" in self.value or "-" in self.value:
            return f" {self.value} "
        return self.value

    @property
    def requires_array_value(self) -> bool:
        return self in (ConditionFilterOperator.IN, ConditionFilterOperator.NOT_IN)


_OPERATOR_ALIASES = {
    "=": ConditionFilterOperator.EQ,
    "eq": ConditionFilterOperator.EQ,
    "!=": ConditionFilterOperator.NEQ,
    "<>": ConditionFilterOperator.NEQ,
    "neq": ConditionFilterOperator.NEQ,
    ">": ConditionFilterOperator.GT,
    ">=": ConditionFilterOperator.GTE,
    "<": ConditionFilterOperator.LT,
    "<=": ConditionFilterOperator.LTE,
    "in": ConditionFilterOperator.IN,
    "not-in": ConditionFilterOperator.NOT_IN,
    "~": ConditionFilterOperator.CONTAINS,
    "contains": ConditionFilterOperator.CONTAINS,
    "!~": ConditionFilterOperator.NOT_CONTAINS,
    "not-contains": ConditionFilterOperator.NOT_CONTAINS,
    "starts-with": ConditionFilterOperator.STARTS_WITH,
    "ends-with": ConditionFilterOperator.ENDS_WITH,
}
