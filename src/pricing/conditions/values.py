"""Condition value expressions such as ``-10%``, ``+15`` or ``8%``.

The expression is parsed once into a sign, a kind and a magnitude. A leading
``-`` marks a discount; a leading ``+`` or no sign marks a charge. A trailing
``%`` makes the magnitude a percentage of the base amount.
"""

import re
from dataclasses import dataclass
from enum import Enum

from pricing.conditions.exceptions import ConditionConfigurationError

_VALUE_EXPRESSION = re.compile(r"^([+-]?)(\d+(?:\.\d*)?|\.\d+)(%?)$")


class ValueSign(Enum):
    DISCOUNT = "-"
    CHARGE = "+"


class ValueKind(Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class ConditionValue:
    sign: ValueSign
    kind: ValueKind
    magnitude: float

    @classmethod
    def parse(cls, value: "str | int | float") -> "ConditionValue":
        if isinstance(value, bool):
            raise ConditionConfigurationError(f"Condition value must be a number or expression, got {value!r}")

        if isinstance(value, (int, float)):
            sign = ValueSign.DISCOUNT if value < 0 else ValueSign.CHARGE
            return cls(sign, ValueKind.FIXED, abs(float(value)))

        expression = str(value).replace(" ", "")
        match = _VALUE_EXPRESSION.match(expression)
        if match is None:
            raise ConditionConfigurationError(f"Invalid condition value [{value}]")

        sign_token, number, percent = match.groups()
        return cls(
            ValueSign.DISCOUNT if sign_token == "-" else ValueSign.CHARGE,
            ValueKind.PERCENTAGE if percent else ValueKind.FIXED,
            float(number),
        )

    @property
    def is_discount(self) -> bool:
        return self.sign is ValueSign.DISCOUNT

    @property
    def is_charge(self) -> bool:
        return self.sign is ValueSign.CHARGE

    @property
    def is_percentage(self) -> bool:
        return self.kind is ValueKind.PERCENTAGE

    @property
    def signed_magnitude(self) -> float:
        return -self.magnitude if self.is_discount else self.magnitude

    def delta(self, base: float) -> float:
        """Signed amount this value adds to ``base``."""
        if self.is_percentage:
            return base * self.signed_magnitude / 100
        return self.signed_magnitude

    def apply(self, base: float) -> float:
        return base + self.delta(base)
