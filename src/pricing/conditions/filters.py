"""Filters narrowing a condition target to matching sub-entities."""

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pricing.conditions.enums import ConditionFilterOperator
from pricing.conditions.exceptions import ConditionConfigurationError, TargetParseError

_BARE_TOKEN = re.compile(r"^[A-Za-z0-9_\-.]+$")
_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_MISSING = object()


@dataclass(frozen=True)
class ConditionFilter:
    """A single ``field operator value`` refinement.

    Array values are stored as tuples; ``to_dict`` hands them back as lists.
    """

    field: str
    operator: ConditionFilterOperator
    value: Any = None

    def __post_init__(self):
        if not isinstance(self.field, str) or self.field.strip() == "":
            raise ConditionConfigurationError("Filter field cannot be empty.")
        if not _BARE_TOKEN.match(self.field):
            raise ConditionConfigurationError(
                f"Filter field [{self.field}] may only contain letters, digits, underscores, dots and dashes."
            )

        operator = self.operator
        if not isinstance(operator, ConditionFilterOperator):
            operator = ConditionFilterOperator.from_string(operator)
            object.__setattr__(self, "operator", operator)

        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))

        if operator.requires_array_value and not isinstance(self.value, tuple):
            raise ConditionConfigurationError(f"Operator {operator.value} expects an array value.")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConditionFilter":
        if "field" not in data:
            raise ConditionConfigurationError("Filter field is required.")
        if data.get("operator") is None:
            raise ConditionConfigurationError("Filter operator is required.")

        return cls(
            field=data["field"],
            operator=ConditionFilterOperator.from_string(str(data["operator"])),
            value=data.get("value"),
        )

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "operator": self.operator.value,
            "value": list(self.value) if isinstance(self.value, tuple) else self.value,
        }

    def to_dsl_token(self) -> str:
        return f"{self.field}{self.operator.to_dsl_token()}{_format_value(self.value)}"

    # -------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------
    def matches(self, subject: Any) -> bool:
        """Evaluate the filter against a mapping or object.

        ``field`` may be a dotted path (``attributes.category``). A missing
        path resolves to ``None``.
        """
        actual = resolve_field(subject, self.field)
        expected = self.value
        operator = self.operator

        if operator is ConditionFilterOperator.EQ:
            return actual == expected
        if operator is ConditionFilterOperator.NEQ:
            return actual != expected
        if operator is ConditionFilterOperator.IN:
            return actual in expected
        if operator is ConditionFilterOperator.NOT_IN:
            return actual not in expected
        if operator is ConditionFilterOperator.CONTAINS:
            return _contains(actual, expected)
        if operator is ConditionFilterOperator.NOT_CONTAINS:
            return not _contains(actual, expected)
        if operator is ConditionFilterOperator.STARTS_WITH:
            return actual is not None and str(actual).startswith(str(expected))
        if operator is ConditionFilterOperator.ENDS_WITH:
            return actual is not None and str(actual).endswith(str(expected))

        try:
            if operator is ConditionFilterOperator.GT:
                return actual > expected
            if operator is ConditionFilterOperator.GTE:
                return actual >= expected
            if operator is ConditionFilterOperator.LT:
                return actual < expected
            return actual <= expected
        except TypeError:
            return False


def resolve_field(subject: Any, path: str) -> Any:
    """Walk a dotted path through mappings and attributes."""
    current = subject
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        else:
            current = getattr(current, part, _MISSING)

        if current is _MISSING or current is None:
            return None

    return current


def cast_scalar(value: str) -> Any:
    """Cast a DSL value token: quoted string, true/false/null, int, float or raw string."""
    value = value.strip()

    if value == "":
        return ""

    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return _ESCAPE.sub(r"\1", value[1:-1])

    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None

    if _NUMERIC.match(value):
        try:
            if "." in value:
                number = float(value)
            elif "e" in lowered:
                number = int(float(value))
            else:
                number = int(value)
        except (OverflowError, ValueError):
            raise TargetParseError(f"Invalid numeric value [{value}]") from None

        if isinstance(number, float) and not math.isfinite(number):
            raise TargetParseError(f"Invalid numeric value [{value}]")
        return number

    return value


def _contains(actual: Any, expected: Any) -> bool:
    if actual is None:
        return False
    if isinstance(actual, (list, tuple, set, frozenset)):
        return expected in actual
    return str(expected) in str(actual)


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_format_scalar(item) for item in value) + "]"

    return _format_scalar(value)


def _format_scalar(value: Any) -> str:
    if isinstance(value, str):
        if value == "":
            return "''"
        # numeric-looking strings and keywords are quoted so they parse back as strings
        if _BARE_TOKEN.match(value) and _reads_back_as_string(value):
            return value
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    # bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"

    if value is None:
        return "null"

    if isinstance(value, (int, float)):
        return str(value)

    return json.dumps(value)


def _reads_back_as_string(value: str) -> bool:
    try:
        return isinstance(cast_scalar(value), str)
    except TargetParseError:
        return False
