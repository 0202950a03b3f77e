"""Condition targets and the target DSL.

A target addresses where and how a condition applies. Its canonical text
form is::

    scope[:filter1;filter2;...]@phase/application[#grouping-preset]

e.g. ``items:attributes.category=electronics;quantity>=2@item_discount/per-item#seller``.

Conditions persist both the DSL string (for search and display) and the
structured ``to_dict()`` payload (authoritative for execution). The DSL is
always regenerable from the structured form, except for explicit
``group_by``/``weight_field``/``limit`` groupings, which have no DSL syntax.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pricing.conditions.enums import (
    ConditionApplication,
    ConditionFilterOperator,
    ConditionPhase,
    ConditionScope,
)
from pricing.conditions.exceptions import ConditionConfigurationError, TargetParseError
from pricing.conditions.filters import ConditionFilter, cast_scalar
from pricing.conditions.grouping import ConditionGrouping
from pricing.conditions.selector import ConditionSelector

# Longer operator tokens come first so ``>=`` is never read as ``>``.
_FILTER_TOKEN = re.compile(
    r"^([A-Za-z0-9_.-]+)\s*(not-in|not_in|>=|<=|!=|=|>|<|in|!~|~|starts_with|ends_with)\s*(.+)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ConditionTarget:
    scope: ConditionScope
    phase: ConditionPhase
    application: ConditionApplication
    selector: ConditionSelector | None = None
    meta: dict = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "scope", ConditionScope.from_string(self.scope))
        object.__setattr__(self, "phase", ConditionPhase.from_string(self.phase))
        object.__setattr__(self, "application", ConditionApplication.from_string(self.application))
        object.__setattr__(self, "meta", dict(self.meta or {}))

    def __str__(self) -> str:
        return self.to_dsl()

    # -------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------
    @classmethod
    def from_any(cls, target: "ConditionTarget | str | Mapping[str, Any]") -> "ConditionTarget":
        """Normalize a target given as an instance, a DSL string or a structured mapping."""
        if isinstance(target, cls):
            return target

        if isinstance(target, str):
            return cls.from_dsl(target)

        if isinstance(target, Mapping):
            return cls.from_dict(target)

        raise ConditionConfigurationError(f"Unable to build condition target from {type(target).__name__}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConditionTarget":
        if any(data.get(key) is None for key in ("scope", "phase", "application")):
            raise ConditionConfigurationError("Target definition requires scope, phase, and application values.")

        selector = data.get("selector")
        if isinstance(selector, Mapping):
            selector = ConditionSelector.from_dict(selector)
        elif not isinstance(selector, ConditionSelector):
            selector = None

        return cls(
            scope=ConditionScope.from_string(data["scope"]),
            phase=ConditionPhase.from_string(data["phase"]),
            application=ConditionApplication.from_string(data["application"]),
            selector=selector,
            meta=dict(data.get("meta") or {}),
        )

    @classmethod
    def from_dsl(cls, dsl: str) -> "ConditionTarget":
        return parse_target(dsl)

    # -------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "scope": self.scope.value,
            "phase": self.phase.value,
            "application": self.application.value,
            "selector": self.selector.to_dict() if self.selector is not None else None,
            "meta": dict(self.meta),
        }

    def to_dsl(self) -> str:
        scope_segment = self.scope.value
        filters = self.selector.to_dsl_filters() if self.selector is not None else None
        if filters:
            scope_segment += f":{filters}"

        application_segment = self.application.value
        grouping = self.selector.grouping if self.selector is not None else None
        if grouping is not None and grouping.preset:
            application_segment += f"#{grouping.preset}"

        return f"{scope_segment}@{self.phase.value}/{application_segment}"

    def with_meta(self, meta: Mapping[str, Any]) -> "ConditionTarget":
        return ConditionTarget(
            self.scope,
            self.phase,
            self.application,
            self.selector,
            {**self.meta, **meta},
        )


# ---------------------------------------------------------------------------
# DSL parsing
# ---------------------------------------------------------------------------
def parse_target(dsl: str) -> ConditionTarget:
    """Parse a target DSL string; raises ``TargetParseError`` on any syntax error."""
    if not isinstance(dsl, str) or dsl.strip() == "":
        raise TargetParseError("Target DSL cannot be empty.")

    dsl = dsl.strip()
    scope_segment, phase_segment = _split_once(dsl, "@")
    phase_token, application_segment = _split_once(phase_segment, "/")

    scope, filters = _parse_scope_segment(scope_segment.strip())

    preset = None
    application_token = application_segment
    if "#" in application_segment:
        application_token, preset = _split_once(application_segment, "#")
        preset = preset.strip()

    application = ConditionApplication.from_string(application_token)
    phase = ConditionPhase.from_string(phase_token)

    grouping = ConditionGrouping.for_preset(preset) if preset else None
    selector = ConditionSelector(tuple(filters), grouping) if filters or grouping is not None else None

    return ConditionTarget(scope, phase, application, selector)


def serialize_target(target: ConditionTarget) -> str:
    return target.to_dsl()


def _parse_scope_segment(segment: str) -> tuple[ConditionScope, list[ConditionFilter]]:
    if segment == "":
        raise TargetParseError("Scope segment is required in target DSL.")

    scope_name = segment
    filters: list[ConditionFilter] = []

    if ":" in segment:
        scope_name, filter_segment = _split_once(segment, ":")
        filters = [
            _parse_filter_token(token.strip())
            for token in _split_unquoted(filter_segment, ";")
            if token.strip()
        ]

    return ConditionScope.from_string(scope_name), filters


def _parse_filter_token(token: str) -> ConditionFilter:
    match = _FILTER_TOKEN.match(token)
    if match is None:
        raise TargetParseError(f"Unable to parse filter token [{token}]")

    field_name, operator_token, raw_value = match.groups()
    operator = ConditionFilterOperator.from_string(operator_token)

    try:
        return ConditionFilter(field_name.strip(), operator, _parse_value_token(raw_value, operator))
    except ConditionConfigurationError as exc:
        raise TargetParseError(f"Invalid filter token [{token}]: {exc}") from exc


def _parse_value_token(raw_value: str, operator: ConditionFilterOperator) -> Any:
    raw_value = raw_value.strip()
    bracketed = raw_value.startswith("[") and raw_value.endswith("]")

    if operator.requires_array_value and not bracketed:
        raise TargetParseError(f"Operator {operator.value} expects a bracketed list, got [{raw_value}]")

    if bracketed:
        inner = raw_value[1:-1].strip()
        if inner == "":
            return []

        return [cast_scalar(part) for part in _split_unquoted(inner, ",")]

    return cast_scalar(raw_value)


def _split_once(value: str, delimiter: str) -> tuple[str, str]:
    index = _find_unquoted(value, delimiter)
    if index < 0:
        raise TargetParseError(f"Malformed target segment [{value}]")

    return value[:index], value[index + 1 :]


def _split_unquoted(value: str, delimiter: str) -> list[str]:
    parts = []
    while True:
        index = _find_unquoted(value, delimiter)
        if index < 0:
            parts.append(value.strip())
            return parts
        parts.append(value[:index].strip())
        value = value[index + 1 :]


def _find_unquoted(value: str, delimiter: str) -> int:
    """Index of the first ``delimiter`` outside a quoted value, or -1."""
    quote = None
    escaped = False

    for index, char in enumerate(value):
        if quote is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue

        if char in ("'", '"'):
            quote = char
        elif char == delimiter:
            return index

    return -1
