"""Grouping of targeted entities (explicit group-by or a named preset)."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pricing.conditions.exceptions import ConditionConfigurationError


@dataclass(frozen=True)
class ConditionGrouping:
    """How entries of a scope are grouped before a per-group condition applies.

    Only ``preset`` survives a trip through the target DSL (``#preset``);
    ``group_by``, ``weight_field`` and ``limit`` live in the structured form.
    """

    group_by: str | None = None
    weight_field: str | None = None
    limit: int | None = None
    preset: str | None = None

    def __post_init__(self):
        if self.group_by is not None and self.group_by.strip() == "":
            raise ConditionConfigurationError("Grouping field cannot be empty.")

        if self.limit is not None and (isinstance(self.limit, bool) or not isinstance(self.limit, int)):
            raise ConditionConfigurationError(f"Grouping limit must be an integer, got {self.limit!r}.")

    @classmethod
    def for_preset(cls, preset: str) -> "ConditionGrouping":
        return cls(preset=preset)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConditionGrouping":
        return cls(
            group_by=data.get("group_by"),
            weight_field=data.get("weight_field"),
            limit=data.get("limit"),
            preset=data.get("preset"),
        )

    def to_dict(self) -> dict:
        return {
            "group_by": self.group_by,
            "weight_field": self.weight_field,
            "limit": self.limit,
            "preset": self.preset,
        }
