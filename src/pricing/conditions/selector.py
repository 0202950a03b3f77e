"""Selector: ordered filters plus optional grouping."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pricing.conditions.filters import ConditionFilter
from pricing.conditions.grouping import ConditionGrouping


@dataclass(frozen=True)
class ConditionSelector:
    filters: tuple[ConditionFilter, ...] = ()
    grouping: ConditionGrouping | None = None

    def __post_init__(self):
        if not isinstance(self.filters, tuple):
            object.__setattr__(self, "filters", tuple(self.filters))

    @classmethod
    def none(cls) -> "ConditionSelector":
        return cls()

    @classmethod
    def of(cls, filters: Iterable[ConditionFilter] = (), grouping: ConditionGrouping | None = None) -> "ConditionSelector":
        return cls(tuple(filters), grouping)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConditionSelector":
        filters = [ConditionFilter.from_dict(item) for item in data.get("filters") or []]
        grouping = data.get("grouping")

        return cls(
            tuple(filters),
            ConditionGrouping.from_dict(grouping) if grouping is not None else None,
        )

    def with_filter(self, condition_filter: ConditionFilter) -> "ConditionSelector":
        return ConditionSelector(self.filters + (condition_filter,), self.grouping)

    def is_empty(self) -> bool:
        return not self.filters and self.grouping is None

    def matches(self, subject: Any) -> bool:
        """True when every filter matches ``subject`` (vacuously true without filters)."""
        return all(condition_filter.matches(subject) for condition_filter in self.filters)

    def to_dict(self) -> dict:
        return {
            "filters": [condition_filter.to_dict() for condition_filter in self.filters],
            "grouping": self.grouping.to_dict() if self.grouping is not None else None,
        }

    def to_dsl_filters(self) -> str | None:
        if not self.filters:
            return None

        return ";".join(condition_filter.to_dsl_token() for condition_filter in self.filters)
