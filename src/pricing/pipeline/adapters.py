"""Dataset entries and their base amounts.

Resolvers read a base amount from each dataset entry. Entries are either
mappings (``base_amount``, falling back to ``amount``) or objects that
implement ``BaseAmountSource``. Loosely typed records from elsewhere are
wrapped once with ``as_dataset_entry`` before they reach a resolver.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

_ACCESSOR_NAMES = ("get_base_amount", "base_amount", "get_amount", "amount")


class BaseAmountSource(ABC):
    @abstractmethod
    def base_amount(self) -> float:
        ...


class RecordEntry(BaseAmountSource):
    """Adapter exposing a base amount read from an arbitrary record."""

    def __init__(self, record: Any, amount: float) -> None:
        self.record = record
        self._amount = amount

    def base_amount(self) -> float:
        return self._amount

    def __repr__(self) -> str:
        return f"<RecordEntry {self._amount!r} {self.record!r}>"


def extract_base_amount(entry: Any) -> float:
    """Base amount of a dataset entry; ``0.0`` when none can be read."""
    if isinstance(entry, Mapping):
        amount = entry.get("base_amount")
        if amount is None:
            amount = entry.get("amount")
        return float(amount) if amount is not None else 0.0

    if isinstance(entry, BaseAmountSource):
        return float(entry.base_amount())

    return 0.0


def as_dataset_entry(record: Any) -> Mapping | BaseAmountSource:
    """Wrap ``record`` so a resolver can read its base amount.

    Mappings and ``BaseAmountSource`` objects pass through. Other objects are
    probed for ``get_base_amount``, ``base_amount``, ``get_amount`` and
    ``amount`` (method or attribute), first hit wins; records with none of
    them resolve to ``0.0``.
    """
    if isinstance(record, (Mapping, BaseAmountSource)):
        return record

    for name in _ACCESSOR_NAMES:
        accessor = getattr(record, name, None)
        if accessor is None:
            continue
        amount = accessor() if callable(accessor) else accessor
        return RecordEntry(record, float(amount))

    return RecordEntry(record, 0.0)


def as_dataset(records: Iterable[Any]) -> list[Mapping | BaseAmountSource]:
    return [as_dataset_entry(record) for record in records]
