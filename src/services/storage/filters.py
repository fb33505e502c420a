"""
Typed query filters shared by the in-memory and SQLite stores.

A Filter is a conjunction of per-field conditions. Conditions are validated
when they are built, and field names are checked against the record model,
so a malformed query fails at construction rather than inside a store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union
from pydantic import BaseModel
from ...models.invoice import as_utc


def _comparable(value: Any) -> Any:
    """Unwrap enums and align datetimes to UTC before comparing."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return as_utc(value)
    return value


@dataclass(frozen=True)
class Equals:
    value: Any

    def matches(self, candidate: Any) -> bool:
        return _comparable(candidate) == _comparable(self.value)


@dataclass(frozen=True)
class NotEqual:
    value: Any

    def matches(self, candidate: Any) -> bool:
        return _comparable(candidate) != _comparable(self.value)


@dataclass(frozen=True)
class Contains:
    """Substring match. The text is literal, never a regex pattern."""
    text: str
    case_sensitive: bool = False

    def __post_init__(self):
        if not isinstance(self.text, str) or not self.text:
            raise ValueError("Contains requires a non-empty string")

    def matches(self, candidate: Any) -> bool:
        if not isinstance(candidate, str):
            return False
        if self.case_sensitive:
            return self.text in candidate
        return self.text.casefold() in candidate.casefold()


@dataclass(frozen=True)
class Range:
    """Inclusive range; either bound may be omitted but not both."""
    gte: Any = None
    lte: Any = None

    def __post_init__(self):
        if self.gte is None and self.lte is None:
            raise ValueError("Range requires at least one bound")
        if self.gte is not None and self.lte is not None:
            if _comparable(self.gte) > _comparable(self.lte):
                raise ValueError(f"Range lower bound {self.gte!r} is after upper bound {self.lte!r}")

    def matches(self, candidate: Any) -> bool:
        if candidate is None:
            return False
        candidate = _comparable(candidate)
        if self.gte is not None and candidate < _comparable(self.gte):
            return False
        if self.lte is not None and candidate > _comparable(self.lte):
            return False
        return True


Condition = Union[Equals, NotEqual, Contains, Range]


@dataclass(frozen=True)
class FieldCondition:
    field: str
    condition: Condition


@dataclass
class Filter:
    """
    Conjunction of field conditions for one record model.

    Usage:
        Filter(Invoice).where("remark", Contains("VA9988")).where(
            "value_date", Range(gte=start, lte=end)
        )
    """

    model: type[BaseModel]
    conditions: list[FieldCondition] = field(default_factory=list)

    def where(self, field_name: str, condition: Condition) -> "Filter":
        if field_name not in self.model.model_fields:
            raise ValueError(f"{self.model.__name__} has no field '{field_name}'")
        if not isinstance(condition, (Equals, NotEqual, Contains, Range)):
            raise TypeError(f"Unsupported filter condition: {condition!r}")
        self.conditions.append(FieldCondition(field_name, condition))
        return self

    def matches(self, record: BaseModel) -> bool:
        return all(
            c.condition.matches(getattr(record, c.field))
            for c in self.conditions
        )
