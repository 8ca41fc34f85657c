"""Data models for the expense tracker domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

__all__ = ["Expense", "HighestCategory", "as_utc", "isoformat_utc"]


def as_utc(dt: datetime) -> datetime:
    """Return ``dt`` as a UTC-aware datetime, treating naive values as UTC."""
    if dt.tzinfo is None:
        # SQLite hands back naive datetimes; they are always written as UTC.
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat_utc(dt: datetime) -> str:
    """Return an ISO 8601 string with trailing Z for UTC datetimes."""
    iso = as_utc(dt).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z")


@dataclass(frozen=True)
class Expense:
    id: int
    category: str
    amount: float
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "category": self.category,
            "amount": self.amount,
            "created_at": isoformat_utc(self.created_at),
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Expense":
        """Hydrate an Expense from a database row mapping."""
        return cls(
            id=int(row["id"]),
            category=row["category"],
            amount=float(row["amount"]),
            created_at=as_utc(row["created_at"]),
        )


@dataclass(frozen=True)
class HighestCategory:
    """Category with the greatest summed amount; ``category`` is None when empty."""

    category: Optional[str]
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "amount": self.amount}
