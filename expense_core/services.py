"""Framework-agnostic business services for the expense tracker."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy import delete, desc, func, insert, select
from sqlalchemy.ext.asyncio import AsyncEngine

from .database import connect, expenses_table
from .models import Expense, HighestCategory
from .validators import parse_amount, validate_category

SQLITE_MIN_INTEGER = -(2**63)
SQLITE_MAX_INTEGER = 2**63 - 1


class ExpenseStore:
    """Creates, lists and removes expense records.

    Every method is a coroutine issued against the injected engine. Each
    statement runs in its own transaction, so a single create or delete is
    atomic, but consecutive calls are not isolated from other callers.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    # Public API -----------------------------------------------------------
    async def create(self, category: object, amount: object) -> Expense:
        """Validate and persist a new expense, returning it with its generated id."""
        clean_category = validate_category(category)
        clean_amount = parse_amount(amount)
        created_at = _utc_now()

        async with connect(self._engine) as conn:
            result = await conn.execute(
                insert(expenses_table).values(
                    category=clean_category,
                    amount=clean_amount,
                    created_at=created_at.replace(tzinfo=None),
                )
            )
            expense_id = result.inserted_primary_key[0]

        return Expense(
            id=int(expense_id),
            category=clean_category,
            amount=clean_amount,
            created_at=created_at,
        )

    async def list(self) -> List[Expense]:
        """Return every expense, most recent first."""
        query = select(expenses_table).order_by(
            desc(expenses_table.c.created_at), desc(expenses_table.c.id)
        )
        async with connect(self._engine) as conn:
            result = await conn.execute(query)
            rows = result.mappings().all()
        return [Expense.from_row(row) for row in rows]

    async def delete_by_id(self, expense_id: int) -> int:
        """Remove one expense; returns 0 when no such id exists."""
        if not SQLITE_MIN_INTEGER <= expense_id <= SQLITE_MAX_INTEGER:
            # No stored row can carry an id SQLite cannot represent.
            return 0
        query = delete(expenses_table).where(expenses_table.c.id == expense_id)
        async with connect(self._engine) as conn:
            result = await conn.execute(query)
            removed = result.rowcount
        return removed

    async def delete_all(self) -> int:
        async with connect(self._engine) as conn:
            result = await conn.execute(delete(expenses_table))
            removed = result.rowcount
        return removed


class ExpenseAggregator:
    """Read-only projections over the current expense records."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def grouped_totals(self) -> Dict[str, float]:
        """Sum amounts per category, keyed in ascending category order."""
        query = (
            select(
                expenses_table.c.category,
                func.sum(expenses_table.c.amount).label("total_amount"),
            )
            .group_by(expenses_table.c.category)
            .order_by(expenses_table.c.category)
        )
        async with connect(self._engine) as conn:
            result = await conn.execute(query)
            rows = result.all()
        return {category: float(total) for category, total in rows}

    async def total_sum(self) -> float:
        query = select(func.coalesce(func.sum(expenses_table.c.amount), 0))
        async with connect(self._engine) as conn:
            total = (await conn.execute(query)).scalar_one()
        return float(total)

    async def highest_category(self) -> HighestCategory:
        """Return the category with the largest total.

        Ties resolve to the category that sorts first, since ``max`` keeps
        the earliest maximum of the ordered grouping.
        """
        grouped = await self.grouped_totals()
        if not grouped:
            return HighestCategory(category=None, amount=0.0)
        category = max(grouped, key=grouped.__getitem__)
        return HighestCategory(category=category, amount=grouped[category])


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)
