"""Shared fixtures: an in-memory database with the schema applied."""

import pytest

from expense_core.database import create_engine, dispose_engine, ensure_schema
from expense_core.services import ExpenseAggregator, ExpenseStore


@pytest.fixture
async def engine():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await ensure_schema(engine)
    yield engine
    await dispose_engine(engine)


@pytest.fixture
def store(engine):
    return ExpenseStore(engine)


@pytest.fixture
def aggregator(engine):
    return ExpenseAggregator(engine)


@pytest.fixture
def database_url(tmp_path):
    """URL of a fresh file database for tests that cross event loops."""
    return f"sqlite+aiosqlite:///{tmp_path / 'expenses.db'}"
