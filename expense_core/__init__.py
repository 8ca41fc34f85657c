"""Core persistence and aggregation package for the expense tracker."""

from .database import create_engine, dispose_engine, ensure_schema
from .exceptions import StorageError, ValidationError
from .models import Expense, HighestCategory
from .services import ExpenseAggregator, ExpenseStore

__all__ = [
    "Expense",
    "HighestCategory",
    "ExpenseStore",
    "ExpenseAggregator",
    "create_engine",
    "ensure_schema",
    "dispose_engine",
    "StorageError",
    "ValidationError",
]
