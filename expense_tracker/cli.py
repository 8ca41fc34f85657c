"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from api.app import create_app
from expense_core.database import (
    DEFAULT_DATABASE_URL,
    create_engine,
    dispose_engine,
    ensure_schema,
)
from expense_core.exceptions import StorageError, ValidationError
from expense_core.services import ExpenseAggregator, ExpenseStore

logger = logging.getLogger("expense_tracker")


def _configure_logging() -> None:
    level = os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _format_expense(expense: Dict[str, Any]) -> str:
    return f"[{expense['id']}] {expense['created_at']} {expense['category']}: {expense['amount']:.2f}"


async def run_command(args: argparse.Namespace, engine: AsyncEngine) -> None:
    await ensure_schema(engine)
    store = ExpenseStore(engine)
    aggregator = ExpenseAggregator(engine)

    if args.command == "add":
        expense = await store.create(args.category, args.amount)
        print("Expense added: " + _format_expense(expense.to_dict()))
    elif args.command == "list":
        expenses = await store.list()
        if not expenses:
            print("No expenses found.")
            return
        print(f"Found {len(expenses)} expenses:")
        for expense in expenses:
            print(_format_expense(expense.to_dict()))
    elif args.command == "delete":
        removed = await store.delete_by_id(args.id)
        print(f"Deleted {removed} expense(s).")
    elif args.command == "clear":
        removed = await store.delete_all()
        print(f"Cleared {removed} expense(s).")
    elif args.command == "grouped":
        grouped = await aggregator.grouped_totals()
        if not grouped:
            print("No expenses found.")
            return
        for category, total in grouped.items():
            print(f"{category}: {total:.2f}")
    elif args.command == "total":
        print(f"Total: {await aggregator.total_sum():.2f}")
    elif args.command == "highest":
        highest = await aggregator.highest_category()
        if highest.category is None:
            print("No expenses found.")
        else:
            print(f"Highest: {highest.category} ({highest.amount:.2f})")


def serve(args: argparse.Namespace) -> int:
    try:
        app = create_app(args.database_url)
    except (StorageError, ValueError) as exc:
        logger.error("Unable to prepare database: %s", exc)
        return 1

    engine = app.extensions["expense_engine"]
    logger.info("Server running on http://%s:%s", args.host, args.port)
    try:
        app.run(host=args.host, port=args.port)
    finally:
        asyncio.run(dispose_engine(engine))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--database-url",
        default=os.getenv("EXPENSE_TRACKER_DATABASE_URL", DEFAULT_DATABASE_URL),
        help=f"SQLAlchemy database URL (default: {DEFAULT_DATABASE_URL})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Add a new expense")
    add_parser.add_argument("category")
    add_parser.add_argument("amount")

    subparsers.add_parser("list", help="List expenses, most recent first")

    delete_parser = subparsers.add_parser("delete", help="Delete an expense by id")
    delete_parser.add_argument("id", type=int)

    subparsers.add_parser("clear", help="Delete every expense")
    subparsers.add_parser("grouped", help="Show totals per category")
    subparsers.add_parser("total", help="Show the overall total")
    subparsers.add_parser("highest", help="Show the highest-spending category")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "3000")))

    return parser


async def _run_and_close(args: argparse.Namespace) -> None:
    engine = create_engine(args.database_url)
    try:
        await run_command(args, engine)
    finally:
        await dispose_engine(engine)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging()

    if args.command == "serve":
        return serve(args)

    try:
        asyncio.run(_run_and_close(args))
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except StorageError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
