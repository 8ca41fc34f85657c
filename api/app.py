"""Flask REST API exposing the expense tracker core."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS

from expense_core.database import (
    DEFAULT_DATABASE_URL,
    create_engine,
    ensure_schema,
    is_memory_database,
)
from expense_core.exceptions import StorageError, ValidationError
from expense_core.services import ExpenseAggregator, ExpenseStore


def create_app(
    database_url: Optional[str] = None, static_dir: Optional[Path] = None
) -> Flask:
    """Build the API app and create the expenses table.

    Each async view runs on its own event loop, so the database must be a
    file; an in-memory database is pinned to the loop that opened it.
    """
    static_root = Path(
        static_dir or os.getenv("EXPENSE_TRACKER_STATIC_DIR", "public")
    ).resolve()
    app = Flask(__name__, static_folder=str(static_root), static_url_path="")

    env_name = os.getenv("EXPENSE_TRACKER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("EXPENSE_TRACKER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    url = database_url or os.getenv("EXPENSE_TRACKER_DATABASE_URL", DEFAULT_DATABASE_URL)
    if is_memory_database(url):
        raise ValueError("The API needs a file database; in-memory SQLite cannot be shared across requests")
    engine = create_engine(url)
    # Routes only become reachable once the table exists; a failure here aborts startup.
    asyncio.run(ensure_schema(engine))

    store = ExpenseStore(engine)
    aggregator = ExpenseAggregator(engine)
    app.extensions["expense_engine"] = engine

    def _handle_error(exc: Exception, status: int, label: str):
        app.logger.error("%s: %s", label, exc)
        return jsonify({"error": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(StorageError)
    def handle_storage_error(exc: StorageError):
        return _handle_error(exc, 500, "Storage error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    @app.get("/")
    def index():
        return send_from_directory(static_root, "index.html")

    @app.get("/api/expenses")
    async def list_expenses():
        expenses = await store.list()
        return jsonify({"expenses": [expense.to_dict() for expense in expenses]})

    @app.get("/api/expenses/grouped")
    async def grouped_expenses():
        return jsonify({"expenses": await aggregator.grouped_totals()})

    @app.get("/api/expenses/total")
    async def total_expenses():
        return jsonify({"total": await aggregator.total_sum()})

    @app.get("/api/expenses/highest")
    async def highest_expense():
        highest = await aggregator.highest_category()
        return jsonify(highest.to_dict())

    @app.post("/api/expenses")
    async def create_expense():
        payload = _json_body()
        expense = await store.create(payload.get("category"), payload.get("amount"))
        return jsonify({**expense.to_dict(), "message": "Expense added successfully"})

    @app.delete("/api/expenses/<int:expense_id>")
    async def delete_expense(expense_id: int):
        changes = await store.delete_by_id(expense_id)
        return jsonify({"message": "Expense deleted successfully", "changes": changes})

    @app.delete("/api/expenses")
    async def clear_expenses():
        changes = await store.delete_all()
        return jsonify({"message": "All expenses cleared", "changes": changes})

    return app
