"""SQLite persistence for the current user, the menu list and the sales history.

Each of the three records is stored whole as one JSON document under its own
key and rewritten after every change.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from resto_pos.config import DB_PATH, DB_PATH_ENV
from resto_pos.constant import INITIAL_MENUS
from resto_pos.models import CartLine, MenuItem, MenuStatus, PaymentMethod, Transaction, User, UserRole

logger = logging.getLogger(__name__)

USER_KEY = "pos_user"
MENUS_KEY = "pos_menus"
TRANSACTIONS_KEY = "pos_transactions"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_db_path() -> Path:
    return Path(os.environ.get(DB_PATH_ENV, "").strip() or DB_PATH)


def user_to_document(user: User) -> dict[str, Any]:
    return {"id": user.user_id, "username": user.username, "role": user.role.value, "name": user.name}


def user_from_document(doc: dict[str, Any]) -> User:
    return User(user_id=doc["id"], username=doc["username"], role=UserRole(doc["role"]), name=doc["name"])


def menu_to_document(item: MenuItem) -> dict[str, Any]:
    return {
        "id": item.item_id,
        "name": item.name,
        "categoryId": item.category_id,
        "price": item.price,
        "stock": item.stock,
        "status": item.status.value,
        "image": item.image,
    }


def menu_from_document(doc: dict[str, Any]) -> MenuItem:
    return MenuItem(
        item_id=doc["id"],
        name=doc["name"],
        category_id=doc["categoryId"],
        price=int(doc["price"]),
        stock=int(doc["stock"]),
        status=MenuStatus(doc["status"]),
        image=doc.get("image"),
    )


def transaction_to_document(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.transaction_id,
        "orderNumber": transaction.order_number,
        "timestamp": transaction.created_at.isoformat(),
        "kasirId": transaction.cashier_id,
        "kasirName": transaction.cashier_name,
        "items": [asdict(line) for line in transaction.lines],
        "subtotal": transaction.subtotal,
        "discount": transaction.discount,
        "total": transaction.total,
        "paymentMethod": transaction.payment_method.value,
    }


def transaction_from_document(doc: dict[str, Any]) -> Transaction:
    return Transaction(
        transaction_id=doc["id"],
        order_number=doc["orderNumber"],
        created_at=datetime.fromisoformat(doc["timestamp"]),
        cashier_id=doc["kasirId"],
        cashier_name=doc["kasirName"],
        lines=tuple(CartLine(**line) for line in doc["items"]),
        subtotal=int(doc["subtotal"]),
        discount=int(doc["discount"]),
        total=int(doc["total"]),
        payment_method=PaymentMethod(doc["paymentMethod"]),
    )


class PosStorage:
    """Key-value records in a local SQLite file."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self.db_path = Path(db_path) if db_path is not None else default_db_path()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the records table if it does not already exist."""
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS records (
                        key TEXT PRIMARY KEY,
                        document TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
        finally:
            conn.close()

    def _read(self, key: str) -> Any | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT document FROM records WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return json.loads(row[0])

    def _write(self, key: str, document: Any) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO records (key, document, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET document = excluded.document, updated_at = excluded.updated_at
                    """,
                    (key, json.dumps(document), _utc_now_iso()),
                )
        finally:
            conn.close()

    def _delete(self, key: str) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM records WHERE key = ?", (key,))
        finally:
            conn.close()

    def load_user(self) -> User | None:
        doc = self._read(USER_KEY)
        return user_from_document(doc) if doc is not None else None

    def save_user(self, user: User) -> None:
        self._write(USER_KEY, user_to_document(user))

    def clear_user(self) -> None:
        self._delete(USER_KEY)

    def load_menus(self) -> list[MenuItem]:
        """Stored menus, or the seed menu when nothing was stored yet."""
        docs = self._read(MENUS_KEY)
        if docs is None:
            return list(INITIAL_MENUS)
        return [menu_from_document(doc) for doc in docs]

    def save_menus(self, items: Iterable[MenuItem]) -> None:
        self._write(MENUS_KEY, [menu_to_document(item) for item in items])

    def load_transactions(self) -> list[Transaction]:
        """Stored transactions, most recent first."""
        docs = self._read(TRANSACTIONS_KEY)
        if docs is None:
            return []
        return [transaction_from_document(doc) for doc in docs]

    def save_transactions(self, transactions: Iterable[Transaction]) -> None:
        docs = [transaction_to_document(transaction) for transaction in transactions]
        self._write(TRANSACTIONS_KEY, docs)
        logger.debug("saved transactions count=%d", len(docs))
