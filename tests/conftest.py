from __future__ import annotations

from datetime import datetime
from itertools import count
from zoneinfo import ZoneInfo

import pytest

from resto_pos.catalog import CatalogStore
from resto_pos.constant import INITIAL_CATEGORIES
from resto_pos.models import CartLine, MenuItem, MenuStatus, PaymentMethod, Transaction, User, UserRole
from resto_pos.state import TransactionHistory

JAKARTA = ZoneInfo("Asia/Jakarta")


def _at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=JAKARTA)


@pytest.fixture
def at():
    """Timestamp factory in the POS timezone."""
    return _at


@pytest.fixture
def tea() -> MenuItem:
    return MenuItem("tea", "Tea", "2", 5000, 10)


@pytest.fixture
def coffee() -> MenuItem:
    return MenuItem("coffee", "Coffee", "2", 18000, 5)


@pytest.fixture
def catalog(tea: MenuItem, coffee: MenuItem) -> CatalogStore:
    return CatalogStore(
        [
            tea,
            coffee,
            MenuItem("rice", "Nasi Goreng", "1", 25000, 1),
            MenuItem("cake", "Cake", "4", 12000, 0),
            MenuItem("old", "Old Soup", "1", 9000, 3, MenuStatus.INACTIVE),
        ],
        INITIAL_CATEGORIES,
    )


@pytest.fixture
def history() -> TransactionHistory:
    return TransactionHistory()


@pytest.fixture
def cashier() -> User:
    return User("u2", "kasir1", UserRole.CASHIER, "Siti (Kasir)")


@pytest.fixture
def admin() -> User:
    return User("u1", "admin", UserRole.ADMIN, "Budi (Admin)")


@pytest.fixture
def make_transaction():
    """Build committed transactions directly, bypassing checkout."""
    ids = count(1)

    def _make(
        created_at: datetime,
        lines: list[tuple[str, int, int]] | None = None,
        discount: int = 0,
        cashier_id: str = "u2",
        total: int | None = None,
    ) -> Transaction:
        idx = next(ids)
        if lines is None:
            lines = [("Item", total if total is not None else 10000, 1)]
        snapshot = tuple(
            CartLine(item_id=name.lower(), name=name, category_id="1", price=price, stock=100, quantity=quantity)
            for name, price, quantity in lines
        )
        subtotal = sum(line.line_total for line in snapshot)
        return Transaction(
            transaction_id=f"t{idx}",
            order_number=f"TRX-{idx:06d}",
            created_at=created_at,
            cashier_id=cashier_id,
            cashier_name="Budi (Admin)" if cashier_id == "u1" else "Siti (Kasir)",
            lines=snapshot,
            subtotal=subtotal,
            discount=discount,
            total=subtotal - discount,
            payment_method=PaymentMethod.CASH,
        )

    return _make
