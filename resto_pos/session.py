"""Session facade used by the front-end: state, cart, checkout and storage."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

from resto_pos import reporting
from resto_pos.auth import find_user
from resto_pos.cart import Cart, add_to_cart, set_quantity
from resto_pos.catalog import CatalogStore
from resto_pos.checkout import CheckoutProcessor
from resto_pos.config import POS_TIMEZONE, REVENUE_SERIES_DAYS
from resto_pos.constant import INITIAL_CATEGORIES
from resto_pos.errors import UnknownUserError
from resto_pos.models import (
    CartLine,
    DailyRevenue,
    DashboardStats,
    MenuDraft,
    MenuItem,
    ReportSummary,
    Transaction,
    User,
)
from resto_pos.persistence import PosStorage
from resto_pos.reporting import HistoryView
from resto_pos.state import PosState, TransactionHistory

logger = logging.getLogger(__name__)


class PosSession:
    """One running terminal: owns the state and persists it after each change.

    A failed storage write is logged; the in-memory state stays authoritative.
    """

    def __init__(self, state: PosState, storage: PosStorage | None = None) -> None:
        self.state = state
        self.storage = storage
        self.cart = Cart()
        self.processor = CheckoutProcessor(state.catalog, state.history)

    @classmethod
    def load(cls, storage: PosStorage) -> PosSession:
        storage.bootstrap_schema()
        state = PosState(
            catalog=CatalogStore(storage.load_menus(), INITIAL_CATEGORIES),
            history=TransactionHistory(storage.load_transactions()),
            current_user=storage.load_user(),
        )
        logger.info(
            "session_loaded db=%s menus=%d transactions=%d user=%s",
            storage.db_path,
            len(state.catalog),
            len(state.history),
            state.current_user.username if state.current_user else None,
        )
        return cls(state, storage)

    def _persist(self, *, user: bool = False, menus: bool = False, transactions: bool = False) -> None:
        if self.storage is None:
            return
        try:
            if user:
                if self.state.current_user is None:
                    self.storage.clear_user()
                else:
                    self.storage.save_user(self.state.current_user)
            if menus:
                self.storage.save_menus(self.state.catalog.list())
            if transactions:
                self.storage.save_transactions(self.state.history)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("persist_failed db=%s error=%r", self.storage.db_path, exc)

    @property
    def user(self) -> User | None:
        return self.state.current_user

    def login(self, username: str) -> User:
        user = find_user(username)
        if user is None:
            raise UnknownUserError(f"Unknown username {username!r}. Use admin or kasir1")
        self.state.current_user = user
        self._persist(user=True)
        logger.info("login user=%s role=%s", user.username, user.role.value)
        return user

    def logout(self) -> None:
        self.state.current_user = None
        self.cart.clear()
        self._persist(user=True)

    def add_menu(self, draft: MenuDraft) -> MenuItem:
        item = draft.build(f"m{uuid4().hex[:8]}", self.state.catalog.categories)
        self.state.catalog.add_item(item)
        self._persist(menus=True)
        return item

    def update_menu(self, item_id: str, draft: MenuDraft) -> MenuItem:
        self.state.catalog.get(item_id)
        item = draft.build(item_id, self.state.catalog.categories)
        self.state.catalog.update_item(item)
        self._persist(menus=True)
        return item

    def delete_menu(self, item_id: str) -> None:
        self.state.catalog.delete_item(item_id)
        self._persist(menus=True)

    def add_to_cart(self, item_id: str) -> CartLine:
        return add_to_cart(self.cart, self.state.catalog.get(item_id))

    def change_quantity(self, item_id: str, delta: int) -> CartLine | None:
        current = self.state.catalog.get(item_id) if item_id in self.state.catalog else None
        return set_quantity(self.cart, item_id, delta, current)

    def checkout(self, now: datetime | None = None) -> Transaction:
        if self.state.current_user is None:
            raise UnknownUserError("No cashier is logged in")
        transaction = self.processor.checkout(
            self.cart,
            self.cart.discount,
            self.cart.payment_method,
            self.state.current_user,
            now=now,
        )
        self._persist(menus=True, transactions=True)
        return transaction

    def _today(self) -> date:
        return datetime.now(ZoneInfo(POS_TIMEZONE)).date()

    def dashboard(self, reference: datetime | date | None = None) -> DashboardStats:
        return reporting.dashboard_stats(
            self.state.history,
            self.state.catalog.list(),
            reference or self._today(),
        )

    def revenue_series(self, reference: datetime | date | None = None) -> list[DailyRevenue]:
        return reporting.revenue_series(self.state.history, reference or self._today(), REVENUE_SERIES_DAYS)

    def _scope(self, view: HistoryView) -> str | None:
        if self.state.current_user is None:
            return None
        return reporting.cashier_scope(self.state.current_user, view)

    def history(self, start: date, end: date, view: HistoryView = "history") -> list[Transaction]:
        return reporting.filter_range(self.state.history, start, end, self._scope(view))

    def report(self, start: date, end: date, view: HistoryView = "report") -> ReportSummary:
        return reporting.range_summary(self.state.history, start, end, self._scope(view))
