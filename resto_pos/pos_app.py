"""Main Textual app class."""

from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from resto_pos.config import POS_TIMEZONE
from resto_pos.errors import PosError
from resto_pos.modals import DiscountModal, LoginModal, MenuAdminModal, ReceiptModal, ReportModal
from resto_pos.models import MenuItem
from resto_pos.printer import check_printer_dependencies, print_receipt
from resto_pos.rendering import format_cart_line, format_menu_label, format_totals
from resto_pos.session import PosSession

logger = logging.getLogger(__name__)


class PosApp(App):
    """A Textual cashier terminal: search the menu, build a cart, check out."""

    TITLE = "POS Resto Pro"
    SUB_TITLE = "Kasir"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #menu-pane {
        width: 3fr;
        border: round $secondary;
        padding: 1;
    }

    #cart-pane {
        width: 2fr;
        border: round $primary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 5;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #totals {
        height: auto;
        padding: 1 1 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_query = reactive("")
    selected_index = reactive(0)
    cart_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "add_selected", "Add to cart"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "checkout", "Checkout + Print", priority=True),
        ("ctrl+c", "cancel_search", "Exit search"),
        ("ctrl+l", "logout", "Logout"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, session: PosSession) -> None:
        super().__init__()
        self.session = session
        self.system_status = ""
        logger.debug("app_init")

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="menu-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")
            with Vertical(id="cart-pane"):
                yield Static("Keranjang", classes="pane-title")
                yield Static("(keranjang kosong)", id="cart-list")
                yield Static(id="totals")

    def on_mount(self) -> None:
        _, msg = check_printer_dependencies()
        self.system_status = msg
        logger.info("on_mount printer_status=%r", msg)
        if self.session.user is None:
            self._prompt_login()
        self._refresh_all()

    def _today(self) -> date:
        return datetime.now(ZoneInfo(POS_TIMEZONE)).date()

    def _prompt_login(self, error: str = "") -> None:
        self.push_screen(LoginModal(error), self._on_login)

    def _on_login(self, username: str | None) -> None:
        if username is None:
            return
        try:
            user = self.session.login(username)
        except PosError as exc:
            self._prompt_login(str(exc))
            return
        self.sub_title = user.name
        self.system_status = f"Login: {user.name}"
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        logger.debug("on_key key=%r char=%r state=%r", event.key, event.character, self.input_state)

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        char = event.character
        if self.input_state == "search":
            if char.isalnum() or char == " ":
                self.search_query += char
                self.selected_index = 0
                self._refresh_search()
                event.stop()
            return

        handled = True
        if char == "/":
            self.input_state = "search"
            self.search_query = ""
            self.selected_index = 0
            self._refresh_search()
        elif char in {"j", "k"}:
            self._move_cart_selection(1 if char == "j" else -1)
        elif char in {"+", "="}:
            self._change_selected_quantity(1)
        elif char == "-":
            self._change_selected_quantity(-1)
        elif char == "x":
            self._remove_selected_line()
        elif char == "p":
            method = self.session.cart.toggle_payment_method()
            self.system_status = f"Pembayaran: {method.value}"
            self._refresh_all()
        elif char == "d":
            self._open_discount()
        elif char == "r":
            self.push_screen(ReportModal(self.session, self._today()))
        elif char == "m":
            self._open_menu_admin()
        else:
            handled = False
        if handled:
            event.stop()

    def action_cancel_search(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return
        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen) or self.input_state != "search":
            return
        results = self._filtered_results()
        if not results:
            self.selected_index = 0
        else:
            self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_add_selected(self) -> None:
        if isinstance(self.screen, ModalScreen) or self.input_state != "search":
            return
        results = self._filtered_results()
        if not results:
            return
        item = results[self.selected_index]
        try:
            self.session.add_to_cart(item.item_id)
        except PosError as exc:
            self.system_status = str(exc)
        else:
            self.system_status = f"+1 {item.name}"
            self.cart_selected_index = self.session.cart.find(item.item_id)
        self._refresh_all()

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen) or self.input_state != "search":
            return
        if not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_logout(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.session.logout()
        self.cart_selected_index = None
        self.sub_title = "Kasir"
        self.system_status = "Logged out"
        self._refresh_all()
        self._prompt_login()

    def action_checkout(self) -> None:
        logger.debug("checkout_enter lines=%d screen=%s", len(self.session.cart), type(self.screen).__name__)
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "normal":
            self.system_status = "Checkout only outside search (Ctrl+C to exit search)"
            self._refresh_search()
            return

        try:
            transaction = self.session.checkout()
        except PosError as exc:
            self.system_status = str(exc)
            self._refresh_all()
            logger.info("checkout_blocked reason=%r", str(exc))
            return

        try:
            print_receipt(transaction)
        except Exception as exc:
            print_status = f"Saved {transaction.order_number} but print failed: {exc}"
            logger.warning("print_failed order=%s error=%r", transaction.order_number, exc)
        else:
            print_status = f"Saved + printed: {transaction.order_number}"

        self.cart_selected_index = None
        self.system_status = print_status
        self._refresh_all()
        self.push_screen(ReceiptModal(transaction, print_status))

    def _open_discount(self) -> None:
        cart = self.session.cart
        if cart.is_empty:
            self.system_status = "Cart is empty"
            self._refresh_search()
            return
        self.push_screen(DiscountModal(cart.discount, cart.subtotal), self._on_discount)

    def _on_discount(self, amount: int | None) -> None:
        if amount is None:
            return
        self.session.cart.set_discount(amount)
        self._refresh_all()

    def _open_menu_admin(self) -> None:
        user = self.session.user
        if user is None or not user.is_admin:
            self.system_status = "Menu management is for admins only"
            self._refresh_search()
            return
        self.push_screen(MenuAdminModal(self.session, on_change=self._refresh_all))

    def _selected_item_id(self) -> str | None:
        lines = self.session.cart.lines
        if self.cart_selected_index is None or not (0 <= self.cart_selected_index < len(lines)):
            return None
        return lines[self.cart_selected_index].item_id

    def _change_selected_quantity(self, delta: int) -> None:
        item_id = self._selected_item_id()
        if item_id is None:
            return
        try:
            self.session.change_quantity(item_id, delta)
        except PosError as exc:
            self.system_status = str(exc)
        self._refresh_all()

    def _remove_selected_line(self) -> None:
        item_id = self._selected_item_id()
        if item_id is None:
            return
        idx = self.session.cart.find(item_id)
        quantity = self.session.cart.lines[idx].quantity if idx is not None else 0
        self.session.change_quantity(item_id, -quantity)
        self._refresh_all()

    def _move_cart_selection(self, delta: int) -> None:
        lines = self.session.cart.lines
        if not lines:
            return
        if self.cart_selected_index is None:
            self.cart_selected_index = 0 if delta > 0 else len(lines) - 1
        else:
            self.cart_selected_index = (self.cart_selected_index + delta) % len(lines)
        self._refresh_cart()

    def _filtered_results(self) -> list[MenuItem]:
        return self.session.state.catalog.sellable(self.search_query)

    def _refresh_all(self) -> None:
        self._refresh_cart()
        self._refresh_search()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            start = max(0, selected - rows // 2)
            start = min(start, total - rows)
        return (start, start + rows)

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            totals_widget = self.query_one("#totals", Static)
        except NoMatches:
            return

        cart = self.session.cart
        totals_widget.update(format_totals(cart.subtotal, cart.discount, cart.payment_method))
        if cart.is_empty:
            self.cart_selected_index = None
            cart_widget.update("(keranjang kosong)")
            return

        if self.cart_selected_index is None or self.cart_selected_index >= len(cart.lines):
            self.cart_selected_index = len(cart.lines) - 1

        visible_rows = self._visible_rows(cart_widget)
        start, end = self._window_bounds(len(cart.lines), visible_rows, self.cart_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == self.cart_selected_index else "  ")
            lines.append_text(format_cart_line(cart.lines[idx]))
        if end < len(cart.lines):
            lines.append("\n⋮", style="dim")
        cart_widget.update(lines)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(
                "/ search. j/k select, +/- qty, x remove, d discount, p payment.\n"
                f"Ctrl+S checkout, r reports, m menu.\n{status}"
            )
            return

        text = Text()
        text.append(" Cari ", style="bold #ffffff on #2f6db5")
        text.append(f": {self.search_query}")
        if self.system_status:
            text.append(f"\n{self.system_status}", style="dim")
        bar.update(text)

    def _refresh_results(self, results: list[MenuItem]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return
        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == self.selected_index else "  ")
            lines.append_text(format_menu_label(results[idx]))
        if end < len(results):
            lines.append("\n⋮", style="dim")
        results_widget.update(lines)
