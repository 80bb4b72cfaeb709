"""Modal screens: login, discount entry, receipt, reports, menu admin and menu form."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from resto_pos.errors import PosError
from resto_pos.menu_form import CHOICE_FIELDS, FIELD_LABELS, FIELDS, DeleteConfirmation, MenuForm
from resto_pos.models import MenuDraft, MenuItem, MenuStatus, Transaction
from resto_pos.rendering import (
    format_currency,
    format_menu_label,
    format_receipt,
    format_status_badge,
    format_timestamp,
)
from resto_pos.session import PosSession

_DIALOG_CSS = """
    {name} {{
        align: center middle;
        background: $background 60%;
    }}

    {name} .dialog {{
        width: {width};
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }}

    .dialog-title {{
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }}

    .dialog-value {{
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }}

    .dialog-error {{
        color: #ffb3b3;
        margin-bottom: 1;
    }}

    .dialog-help {{
        color: #dddddd;
    }}
"""


class LoginModal(ModalScreen[str | None]):
    """Prompt for a username; passwords are not asked for."""

    CSS = _DIALOG_CSS.format(name="LoginModal", width=48)

    def __init__(self, error: str = "") -> None:
        super().__init__()
        self.value = ""
        self.error = error

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("POS Resto Pro - Login", classes="dialog-title")
            yield Static("Username (admin atau kasir1)")
            yield Static(id="login-value", classes="dialog-value")
            yield Static(id="login-error", classes="dialog-error")
            yield Static("Enter login. Backspace delete. Ctrl+Q quit.", classes="dialog-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "enter":
            if not self.value:
                self.error = "Username is required."
                self._refresh_content()
            else:
                self.dismiss(self.value)
            event.stop()
            return

        if event.key == "backspace":
            self.value = self.value[:-1]
            self.error = ""
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and event.character.isalnum():
            if len(self.value) < 32:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _refresh_content(self) -> None:
        self.query_one("#login-value", Static).update(self.value)
        self.query_one("#login-error", Static).update(self.error)


class DiscountModal(ModalScreen[int | None]):
    """Prompt for a discount amount in whole Rupiah."""

    CSS = _DIALOG_CSS.format(name="DiscountModal", width=56)

    def __init__(self, current: int, subtotal: int) -> None:
        super().__init__()
        self.value = str(current) if current else ""
        self.subtotal = subtotal
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("Diskon (Rp)", classes="dialog-title")
            yield Static(f"Subtotal {format_currency(self.subtotal)}")
            yield Static(id="discount-value", classes="dialog-value")
            yield Static(id="discount-error", classes="dialog-error")
            yield Static("Digits only. Enter confirm. Backspace delete. Esc/q cancel.", classes="dialog-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "q", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and event.character.isdigit():
            if len(self.value) < 9:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        parsed = int(self.value) if self.value else 0
        if parsed > self.subtotal:
            self.error = "Discount cannot exceed the subtotal."
            self._refresh_content()
            return
        self.dismiss(parsed)

    def _refresh_content(self) -> None:
        shown = format_currency(int(self.value)) if self.value else ""
        self.query_one("#discount-value", Static).update(shown)
        self.query_one("#discount-error", Static).update(self.error)


class ReceiptModal(ModalScreen[None]):
    """Show the receipt of the transaction just committed."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("enter", "close", "Close"),
        ("q", "close", "Close"),
    ]

    CSS = _DIALOG_CSS.format(name="ReceiptModal", width=52)

    def __init__(self, transaction: Transaction, print_status: str) -> None:
        super().__init__()
        self.transaction = transaction
        self.print_status = print_status

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("Transaksi Berhasil", classes="dialog-title")
            yield Static(format_receipt(self.transaction))
            yield Static(self.print_status, classes="dialog-error")
            yield Static("Enter/Esc close", classes="dialog-help")

    def action_close(self) -> None:
        self.dismiss()


class ReportModal(ModalScreen[None]):
    """Today's dashboard plus a date-range summary and transaction list.

    Admins get the full report; cashiers see only their own history.
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("left", "shift_start(-1)", "Start -1 day"),
        ("right", "shift_start(1)", "Start +1 day"),
        ("h", "shift_end(-1)", "End -1 day"),
        ("l", "shift_end(1)", "End +1 day"),
        ("t", "reset_range", "Today"),
    ]

    CSS = _DIALOG_CSS.format(name="ReportModal", width=72)

    def __init__(self, session: PosSession, today: date) -> None:
        super().__init__()
        self.session = session
        self.today = today
        self.start = today
        self.end = today
        user = session.user
        self.view = "report" if user is not None and user.is_admin else "history"

    def compose(self) -> ComposeResult:
        title = "Laporan Penjualan" if self.view == "report" else "Riwayat Transaksi"
        with Container(classes="dialog"):
            yield Static(title, classes="dialog-title")
            yield Static(id="report-dashboard")
            yield Static(id="report-body")
            yield Static("Left/Right start, h/l end, t today, Esc/q close", classes="dialog-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss()

    def action_shift_start(self, days: int) -> None:
        self.start = min(self.start + timedelta(days=days), self.end)
        self._refresh_content()

    def action_shift_end(self, days: int) -> None:
        self.end = max(self.end + timedelta(days=days), self.start)
        self._refresh_content()

    def action_reset_range(self) -> None:
        self.start = self.today
        self.end = self.today
        self._refresh_content()

    def _refresh_content(self) -> None:
        stats = self.session.dashboard(self.today)
        series = self.session.revenue_series(self.today)
        dash = Text()
        dash.append(f"Hari ini  {format_currency(stats.revenue)}  ({stats.count} transaksi)\n", style="bold")
        dash.append(f"Menu aktif {stats.active_menus}   Terlaris {stats.top_menu}\n")
        peak = max((point.revenue for point in series), default=0)
        for point in series:
            width = round(24 * point.revenue / peak) if peak else 0
            dash.append(f"{point.day.strftime('%a %d')} ")
            dash.append("█" * width, style="#5fbf72")
            dash.append(f" {format_currency(point.revenue)}\n", style="dim")
        self.query_one("#report-dashboard", Static).update(dash)

        summary = self.session.report(self.start, self.end, self.view)
        body = Text()
        body.append(f"\n{self.start.isoformat()} .. {self.end.isoformat()}\n", style="bold")
        body.append(f"Pendapatan  {format_currency(summary.total_revenue)}\n")
        body.append(f"Diskon      {format_currency(summary.total_discount)}\n")
        body.append(f"Transaksi   {summary.total_transactions}\n")
        body.append(f"Rata-rata   {format_currency(summary.avg_order_value)}\n\n")
        for transaction in self.session.history(self.start, self.end, self.view)[:10]:
            body.append(f"{format_timestamp(transaction.created_at)}  {transaction.order_number}  ")
            body.append(f"{transaction.cashier_name}  {format_currency(transaction.total)}\n", style="dim")
        self.query_one("#report-body", Static).update(body)


class MenuFormModal(ModalScreen[MenuItem | None]):
    """Add a menu item or edit every field of an existing one."""

    CSS = _DIALOG_CSS.format(name="MenuFormModal", width=64)

    def __init__(self, session: PosSession, item: MenuItem | None = None) -> None:
        super().__init__()
        self.form = MenuForm(session, item)
        self.error = ""

    def compose(self) -> ComposeResult:
        title = "Tambah Menu" if self.form.is_new else "Edit Menu"
        with Container(classes="dialog"):
            yield Static(title, classes="dialog-title")
            yield Static(id="form-body", classes="dialog-value")
            yield Static(id="form-error", classes="dialog-error")
            yield Static(
                "Up/Down/Tab field, Left/Right choose, Enter save, Esc cancel",
                classes="dialog-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            event.stop()
            self._save()
            return

        if event.key in {"down", "tab"}:
            self.form.move(1)
        elif event.key in {"up", "shift+tab"}:
            self.form.move(-1)
        elif event.key in {"left", "right"}:
            self.form.cycle(1 if event.key == "right" else -1)
        elif event.key == "backspace":
            self.form.backspace()
        elif event.is_printable and event.character and len(event.character) == 1:
            self.form.type_char(event.character)
        else:
            return
        event.stop()
        self._refresh_content()

    def _save(self) -> None:
        try:
            item = self.form.submit()
        except PosError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        if item is None:
            self.error = "Periksa kembali isian yang ditandai."
            self._refresh_content()
            return
        self.dismiss(item)

    def _refresh_content(self) -> None:
        body = Text(style="white")
        for idx, field in enumerate(FIELDS):
            if idx > 0:
                body.append("\n")
            pointer = "➤ " if idx == self.form.cursor else "  "
            body.append(f"{pointer}{FIELD_LABELS[field]:<9}", style="bold" if idx == self.form.cursor else "")
            value = self.form.display(field)
            body.append(f"< {value} >" if field in CHOICE_FIELDS else value)
            reason = self.form.errors.get(field)
            if reason:
                body.append(f"  {reason}", style="#ffb3b3")
        self.query_one("#form-body", Static).update(body)
        self.query_one("#form-error", Static).update(self.error)


class MenuAdminModal(ModalScreen[None]):
    """List menu items: add, edit, restock, activate/deactivate and delete."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("up", "move_cursor(-1)", "Previous"),
        ("plus", "restock(1)", "Stock +1"),
        ("minus", "restock(-1)", "Stock -1"),
        ("n", "new_item", "New"),
        ("e", "edit_current", "Edit"),
        ("enter", "edit_current", "Edit"),
        ("a", "toggle_status", "Toggle active"),
        ("x", "delete_current", "Delete"),
    ]

    CSS = _DIALOG_CSS.format(name="MenuAdminModal", width=72)

    cursor_index = reactive(0)

    def __init__(self, session: PosSession, on_change: Callable[[], None]) -> None:
        super().__init__()
        self.session = session
        self.on_change = on_change
        self.error = ""
        self.deletion = DeleteConfirmation()

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("Kelola Menu", classes="dialog-title")
            yield Static(id="menu-body")
            yield Static(id="menu-error", classes="dialog-error")
            yield Static("j/k move, n new, e edit, +/- stock, a active, x x delete, Esc close", classes="dialog-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss()
        self.on_change()

    def action_move_cursor(self, delta: int) -> None:
        items = self.session.state.catalog.list()
        if not items:
            return
        self.cursor_index = (self.cursor_index + delta) % len(items)
        self.deletion.reset()
        self.error = ""
        self._refresh_content()

    def action_new_item(self) -> None:
        self.deletion.reset()
        self.app.push_screen(MenuFormModal(self.session), self._on_form_closed)

    def action_edit_current(self) -> None:
        items = self.session.state.catalog.list()
        if not items:
            return
        self.deletion.reset()
        self.app.push_screen(MenuFormModal(self.session, items[self.cursor_index]), self._on_form_closed)

    def _on_form_closed(self, item: MenuItem | None) -> None:
        if item is not None:
            ids = [existing.item_id for existing in self.session.state.catalog.list()]
            if item.item_id in ids:
                self.cursor_index = ids.index(item.item_id)
            self.error = f"Tersimpan: {item.name}"
        self._refresh_content()

    def _edit_current(self, **changes: object) -> None:
        items = self.session.state.catalog.list()
        if not items:
            return
        self.deletion.reset()
        item = items[self.cursor_index]
        draft = MenuDraft.from_item(item)
        for name, value in changes.items():
            setattr(draft, name, value)
        try:
            self.session.update_menu(item.item_id, draft)
            self.error = ""
        except PosError as exc:
            self.error = str(exc)
        self._refresh_content()

    def action_restock(self, delta: int) -> None:
        items = self.session.state.catalog.list()
        if items:
            self._edit_current(stock=max(0, items[self.cursor_index].stock + delta))

    def action_toggle_status(self) -> None:
        items = self.session.state.catalog.list()
        if not items:
            return
        current = items[self.cursor_index].status
        new_status = MenuStatus.INACTIVE if current is MenuStatus.ACTIVE else MenuStatus.ACTIVE
        self._edit_current(status=new_status)

    def action_delete_current(self) -> None:
        items = self.session.state.catalog.list()
        if not items:
            return
        item = items[self.cursor_index]
        if not self.deletion.request(item.item_id):
            self.error = f"Hapus {item.name}? Tekan x lagi untuk konfirmasi."
            self._refresh_content()
            return
        try:
            self.session.delete_menu(item.item_id)
            self.error = ""
        except PosError as exc:
            self.error = str(exc)
        self.cursor_index = min(self.cursor_index, max(0, len(items) - 2))
        self._refresh_content()

    def _refresh_content(self) -> None:
        catalog = self.session.state.catalog
        content = Text(style="white")
        for idx, item in enumerate(catalog.list()):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            content.append(pointer)
            content.append_text(format_status_badge(item.status))
            content.append(f" {catalog.category_name(item.category_id)}: ", style="dim")
            content.append_text(format_menu_label(item))
        if not catalog.list():
            content.append("(menu kosong)")
        self.query_one("#menu-body", Static).update(content)
        self.query_one("#menu-error", Static).update(self.error)
