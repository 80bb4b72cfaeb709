"""Display formatting: currency, badges, cart lines and receipts."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from resto_pos.config import CURRENCY_SYMBOL, STORE_NAME, THOUSANDS_SEPARATOR
from resto_pos.models import CartLine, MenuItem, MenuStatus, PaymentMethod, Transaction


def format_currency(amount: int) -> str:
    """Format an amount in Rupiah, e.g. ``Rp 25.000``."""
    digits = f"{abs(amount):,}".replace(",", THOUSANDS_SEPARATOR)
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL} {digits}"


def format_timestamp(moment: datetime) -> str:
    return moment.strftime("%d/%m/%Y %H.%M")


def status_style(status: MenuStatus) -> str:
    if status is MenuStatus.ACTIVE:
        return "bold #0b1f0f on #5fbf72"
    return "bold #ffffff on #7a7a7a"


def payment_style(method: PaymentMethod) -> str:
    if method is PaymentMethod.QR:
        return "bold #ffffff on #2f6db5"
    return "bold #ffffff on #b23a48"


def format_menu_label(item: MenuItem) -> Text:
    """Menu row: name, price and remaining stock."""
    text = Text()
    text.append(item.name)
    text.append(f"  {format_currency(item.price)}", style="bold")
    stock_style = "red" if item.stock <= 0 else "dim"
    text.append(f"  stok {item.stock}", style=stock_style)
    return text


def format_status_badge(status: MenuStatus) -> Text:
    return Text(f" {status.value} ", style=status_style(status))


def format_cart_line(line: CartLine) -> Text:
    text = Text()
    text.append(f"{line.quantity} x ", style="bold")
    text.append(line.name)
    text.append(f"  {format_currency(line.line_total)}", style="dim")
    return text


def format_totals(subtotal: int, discount: int, payment_method: PaymentMethod) -> Text:
    text = Text()
    text.append(f"Subtotal  {format_currency(subtotal)}\n")
    text.append(f"Diskon    -{format_currency(discount)}\n", style="#ffb3b3")
    text.append(f"Total     {format_currency(subtotal - discount)}\n", style="bold")
    text.append("Bayar     ")
    text.append(f" {payment_method.value} ", style=payment_style(payment_method))
    return text


def format_receipt(transaction: Transaction) -> Text:
    """On-screen receipt for a committed transaction."""
    text = Text()
    text.append(f"{STORE_NAME}\n", style="bold")
    text.append(f"Nomor: {transaction.order_number}\n")
    text.append(f"Tgl:   {format_timestamp(transaction.created_at)}\n")
    text.append(f"Kasir: {transaction.cashier_name}\n\n")
    for line in transaction.lines:
        text.append(f"{line.name} x{line.quantity}  {format_currency(line.line_total)}\n")
    text.append("\n")
    text.append(f"Subtotal: {format_currency(transaction.subtotal)}\n")
    text.append(f"Diskon:   -{format_currency(transaction.discount)}\n", style="#ffb3b3")
    text.append(f"TOTAL:    {format_currency(transaction.total)}\n", style="bold")
    text.append(f"Bayar:    {transaction.payment_method.value}")
    return text
