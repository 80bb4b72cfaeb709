"""Tests for display formatting and receipt layout."""

from resto_pos.models import PaymentMethod
from resto_pos.printer import SEPARATOR, receipt_lines
from resto_pos.rendering import format_cart_line, format_currency, format_receipt, format_totals


def test_format_currency():
    assert format_currency(0) == "Rp 0"
    assert format_currency(25000) == "Rp 25.000"
    assert format_currency(1250000) == "Rp 1.250.000"
    assert format_currency(-5000) == "-Rp 5.000"


def test_format_cart_line(make_transaction, at):
    line = make_transaction(at(2026, 10, 19), lines=[("Tea", 5000, 3)]).lines[0]
    assert format_cart_line(line).plain == "3 x Tea  Rp 15.000"


def test_format_totals():
    plain = format_totals(50000, 5000, PaymentMethod.QR).plain

    assert "Subtotal  Rp 50.000" in plain
    assert "Diskon    -Rp 5.000" in plain
    assert "Total     Rp 45.000" in plain
    assert "QRIS" in plain


def test_format_receipt(make_transaction, at):
    transaction = make_transaction(at(2026, 10, 19, 14, 5), lines=[("Tea", 5000, 2)], discount=1000)

    plain = format_receipt(transaction).plain

    assert "Nomor: TRX-" in plain
    assert "Tgl:   19/10/2026 14.05" in plain
    assert "Tea x2  Rp 10.000" in plain
    assert "TOTAL:    Rp 9.000" in plain


def test_receipt_lines(make_transaction, at):
    transaction = make_transaction(
        at(2026, 10, 19, 14, 5), lines=[("Tea", 5000, 2), ("Coffee", 18000, 1)], discount=3000
    )

    rows = receipt_lines(transaction)

    assert rows[0] == ("RESTO PRO", "")
    assert rows[1] == SEPARATOR
    assert ("Kasir", "Siti (Kasir)") in rows
    assert ("Tea x2", "Rp 10.000") in rows
    assert ("Coffee x1", "Rp 18.000") in rows
    assert rows[-4:] == [
        ("Subtotal", "Rp 28.000"),
        ("Diskon", "-Rp 3.000"),
        ("TOTAL", "Rp 25.000"),
        ("Bayar", "Tunai"),
    ]


def test_receipt_lines_skip_zero_discount(make_transaction, at):
    rows = receipt_lines(make_transaction(at(2026, 10, 19), total=10000))
    assert all(left != "Diskon" for left, _ in rows)
