"""Tests for committing carts into transactions."""

from dataclasses import replace
from uuid import UUID

import pytest

from resto_pos.cart import Cart, add_to_cart, set_quantity
from resto_pos.checkout import CheckoutProcessor, make_order_number
from resto_pos.errors import EmptyCartError, InsufficientStockError, InvalidDiscountError
from resto_pos.models import MenuItem, PaymentMethod


@pytest.fixture
def processor(catalog, history):
    return CheckoutProcessor(catalog, history)


def test_empty_cart_is_rejected(processor, catalog, history, cashier):
    before = [item.stock for item in catalog.list()]

    with pytest.raises(EmptyCartError):
        processor.checkout(Cart(), 0, PaymentMethod.CASH, cashier)

    assert len(history) == 0
    assert [item.stock for item in catalog.list()] == before


def test_totals_with_discount(processor, catalog, cashier, at):
    catalog.add_item(MenuItem("ng", "Nasi Goreng Spesial", "1", 25000, 50))
    cart = Cart()
    add_to_cart(cart, catalog.get("ng"))
    add_to_cart(cart, catalog.get("ng"))

    transaction = processor.checkout(cart, 5000, PaymentMethod.QR, cashier, now=at(2026, 10, 19))

    assert transaction.subtotal == 50000
    assert transaction.discount == 5000
    assert transaction.total == 45000
    assert transaction.total == transaction.subtotal - transaction.discount
    assert transaction.subtotal == sum(line.price * line.quantity for line in transaction.lines)
    assert transaction.payment_method is PaymentMethod.QR


def test_checkout_decrements_stock_exactly(processor, catalog, cashier):
    cart = Cart()
    add_to_cart(cart, catalog.get("tea"))
    set_quantity(cart, "tea", 2)

    processor.checkout(cart, 0, PaymentMethod.CASH, cashier)

    assert catalog.get("tea").stock == 7


def test_checkout_records_and_clears(processor, catalog, history, cashier, at):
    cart = Cart()
    add_to_cart(cart, catalog.get("coffee"))
    cart.set_discount(2000)

    transaction = processor.checkout(cart, cart.discount, cart.payment_method, cashier, now=at(2026, 10, 19, 9, 30))

    assert history.recent(1) == [transaction]
    assert history.get(transaction.transaction_id) is transaction
    assert transaction.cashier_id == "u2"
    assert transaction.cashier_name == "Siti (Kasir)"
    assert transaction.created_at == at(2026, 10, 19, 9, 30)
    assert transaction.order_number.startswith("TRX-")
    assert cart.is_empty
    assert cart.discount == 0


def test_history_is_most_recent_first(processor, catalog, history, cashier, at):
    first_cart = Cart()
    add_to_cart(first_cart, catalog.get("tea"))
    first = processor.checkout(first_cart, 0, PaymentMethod.CASH, cashier, now=at(2026, 10, 19, 9))

    second_cart = Cart()
    add_to_cart(second_cart, catalog.get("coffee"))
    second = processor.checkout(second_cart, 0, PaymentMethod.CASH, cashier, now=at(2026, 10, 19, 10))

    assert list(history) == [second, first]
    assert history.chronological() == [first, second]
    assert first.transaction_id != second.transaction_id


def test_transaction_lines_survive_menu_edits(processor, catalog, cashier):
    cart = Cart()
    add_to_cart(cart, catalog.get("tea"))
    transaction = processor.checkout(cart, 0, PaymentMethod.CASH, cashier)

    catalog.update_item(replace(catalog.get("tea"), name="Iced Tea", price=7000))
    catalog.delete_item("tea")

    assert transaction.lines[0].name == "Tea"
    assert transaction.lines[0].price == 5000


def test_stock_is_revalidated_at_checkout(processor, catalog, history, cashier):
    cart = Cart()
    add_to_cart(cart, catalog.get("tea"))
    add_to_cart(cart, catalog.get("coffee"))
    set_quantity(cart, "coffee", 2)
    catalog.update_item(replace(catalog.get("coffee"), stock=1))

    with pytest.raises(InsufficientStockError):
        processor.checkout(cart, 0, PaymentMethod.CASH, cashier)

    assert catalog.get("tea").stock == 10
    assert catalog.get("coffee").stock == 1
    assert len(history) == 0
    assert len(cart) == 2


@pytest.mark.parametrize("discount", [-1, 5001])
def test_invalid_discount_changes_nothing(processor, catalog, history, cashier, discount):
    cart = Cart()
    add_to_cart(cart, catalog.get("tea"))

    with pytest.raises(InvalidDiscountError):
        processor.checkout(cart, discount, PaymentMethod.CASH, cashier)

    assert catalog.get("tea").stock == 10
    assert len(history) == 0
    assert len(cart) == 1


def test_unknown_payment_method_changes_nothing(processor, catalog, history, cashier):
    cart = Cart()
    add_to_cart(cart, catalog.get("tea"))

    with pytest.raises(ValueError):
        processor.checkout(cart, 0, "cash", cashier)

    assert catalog.get("tea").stock == 10
    assert len(history) == 0
    assert len(cart) == 1


def test_payment_method_value_is_accepted(processor, catalog, cashier):
    cart = Cart()
    add_to_cart(cart, catalog.get("tea"))

    assert processor.checkout(cart, 0, "QRIS", cashier).payment_method is PaymentMethod.QR


def test_duplicate_transaction_id_changes_nothing(processor, catalog, history, cashier, monkeypatch):
    monkeypatch.setattr("resto_pos.checkout.uuid4", lambda: UUID(int=1))
    first = Cart()
    add_to_cart(first, catalog.get("tea"))
    processor.checkout(first, 0, PaymentMethod.CASH, cashier)

    second = Cart()
    add_to_cart(second, catalog.get("coffee"))
    with pytest.raises(ValueError):
        processor.checkout(second, 0, PaymentMethod.CASH, cashier)

    assert catalog.get("coffee").stock == 5
    assert len(history) == 1
    assert len(second) == 1


def test_discount_equal_to_subtotal_gives_zero_total(processor, catalog, cashier):
    cart = Cart()
    add_to_cart(cart, catalog.get("tea"))

    assert processor.checkout(cart, 5000, PaymentMethod.CASH, cashier).total == 0


def test_order_number_uses_last_six_millisecond_digits(at):
    moment = at(2026, 10, 19, 8, 0)
    millis = str(int(moment.timestamp() * 1000))

    assert make_order_number(moment) == f"TRX-{millis[-6:]}"
