"""Tests for cart mutation and stock ceilings."""

from dataclasses import replace

import pytest

from resto_pos.cart import Cart, add_to_cart, set_quantity, subtotal
from resto_pos.errors import NotFoundError, OutOfStockError, StockExceededError
from resto_pos.models import MenuItem, PaymentMethod


def test_add_new_item_creates_line_with_quantity_one(tea):
    cart = Cart()
    line = add_to_cart(cart, tea)

    assert line.quantity == 1
    assert line.price == 5000
    assert [l.item_id for l in cart.lines] == ["tea"]


def test_add_existing_item_increments(tea):
    cart = Cart()
    add_to_cart(cart, tea)
    add_to_cart(cart, tea)

    assert len(cart) == 1
    assert cart.lines[0].quantity == 2


def test_add_out_of_stock_item_is_rejected(catalog):
    cart = Cart()
    with pytest.raises(OutOfStockError):
        add_to_cart(cart, catalog.get("cake"))
    assert cart.is_empty


def test_add_beyond_stock_is_rejected():
    single = MenuItem("rice", "Nasi Goreng", "1", 25000, 1)
    cart = Cart()
    add_to_cart(cart, single)

    with pytest.raises(StockExceededError):
        add_to_cart(cart, single)
    assert cart.lines[0].quantity == 1


def test_add_uses_current_stock_for_existing_line(tea):
    cart = Cart()
    add_to_cart(cart, tea)
    add_to_cart(cart, tea)

    with pytest.raises(StockExceededError):
        add_to_cart(cart, replace(tea, stock=2))
    assert cart.lines[0].quantity == 2


def test_line_is_a_snapshot(tea):
    cart = Cart()
    add_to_cart(cart, tea)
    renamed = replace(tea, name="Green Tea", price=9000)

    assert cart.lines[0].name == "Tea"
    assert cart.lines[0].price == 5000
    assert renamed.name == "Green Tea"


def test_set_quantity_changes_quantity(tea):
    cart = Cart()
    add_to_cart(cart, tea)

    line = set_quantity(cart, "tea", 4)
    assert line is not None
    assert line.quantity == 5


def test_set_quantity_rejects_above_stock(coffee):
    cart = Cart()
    add_to_cart(cart, coffee)

    with pytest.raises(StockExceededError):
        set_quantity(cart, "coffee", 5)
    assert cart.lines[0].quantity == 1


def test_set_quantity_uses_given_catalog_item(tea):
    cart = Cart()
    add_to_cart(cart, tea)

    with pytest.raises(StockExceededError):
        set_quantity(cart, "tea", 1, replace(tea, stock=1))
    assert cart.lines[0].quantity == 1


def test_set_quantity_to_zero_removes_line(tea, coffee):
    cart = Cart()
    add_to_cart(cart, tea)
    add_to_cart(cart, coffee)

    assert set_quantity(cart, "tea", -1) is None
    assert [l.item_id for l in cart.lines] == ["coffee"]


def test_set_quantity_clamps_at_zero(tea):
    cart = Cart()
    add_to_cart(cart, tea)

    assert set_quantity(cart, "tea", -10) is None
    assert cart.is_empty


def test_set_quantity_missing_line(tea):
    with pytest.raises(NotFoundError):
        set_quantity(Cart(), "tea", 1)


def test_subtotal_is_pure(tea, coffee):
    cart = Cart()
    add_to_cart(cart, tea)
    add_to_cart(cart, tea)
    add_to_cart(cart, coffee)

    assert subtotal(cart) == 2 * 5000 + 18000
    assert subtotal(cart) == subtotal(cart)
    assert [l.quantity for l in cart.lines] == [2, 1]


def test_quantities_stay_within_stock(coffee):
    cart = Cart()
    for _ in range(coffee.stock):
        add_to_cart(cart, coffee)
    for _ in range(3):
        with pytest.raises(StockExceededError):
            add_to_cart(cart, coffee)

    for line in cart.lines:
        assert 1 <= line.quantity <= line.stock


def test_discount_and_payment_method(tea):
    cart = Cart()
    add_to_cart(cart, tea)
    cart.set_discount(-300)
    assert cart.discount == 0

    cart.set_discount(1000)
    assert cart.total == 4000
    assert cart.toggle_payment_method() is PaymentMethod.QR
    assert cart.toggle_payment_method() is PaymentMethod.CASH


def test_clear_resets_discount(tea):
    cart = Cart()
    add_to_cart(cart, tea)
    cart.set_discount(1000)
    cart.clear()

    assert cart.is_empty
    assert cart.discount == 0
