"""Turn a cart into a committed transaction."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

from resto_pos.cart import Cart, subtotal
from resto_pos.catalog import CatalogStore
from resto_pos.config import ORDER_NUMBER_PREFIX, POS_TIMEZONE
from resto_pos.errors import EmptyCartError, InvalidDiscountError
from resto_pos.models import PaymentMethod, Transaction, User
from resto_pos.state import TransactionHistory

logger = logging.getLogger(__name__)


def _pos_now() -> datetime:
    return datetime.now(ZoneInfo(POS_TIMEZONE))


def make_order_number(moment: datetime) -> str:
    """Display number derived from the epoch milliseconds; not a key."""
    millis = int(moment.timestamp() * 1000)
    return f"{ORDER_NUMBER_PREFIX}{str(millis)[-6:]}"


class CheckoutProcessor:
    """Commits carts against one catalog and one transaction history."""

    def __init__(self, catalog: CatalogStore, history: TransactionHistory) -> None:
        self.catalog = catalog
        self.history = history

    def checkout(
        self,
        cart: Cart,
        discount: int,
        payment_method: PaymentMethod,
        cashier: User,
        now: datetime | None = None,
    ) -> Transaction:
        """Record the cart as a transaction, decrement stock and clear the cart.

        Nothing is changed when any check fails: the cart must be non-empty,
        the discount within ``0..subtotal``, the payment method known and every
        line still covered by current stock.
        """
        if cart.is_empty:
            raise EmptyCartError("Cart is empty")

        amount = subtotal(cart)
        if discount < 0:
            raise InvalidDiscountError(f"Discount must not be negative, got {discount}")
        if discount > amount:
            raise InvalidDiscountError(f"Discount {discount} exceeds subtotal {amount}")

        method = PaymentMethod(payment_method)

        created_at = now or _pos_now()
        transaction = Transaction(
            transaction_id=uuid4().hex,
            order_number=make_order_number(created_at),
            created_at=created_at,
            cashier_id=cashier.user_id,
            cashier_name=cashier.name,
            lines=tuple(cart.lines),
            subtotal=amount,
            discount=discount,
            total=amount - discount,
            payment_method=method,
        )
        if transaction.transaction_id in self.history:
            raise ValueError(f"Transaction {transaction.transaction_id!r} already recorded")

        quantities: Counter[str] = Counter()
        for line in cart.lines:
            quantities[line.item_id] += line.quantity
        self.catalog.decrement_many(quantities)
        self.history.record(transaction)
        cart.clear()
        logger.info(
            "checkout order=%s id=%s lines=%d total=%d method=%s cashier=%s",
            transaction.order_number,
            transaction.transaction_id,
            len(transaction.lines),
            transaction.total,
            transaction.payment_method.value,
            transaction.cashier_id,
        )
        return transaction
