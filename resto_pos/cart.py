"""Order-in-progress for one cashier session."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from resto_pos.errors import NotFoundError, OutOfStockError, StockExceededError
from resto_pos.models import CartLine, MenuItem, PaymentMethod


@dataclass
class Cart:
    """Cart lines plus the discount and payment method picked for them."""

    lines: list[CartLine] = field(default_factory=list)
    discount: int = 0
    payment_method: PaymentMethod = PaymentMethod.CASH

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> int:
        return subtotal(self)

    @property
    def total(self) -> int:
        return self.subtotal - self.discount

    def find(self, item_id: str) -> int | None:
        for idx, line in enumerate(self.lines):
            if line.item_id == item_id:
                return idx
        return None

    def set_discount(self, amount: int) -> None:
        """Store the typed discount; negative input becomes 0."""
        self.discount = max(0, amount)

    def toggle_payment_method(self) -> PaymentMethod:
        if self.payment_method is PaymentMethod.CASH:
            self.payment_method = PaymentMethod.QR
        else:
            self.payment_method = PaymentMethod.CASH
        return self.payment_method

    def clear(self) -> None:
        self.lines.clear()
        self.discount = 0


def add_to_cart(cart: Cart, item: MenuItem) -> CartLine:
    """Add one unit of ``item`` and return the resulting line."""
    if item.stock <= 0:
        raise OutOfStockError(f"{item.name} is out of stock")

    idx = cart.find(item.item_id)
    if idx is None:
        line = CartLine.from_item(item)
        cart.lines.append(line)
        return line

    current = cart.lines[idx]
    new_quantity = current.quantity + 1
    if new_quantity > item.stock:
        raise StockExceededError(f"Only {item.stock} {item.name} in stock")
    line = replace(current, stock=item.stock, quantity=new_quantity)
    cart.lines[idx] = line
    return line


def set_quantity(cart: Cart, item_id: str, delta: int, item: MenuItem | None = None) -> CartLine | None:
    """Change a line's quantity by ``delta``.

    The ceiling is the current catalog stock when ``item`` is given, otherwise
    the stock recorded on the line. Returns the new line, or ``None`` when the
    line was removed.
    """
    idx = cart.find(item_id)
    if idx is None:
        raise NotFoundError(f"Item {item_id!r} is not in the cart")

    current = cart.lines[idx]
    ceiling = item.stock if item is not None else current.stock
    new_quantity = max(0, current.quantity + delta)
    if new_quantity > ceiling:
        raise StockExceededError(f"Only {ceiling} {current.name} in stock")
    if new_quantity == 0:
        del cart.lines[idx]
        return None

    line = replace(current, stock=ceiling, quantity=new_quantity)
    cart.lines[idx] = line
    return line


def subtotal(cart: Cart) -> int:
    return sum(line.price * line.quantity for line in cart.lines)
