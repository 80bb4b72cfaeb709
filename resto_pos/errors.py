"""Recoverable point-of-sale errors surfaced to the UI."""

from __future__ import annotations


class PosError(Exception):
    """Base class for every error the core signals back to its caller."""


class NotFoundError(PosError):
    """A referenced menu item, cart line or transaction does not exist."""


class DuplicateIdError(PosError):
    """A catalog insert collided with an existing item id."""


class OutOfStockError(PosError):
    """The item has no stock left to sell."""


class StockExceededError(PosError):
    """A cart change would push a line above the available stock."""


class InsufficientStockError(PosError):
    """A stock decrement would leave a negative stock."""


class EmptyCartError(PosError):
    """Checkout was attempted with nothing in the cart."""


class InvalidDiscountError(PosError):
    """Discount is negative or larger than the subtotal."""


class UnknownUserError(PosError):
    """No user matches the given username."""


class DraftValidationError(PosError):
    """A menu draft could not be turned into a complete menu item."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = dict(field_errors)
        details = ", ".join(f"{name}: {reason}" for name, reason in self.field_errors.items())
        super().__init__(f"Invalid menu item ({details})")
