"""Domain models for resto-pos."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable

from resto_pos.errors import DraftValidationError


class MenuStatus(str, Enum):
    ACTIVE = "aktif"
    INACTIVE = "nonaktif"


class PaymentMethod(str, Enum):
    CASH = "Tunai"
    QR = "QRIS"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    CASHIER = "KASIR"


@dataclass(frozen=True)
class Category:
    """Fixed menu category."""

    category_id: str
    name: str


@dataclass(frozen=True)
class User:
    """An entry of the fixed user directory."""

    user_id: str
    username: str
    role: UserRole
    name: str

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


@dataclass(frozen=True)
class MenuItem:
    """A sellable menu item. Edits replace the whole record."""

    item_id: str
    name: str
    category_id: str
    price: int
    stock: int
    status: MenuStatus = MenuStatus.ACTIVE
    image: str | None = None

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"price must be non-negative, got {self.price}")
        if self.stock < 0:
            raise ValueError(f"stock must be non-negative, got {self.stock}")

    @property
    def is_active(self) -> bool:
        return self.status is MenuStatus.ACTIVE


@dataclass(frozen=True)
class CartLine:
    """Menu item fields copied into the cart, plus the ordered quantity.

    ``stock`` is the stock the line was validated against at its last change.
    """

    item_id: str
    name: str
    category_id: str
    price: int
    stock: int
    quantity: int

    @classmethod
    def from_item(cls, item: MenuItem, quantity: int = 1) -> CartLine:
        return cls(
            item_id=item.item_id,
            name=item.name,
            category_id=item.category_id,
            price=item.price,
            stock=item.stock,
            quantity=quantity,
        )

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


@dataclass(frozen=True)
class Transaction:
    """A committed sale. Never edited after checkout."""

    transaction_id: str
    order_number: str
    created_at: datetime
    cashier_id: str
    cashier_name: str
    lines: tuple[CartLine, ...]
    subtotal: int
    discount: int
    total: int
    payment_method: PaymentMethod

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


@dataclass(frozen=True)
class DashboardStats:
    revenue: int
    count: int
    active_menus: int
    top_menu: str


@dataclass(frozen=True)
class DailyRevenue:
    day: date
    revenue: int


@dataclass(frozen=True)
class ReportSummary:
    total_revenue: int
    total_discount: int
    total_transactions: int
    avg_order_value: int


def _parse_amount(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


@dataclass
class MenuDraft:
    """Editable form state for a menu item, possibly incomplete.

    Amounts may hold the raw text typed into a form. ``build`` is the only way
    to get a ``MenuItem`` out of a draft.
    """

    name: str = ""
    category_id: str = ""
    price: int | str | None = None
    stock: int | str | None = None
    status: MenuStatus | str = MenuStatus.ACTIVE
    image: str | None = None

    @classmethod
    def from_item(cls, item: MenuItem) -> MenuDraft:
        return cls(
            name=item.name,
            category_id=item.category_id,
            price=item.price,
            stock=item.stock,
            status=item.status,
            image=item.image,
        )

    def errors(self, categories: Iterable[Category] | None = None) -> dict[str, str]:
        """Return a field -> reason map; empty when the draft is complete."""
        problems: dict[str, str] = {}
        if not self.name.strip():
            problems["name"] = "required"

        if not self.category_id:
            problems["category_id"] = "required"
        elif categories is not None:
            known = {category.category_id for category in categories}
            if self.category_id not in known:
                problems["category_id"] = f"unknown category {self.category_id!r}"

        for name in ("price", "stock"):
            value = _parse_amount(getattr(self, name))
            if value is None:
                problems[name] = "must be a whole number"
            elif value < 0:
                problems[name] = "must not be negative"

        try:
            MenuStatus(self.status)
        except ValueError:
            problems["status"] = f"unknown status {self.status!r}"
        return problems

    def build(self, item_id: str, categories: Iterable[Category] | None = None) -> MenuItem:
        problems = self.errors(categories)
        if problems:
            raise DraftValidationError(problems)
        image = self.image.strip() if self.image else None
        return MenuItem(
            item_id=item_id,
            name=self.name.strip(),
            category_id=self.category_id,
            price=_parse_amount(self.price),  # type: ignore[arg-type]
            stock=_parse_amount(self.stock),  # type: ignore[arg-type]
            status=MenuStatus(self.status),
            image=image or None,
        )
