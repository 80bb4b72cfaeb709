"""Menu catalog: items, categories and stock."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping

from resto_pos.errors import DuplicateIdError, InsufficientStockError, NotFoundError
from resto_pos.models import Category, MenuItem

logger = logging.getLogger(__name__)


class CatalogStore:
    """Ordered menu items keyed by id, plus the fixed category list."""

    def __init__(self, items: Iterable[MenuItem] = (), categories: Iterable[Category] = ()) -> None:
        self._items: dict[str, MenuItem] = {}
        self.categories: tuple[Category, ...] = tuple(categories)
        for item in items:
            self.add_item(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def list(self) -> list[MenuItem]:
        """Return all items in insertion order."""
        return list(self._items.values())

    def get(self, item_id: str) -> MenuItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFoundError(f"Menu item {item_id!r} not found") from None

    def add_item(self, item: MenuItem) -> None:
        if item.item_id in self._items:
            raise DuplicateIdError(f"Menu item {item.item_id!r} already exists")
        self._items[item.item_id] = item

    def update_item(self, item: MenuItem) -> None:
        """Replace the item with the same id, keeping its position."""
        if item.item_id not in self._items:
            raise NotFoundError(f"Menu item {item.item_id!r} not found")
        self._items[item.item_id] = item

    def delete_item(self, item_id: str) -> None:
        if item_id not in self._items:
            raise NotFoundError(f"Menu item {item_id!r} not found")
        del self._items[item_id]

    def decrement_stock(self, item_id: str, quantity: int) -> MenuItem:
        """Reduce one item's stock and return the updated item."""
        self.decrement_many({item_id: quantity})
        return self._items[item_id]

    def decrement_many(self, quantities: Mapping[str, int]) -> None:
        """Apply several stock decrements, all or none.

        Every decrement is checked against current stock before any item is
        touched.
        """
        updated: dict[str, MenuItem] = {}
        for item_id, quantity in quantities.items():
            if quantity < 0:
                raise ValueError(f"quantity must be non-negative, got {quantity}")
            item = updated.get(item_id) or self.get(item_id)
            remaining = item.stock - quantity
            if remaining < 0:
                raise InsufficientStockError(
                    f"Not enough stock for {item.name!r}: {item.stock} left, {quantity} requested"
                )
            updated[item_id] = replace(item, stock=remaining)

        self._items.update(updated)
        for item_id, item in updated.items():
            logger.info("stock_decrement item_id=%s stock=%d", item_id, item.stock)

    def sellable(self, query: str = "") -> list[MenuItem]:
        """Active items whose name contains the query, case-insensitively."""
        needle = query.strip().lower()
        return [item for item in self._items.values() if item.is_active and needle in item.name.lower()]

    def category_name(self, category_id: str) -> str:
        for category in self.categories:
            if category.category_id == category_id:
                return category.name
        return category_id
