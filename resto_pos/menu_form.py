"""Add/edit form state for menu items, independent of the screen that shows it."""

from __future__ import annotations

import logging

from resto_pos.errors import DraftValidationError
from resto_pos.models import MenuDraft, MenuItem, MenuStatus
from resto_pos.session import PosSession

logger = logging.getLogger(__name__)

FIELDS = ("name", "category_id", "price", "stock", "status", "image")
FIELD_LABELS = {
    "name": "Nama",
    "category_id": "Kategori",
    "price": "Harga",
    "stock": "Stok",
    "status": "Status",
    "image": "Gambar",
}
CHOICE_FIELDS = frozenset({"category_id", "status"})
_MAX_FIELD_LENGTH = 120


class MenuForm:
    """Typed field values for one menu item plus the errors of the last save.

    Text fields take typed characters; category and status cycle through
    their fixed choices.
    """

    def __init__(self, session: PosSession, item: MenuItem | None = None) -> None:
        self.session = session
        self.item_id = item.item_id if item is not None else None
        draft = MenuDraft.from_item(item) if item is not None else MenuDraft()
        categories = session.state.catalog.categories
        if not draft.category_id and categories:
            draft.category_id = categories[0].category_id
        self.values: dict[str, str] = {
            "name": draft.name,
            "category_id": draft.category_id,
            "price": "" if draft.price is None else str(draft.price),
            "stock": "" if draft.stock is None else str(draft.stock),
            "status": MenuStatus(draft.status).value,
            "image": draft.image or "",
        }
        self.cursor = 0
        self.errors: dict[str, str] = {}

    @property
    def is_new(self) -> bool:
        return self.item_id is None

    @property
    def field(self) -> str:
        return FIELDS[self.cursor]

    def move(self, delta: int) -> None:
        self.cursor = (self.cursor + delta) % len(FIELDS)

    def type_char(self, char: str) -> None:
        if self.field in CHOICE_FIELDS:
            return
        if len(self.values[self.field]) < _MAX_FIELD_LENGTH:
            self.values[self.field] += char
        self.errors.pop(self.field, None)

    def backspace(self) -> None:
        if self.field in CHOICE_FIELDS:
            return
        self.values[self.field] = self.values[self.field][:-1]
        self.errors.pop(self.field, None)

    def cycle(self, delta: int) -> None:
        if self.field == "category_id":
            choices = [category.category_id for category in self.session.state.catalog.categories]
        elif self.field == "status":
            choices = [status.value for status in MenuStatus]
        else:
            return
        if not choices:
            return
        current = self.values[self.field]
        index = choices.index(current) if current in choices else -1
        self.values[self.field] = choices[(index + delta) % len(choices)]
        self.errors.pop(self.field, None)

    def display(self, field: str) -> str:
        if field == "category_id":
            return self.session.state.catalog.category_name(self.values[field])
        return self.values[field]

    def draft(self) -> MenuDraft:
        return MenuDraft(
            name=self.values["name"],
            category_id=self.values["category_id"],
            price=self.values["price"],
            stock=self.values["stock"],
            status=self.values["status"],
            image=self.values["image"] or None,
        )

    def submit(self) -> MenuItem | None:
        """Save through the session; on invalid input keep the field errors."""
        try:
            if self.item_id is None:
                item = self.session.add_menu(self.draft())
            else:
                item = self.session.update_menu(self.item_id, self.draft())
        except DraftValidationError as exc:
            self.errors = exc.field_errors
            logger.info("menu_form_invalid item=%s fields=%s", self.item_id, sorted(exc.field_errors))
            return None
        self.errors = {}
        self.item_id = item.item_id
        return item


class DeleteConfirmation:
    """Two-step delete: the same item must be requested twice in a row."""

    def __init__(self) -> None:
        self.pending: str | None = None

    def request(self, item_id: str) -> bool:
        if self.pending == item_id:
            self.pending = None
            return True
        self.pending = item_id
        return False

    def reset(self) -> None:
        self.pending = None
