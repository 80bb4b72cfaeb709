"""Process-wide POS state, owned by the session and passed to components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from resto_pos.catalog import CatalogStore
from resto_pos.errors import NotFoundError
from resto_pos.models import Transaction, User


class TransactionHistory:
    """Append-only list of committed transactions, most recent first."""

    def __init__(self, transactions: Iterable[Transaction] = ()) -> None:
        # Stored newest first, as loaded from storage.
        self._transactions: list[Transaction] = list(transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def __contains__(self, transaction_id: object) -> bool:
        return any(existing.transaction_id == transaction_id for existing in self._transactions)

    def record(self, transaction: Transaction) -> None:
        if transaction.transaction_id in self:
            raise ValueError(f"Transaction {transaction.transaction_id!r} already recorded")
        self._transactions.insert(0, transaction)

    def get(self, transaction_id: str) -> Transaction:
        for transaction in self._transactions:
            if transaction.transaction_id == transaction_id:
                return transaction
        raise NotFoundError(f"Transaction {transaction_id!r} not found")

    def recent(self, limit: int = 5) -> list[Transaction]:
        return self._transactions[:limit]

    def chronological(self) -> list[Transaction]:
        """Return transactions in the order they were recorded."""
        return list(reversed(self._transactions))


@dataclass
class PosState:
    catalog: CatalogStore
    history: TransactionHistory = field(default_factory=TransactionHistory)
    current_user: User | None = None
