"""Tests for SQLite-backed record storage."""

import pytest

from resto_pos.constant import INITIAL_MENUS, USERS
from resto_pos.models import MenuItem, MenuStatus
from resto_pos.persistence import PosStorage, transaction_from_document, transaction_to_document


@pytest.fixture
def storage(tmp_path):
    store = PosStorage(tmp_path / "nested" / "pos.db")
    store.bootstrap_schema()
    return store


def test_defaults_when_nothing_stored(storage):
    assert storage.load_user() is None
    assert storage.load_menus() == list(INITIAL_MENUS)
    assert storage.load_transactions() == []


def test_bootstrap_is_idempotent(storage):
    storage.bootstrap_schema()
    assert storage.db_path.is_file()


def test_user_round_trip_and_clear(storage):
    storage.save_user(USERS[1])
    assert storage.load_user() == USERS[1]

    storage.clear_user()
    assert storage.load_user() is None


def test_menus_overwrite_previous_document(storage):
    storage.save_menus([MenuItem("a", "A", "1", 1000, 3, MenuStatus.INACTIVE)])
    storage.save_menus([MenuItem("b", "B", "2", 2000, 0)])

    assert storage.load_menus() == [MenuItem("b", "B", "2", 2000, 0)]


def test_empty_menu_list_is_not_replaced_by_seed(storage):
    storage.save_menus([])
    assert storage.load_menus() == []


def test_transactions_keep_order_and_snapshots(storage, make_transaction, at):
    first = make_transaction(at(2026, 10, 19, 9), lines=[("Tea", 5000, 2)], discount=1000)
    second = make_transaction(at(2026, 10, 19, 10), lines=[("Coffee", 18000, 1)])

    storage.save_transactions([second, first])

    assert storage.load_transactions() == [second, first]


def test_transaction_document_field_names(make_transaction, at):
    transaction = make_transaction(at(2026, 10, 19, 9), lines=[("Tea", 5000, 2)])

    doc = transaction_to_document(transaction)

    assert doc["orderNumber"] == transaction.order_number
    assert doc["kasirId"] == "u2"
    assert doc["paymentMethod"] == "Tunai"
    assert doc["timestamp"] == "2026-10-19T09:00:00+07:00"
    assert doc["items"][0]["quantity"] == 2
    assert transaction_from_document(doc) == transaction


def test_storage_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("RESTO_POS_DB_PATH", str(tmp_path / "env.db"))
    assert PosStorage().db_path == tmp_path / "env.db"
