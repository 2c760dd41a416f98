"""
Tests specific to the in-memory backend: seeding, record immutability and
serialization of concurrent writers.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from fintrack.schemas import AccountCreate, TransactionCreate
from fintrack.storage import MemoryStorage


def test_seeds_defaults_on_construction() -> None:
    storage = MemoryStorage()

    accounts = storage.list_accounts()
    categories = storage.list_categories()

    assert len(accounts) == 4
    assert len(categories) == 9
    assert sum(1 for c in categories if c.category_type == "expense") == 6
    assert sum(1 for c in categories if c.category_type == "income") == 3
    assert all(c.is_default for c in categories)
    assert len(storage.list_glossary_terms()) == 10
    assert storage.list_transactions() == []

    balances = {a.name: a.balance for a in accounts}
    assert balances["Checking Account"] == Decimal("2450.32")
    assert balances["Credit Card"] == Decimal("-1200.50")
    assert [a.name for a in accounts if a.is_default] == ["Checking Account"]


def test_seeding_can_be_disabled() -> None:
    storage = MemoryStorage(seed_defaults=False)

    assert storage.list_accounts() == []
    assert storage.list_categories() == []
    assert storage.list_glossary_terms() == []


def test_instances_do_not_share_state() -> None:
    first = MemoryStorage(seed_defaults=False)
    second = MemoryStorage(seed_defaults=False)

    first.create_account(AccountCreate(name="Only here", account_type="checking"))

    assert len(first.list_accounts()) == 1
    assert second.list_accounts() == []


def test_returned_records_are_frozen(memory_storage) -> None:
    account = memory_storage.create_account(
        AccountCreate(name="Wallet", account_type="checking", balance=Decimal("5.00"))
    )

    with pytest.raises(ValidationError):
        account.balance = Decimal("1000.00")

    assert memory_storage.get_account(account.id).balance == Decimal("5.00")


def test_concurrent_postings_do_not_lose_updates(memory_storage) -> None:
    account = memory_storage.create_account(
        AccountCreate(name="Shared", account_type="checking", balance=Decimal("0.00"))
    )

    def post(i: int) -> None:
        memory_storage.create_transaction(
            TransactionCreate(
                account_id=account.id,
                amount=Decimal("0.01"),
                transaction_type="income",
                category_id="cat",
                description=f"tick {i}",
                date=datetime(2024, 1, 1),
            )
        )

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(post, range(400)))

    assert memory_storage.get_account(account.id).balance == Decimal("4.00")
    assert len(memory_storage.list_transactions()) == 400
