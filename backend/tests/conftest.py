"""
Shared fixtures: one store per backend plus an API client.

Contract tests take the `storage` fixture and run against both backends.
"""
from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from fintrack.config import Settings
from fintrack.database import build_engine, build_session_factory, create_tables
from fintrack.main import create_app
from fintrack.schemas import AccountCreate, TransactionCreate
from fintrack.storage import DatabaseStorage, MemoryStorage


@pytest.fixture
def memory_storage():
    return MemoryStorage(seed_defaults=False)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def database_storage(engine):
    return DatabaseStorage(build_session_factory(engine))


@pytest.fixture(params=["memory", "database"])
def storage(request):
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def make_account(storage):
    def _make(balance="0.00", name="Test Account", account_type="checking", is_default=False):
        return storage.create_account(
            AccountCreate(
                name=name,
                account_type=account_type,
                balance=Decimal(balance),
                is_default=is_default,
            )
        )
    return _make


@pytest.fixture
def make_transaction(storage):
    def _make(account_id, amount, transaction_type="expense", date=None, category_id="cat-1", description="Test"):
        return storage.create_transaction(
            TransactionCreate(
                account_id=account_id,
                amount=Decimal(amount),
                transaction_type=transaction_type,
                category_id=category_id,
                description=description,
                date=date or datetime(2024, 1, 15, 12, 0),
            )
        )
    return _make


@pytest.fixture
def api_storage():
    return MemoryStorage()


@pytest.fixture
def client(api_storage):
    settings = Settings(storage_backend="memory", seed_defaults=True, log_level="WARNING")
    app = create_app(settings=settings, storage=api_storage)
    with TestClient(app) as test_client:
        yield test_client
