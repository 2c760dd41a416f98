"""
Tests specific to the SQLAlchemy backend: persistence across sessions,
rollback on failure, propagation of driver errors and concurrent writers.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from decimal import Decimal
import logging

import pytest
from sqlalchemy import event, text

from fintrack.database import Base, build_engine, build_session_factory, create_tables
from fintrack.models import Account as AccountRow
from fintrack.models import Transaction as TransactionRow
from fintrack.schemas import AccountCreate, GlossaryTermCreate, TransactionCreate, TransactionUpdate
from fintrack.storage import DatabaseStorage, StorageBackendError, StorageError


def _transaction(account_id: str, amount: str, transaction_type: str = "expense") -> TransactionCreate:
    return TransactionCreate(
        account_id=account_id,
        amount=Decimal(amount),
        transaction_type=transaction_type,
        category_id="cat",
        description="Coffee",
        date=datetime(2024, 5, 1, 8, 30),
    )


def test_rows_are_visible_to_a_fresh_store(engine, database_storage) -> None:
    account = database_storage.create_account(
        AccountCreate(name="Checking", account_type="checking", balance=Decimal("100.00"))
    )
    database_storage.create_transaction(_transaction(account.id, "2.35"))

    reopened = DatabaseStorage(build_session_factory(engine))

    assert reopened.get_account(account.id).balance == Decimal("97.65")
    assert len(reopened.list_transactions()) == 1


def test_balance_column_is_written_with_the_transaction(engine, database_storage) -> None:
    account = database_storage.create_account(
        AccountCreate(name="Checking", account_type="checking", balance=Decimal("10.00"))
    )
    created = database_storage.create_transaction(_transaction(account.id, "3.00", "income"))

    session = build_session_factory(engine)()
    try:
        assert session.get(AccountRow, account.id).balance == Decimal("13.00")
        row = session.get(TransactionRow, created.id)
        assert row.amount == Decimal("3.00")
        assert row.transaction_type == "income"
    finally:
        session.close()


def test_seeded_rows_from_outside_are_used(engine, database_storage) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                "INSERT INTO accounts (id, name, account_type, balance, is_default) "
                "VALUES ('a1', 'Provisioned', 'checking', 100.00, 1)"
            )
        )

    database_storage.create_transaction(_transaction("a1", "25.00", "income"))

    assert database_storage.get_account("a1").balance == Decimal("125.00")


def test_backend_failure_is_raised_as_storage_error(engine, database_storage) -> None:
    Base.metadata.drop_all(bind=engine)

    with pytest.raises(StorageBackendError) as excinfo:
        database_storage.list_accounts()

    assert isinstance(excinfo.value, StorageError)
    assert excinfo.value.__cause__ is not None


def test_failure_mid_protocol_rolls_back_transaction_row(engine, database_storage) -> None:
    account = database_storage.create_account(
        AccountCreate(name="Checking", account_type="checking", balance=Decimal("50.00"))
    )
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE glossary_terms"))
        conn.execute(text("ALTER TABLE accounts RENAME TO accounts_moved"))

    with pytest.raises(StorageBackendError):
        database_storage.create_transaction(_transaction(account.id, "5.00"))

    with engine.begin() as conn:
        conn.execute(text("ALTER TABLE accounts_moved RENAME TO accounts"))

    assert database_storage.list_transactions() == []
    assert database_storage.get_account(account.id).balance == Decimal("50.00")

    with pytest.raises(StorageBackendError):
        database_storage.create_glossary_term(GlossaryTermCreate(term="APR", definition="Rate"))


@pytest.fixture
def file_storage(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    create_tables(engine)
    yield DatabaseStorage(build_session_factory(engine))
    engine.dispose()


def test_concurrent_creates_and_deletes_keep_balance_exact(file_storage) -> None:
    account = file_storage.create_account(
        AccountCreate(name="Checking", account_type="checking", balance=Decimal("300.00"))
    )

    with ThreadPoolExecutor(max_workers=16) as pool:
        created = list(
            pool.map(lambda _: file_storage.create_transaction(_transaction(account.id, "1.00")), range(300))
        )

    assert file_storage.get_account(account.id).balance == Decimal("0.00")

    with ThreadPoolExecutor(max_workers=16) as pool:
        deleted = list(pool.map(lambda t: file_storage.delete_transaction(t.id), created))

    assert all(deleted)
    assert file_storage.list_transactions() == []
    assert file_storage.get_account(account.id).balance == Decimal("300.00")


def test_concurrent_updates_on_one_transaction_do_not_drift(file_storage) -> None:
    account = file_storage.create_account(
        AccountCreate(name="Checking", account_type="checking", balance=Decimal("100.00"))
    )
    created = file_storage.create_transaction(_transaction(account.id, "10.00"))
    amounts = [f"{n}.00" for n in range(1, 41)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(
            pool.map(
                lambda amount: file_storage.update_transaction(created.id, TransactionUpdate(amount=Decimal(amount))),
                amounts,
            )
        )

    final = file_storage.get_transaction(created.id)
    assert file_storage.get_account(account.id).balance == Decimal("100.00") - final.amount


def test_account_rows_are_locked_in_sorted_order(engine, database_storage) -> None:
    first = database_storage.create_account(AccountCreate(name="One", account_type="checking"))
    second = database_storage.create_account(AccountCreate(name="Two", account_type="savings"))
    low, high = sorted([first.id, second.id])
    created = database_storage.create_transaction(_transaction(high, "5.00"))

    locked = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("SELECT") and "FROM accounts" in statement:
            locked.append(parameters[0])

    event.listen(engine, "before_cursor_execute", capture)
    try:
        database_storage.update_transaction(created.id, TransactionUpdate(account_id=low))
        database_storage.update_transaction(created.id, TransactionUpdate(account_id=high))
    finally:
        event.remove(engine, "before_cursor_execute", capture)

    assert locked == [low, high, low, high]
    assert database_storage.get_account(low).balance == Decimal("0.00")
    assert database_storage.get_account(high).balance == Decimal("-5.00")


def test_in_memory_url_is_flagged_as_test_only(tmp_path, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="fintrack.database"):
        build_engine("sqlite://").dispose()
    assert "use it for tests only" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="fintrack.database"):
        build_engine(f"sqlite:///{tmp_path / 'ledger.db'}").dispose()
    assert "use it for tests only" not in caplog.text
