"""
Relational storage backend using SQLAlchemy.

Every operation runs in its own session and database transaction, so a
transaction row change and the account balance writes it causes commit or
roll back together. Account rows touched by the balance protocol are read
with SELECT ... FOR UPDATE in sorted id order, so two operations touching the
same pair of accounts cannot deadlock. SQLite ignores FOR UPDATE; there
fintrack.database starts every transaction with BEGIN IMMEDIATE instead.

The schema is expected to exist already; see fintrack.database.create_tables.
"""
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, List, Optional
import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fintrack import models
from fintrack.schemas import (
    Account,
    AccountCreate,
    AccountUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    GlossaryTerm,
    GlossaryTermCreate,
    GlossaryTermUpdate,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    changes,
    utcnow,
)
from fintrack.storage.balance import (
    Posting,
    lock_order,
    plan_create,
    plan_delete,
    plan_update,
    post_adjustments,
)
from fintrack.storage.interface import (
    AccountInUseError,
    StorageBackendError,
    StorageInterface,
)

logger = logging.getLogger(__name__)


class DatabaseStorage(StorageInterface):
    """Durable store backed by the accounts/categories/transactions/glossary_terms tables."""

    def __init__(self, session_factory: sessionmaker, account_delete_policy: str = "reject"):
        self._session_factory = session_factory
        self.account_delete_policy = account_delete_policy

    @contextmanager
    def _unit_of_work(self) -> Iterator[Session]:
        """
        Session wrapped in a single database transaction.

        Commits on success, rolls back on any error. Driver errors surface as
        StorageBackendError.
        """
        session = self._session_factory()
        try:
            with session.begin():
                yield session
        except SQLAlchemyError as e:
            logger.error(f"[STORAGE] Database operation failed: {e}")
            raise StorageBackendError(str(e)) from e
        finally:
            session.close()

    def _post(self, session: Session, adjustments) -> None:
        adjustments = list(adjustments)

        # Lock every affected account row up front, in sorted id order
        locked = {}
        for account_id in lock_order(adjustments):
            locked[account_id] = session.execute(
                select(models.Account).where(models.Account.id == account_id).with_for_update()
            ).scalar_one_or_none()

        def load_balance(account_id: str) -> Optional[Decimal]:
            row = locked.get(account_id)
            return row.balance if row is not None else None

        def store_balance(account_id: str, balance: Decimal) -> None:
            row = locked[account_id]
            row.balance = balance
            session.flush()

        post_adjustments(adjustments, load_balance, store_balance)

    # Accounts
    def list_accounts(self) -> List[Account]:
        with self._unit_of_work() as db:
            rows = db.execute(select(models.Account)).scalars().all()
            return [Account.model_validate(row) for row in rows]

    def get_account(self, account_id: str) -> Optional[Account]:
        with self._unit_of_work() as db:
            row = db.get(models.Account, account_id)
            return Account.model_validate(row) if row else None

    def create_account(self, account: AccountCreate) -> Account:
        with self._unit_of_work() as db:
            row = models.Account(id=str(uuid.uuid4()), **account.model_dump())
            db.add(row)
            db.flush()
            return Account.model_validate(row)

    def update_account(self, account_id: str, updates: AccountUpdate) -> Optional[Account]:
        with self._unit_of_work() as db:
            row = db.get(models.Account, account_id)
            if not row:
                return None
            for field, value in changes(updates).items():
                setattr(row, field, value)
            db.flush()
            return Account.model_validate(row)

    def delete_account(self, account_id: str) -> bool:
        with self._unit_of_work() as db:
            row = db.get(models.Account, account_id)
            if not row:
                return False

            referencing = db.execute(
                select(func.count(models.Transaction.id)).where(
                    models.Transaction.account_id == account_id
                )
            ).scalar_one()
            if referencing:
                if self.account_delete_policy != "cascade":
                    raise AccountInUseError(account_id, referencing)
                db.query(models.Transaction).filter(
                    models.Transaction.account_id == account_id
                ).delete(synchronize_session=False)
                logger.info(
                    f"[STORAGE] Cascade-deleted {referencing} transaction(s) of account {account_id}"
                )

            db.delete(row)
            return True

    # Categories
    def list_categories(self) -> List[Category]:
        with self._unit_of_work() as db:
            rows = db.execute(select(models.Category)).scalars().all()
            return [Category.model_validate(row) for row in rows]

    def get_category(self, category_id: str) -> Optional[Category]:
        with self._unit_of_work() as db:
            row = db.get(models.Category, category_id)
            return Category.model_validate(row) if row else None

    def create_category(self, category: CategoryCreate) -> Category:
        with self._unit_of_work() as db:
            row = models.Category(id=str(uuid.uuid4()), **category.model_dump())
            db.add(row)
            db.flush()
            return Category.model_validate(row)

    def update_category(self, category_id: str, updates: CategoryUpdate) -> Optional[Category]:
        with self._unit_of_work() as db:
            row = db.get(models.Category, category_id)
            if not row:
                return None
            for field, value in changes(updates).items():
                setattr(row, field, value)
            db.flush()
            return Category.model_validate(row)

    def delete_category(self, category_id: str) -> bool:
        with self._unit_of_work() as db:
            row = db.get(models.Category, category_id)
            if not row:
                return False
            db.delete(row)
            return True

    # Transactions
    def list_transactions(self) -> List[Transaction]:
        with self._unit_of_work() as db:
            rows = db.execute(
                select(models.Transaction).order_by(models.Transaction.date.desc())
            ).scalars().all()
            return [Transaction.model_validate(row) for row in rows]

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        with self._unit_of_work() as db:
            row = db.get(models.Transaction, transaction_id)
            return Transaction.model_validate(row) if row else None

    def create_transaction(self, transaction: TransactionCreate) -> Transaction:
        with self._unit_of_work() as db:
            row = models.Transaction(
                id=str(uuid.uuid4()),
                created_at=utcnow(),
                **transaction.model_dump(),
            )
            db.add(row)
            db.flush()
            created = Transaction.model_validate(row)
            self._post(db, plan_create(Posting.of(created)))
            return created

    def update_transaction(
        self,
        transaction_id: str,
        updates: TransactionUpdate,
    ) -> Optional[Transaction]:
        with self._unit_of_work() as db:
            row = db.get(models.Transaction, transaction_id, with_for_update=True)
            if not row:
                return None

            old = Posting.of(row)
            for field, value in changes(updates).items():
                setattr(row, field, value)
            db.flush()
            updated = Transaction.model_validate(row)
            self._post(db, plan_update(old, Posting.of(updated)))
            return updated

    def delete_transaction(self, transaction_id: str) -> bool:
        with self._unit_of_work() as db:
            row = db.get(models.Transaction, transaction_id, with_for_update=True)
            if not row:
                return False

            self._post(db, plan_delete(Posting.of(row)))
            db.delete(row)
            return True

    # Glossary
    def list_glossary_terms(self) -> List[GlossaryTerm]:
        with self._unit_of_work() as db:
            rows = db.execute(
                select(models.GlossaryTerm).order_by(models.GlossaryTerm.term)
            ).scalars().all()
            return [GlossaryTerm.model_validate(row) for row in rows]

    def get_glossary_term(self, term_id: str) -> Optional[GlossaryTerm]:
        with self._unit_of_work() as db:
            row = db.get(models.GlossaryTerm, term_id)
            return GlossaryTerm.model_validate(row) if row else None

    def create_glossary_term(self, term: GlossaryTermCreate) -> GlossaryTerm:
        with self._unit_of_work() as db:
            row = models.GlossaryTerm(id=str(uuid.uuid4()), **term.model_dump())
            db.add(row)
            db.flush()
            return GlossaryTerm.model_validate(row)

    def update_glossary_term(
        self,
        term_id: str,
        updates: GlossaryTermUpdate,
    ) -> Optional[GlossaryTerm]:
        with self._unit_of_work() as db:
            row = db.get(models.GlossaryTerm, term_id)
            if not row:
                return None
            for field, value in changes(updates).items():
                setattr(row, field, value)
            db.flush()
            return GlossaryTerm.model_validate(row)

    def delete_glossary_term(self, term_id: str) -> bool:
        with self._unit_of_work() as db:
            row = db.get(models.GlossaryTerm, term_id)
            if not row:
                return False
            db.delete(row)
            return True
