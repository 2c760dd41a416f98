"""
In-memory storage backend.

Records live in per-entity dicts for the lifetime of the instance. A single
re-entrant lock serializes every operation, so a transaction write and its
balance adjustments are never interleaved with another caller's.
"""
from decimal import Decimal
from typing import Dict, List, Optional
import logging
import threading
import uuid

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
    plan_create,
    plan_delete,
    plan_update,
    post_adjustments,
)
from fintrack.storage.interface import AccountInUseError, StorageInterface
from fintrack.storage.seed import seed_defaults as seed_default_data

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryStorage(StorageInterface):
    """Ephemeral store, reset whenever the process restarts."""

    def __init__(self, seed_defaults: bool = True, account_delete_policy: str = "reject"):
        self.account_delete_policy = account_delete_policy
        self._lock = threading.RLock()
        self._accounts: Dict[str, Account] = {}
        self._categories: Dict[str, Category] = {}
        self._transactions: Dict[str, Transaction] = {}
        self._glossary_terms: Dict[str, GlossaryTerm] = {}

        if seed_defaults:
            seed_default_data(self)

    def _post(self, adjustments) -> None:
        """
        Run the balance protocol against a staging copy and commit the new
        balances only once every adjustment succeeded.
        """
        staged: Dict[str, Decimal] = {}

        def load_balance(account_id: str) -> Optional[Decimal]:
            if account_id in staged:
                return staged[account_id]
            account = self._accounts.get(account_id)
            return account.balance if account else None

        post_adjustments(adjustments, load_balance, staged.__setitem__)

        for account_id, balance in staged.items():
            self._accounts[account_id] = self._accounts[account_id].model_copy(
                update={"balance": balance}
            )

    # Accounts
    def list_accounts(self) -> List[Account]:
        with self._lock:
            return list(self._accounts.values())

    def get_account(self, account_id: str) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(account_id)

    def create_account(self, account: AccountCreate) -> Account:
        with self._lock:
            record = Account(id=_new_id(), **account.model_dump())
            self._accounts[record.id] = record
            return record

    def update_account(self, account_id: str, updates: AccountUpdate) -> Optional[Account]:
        with self._lock:
            account = self._accounts.get(account_id)
            if not account:
                return None
            updated = account.model_copy(update=changes(updates))
            self._accounts[account_id] = updated
            return updated

    def delete_account(self, account_id: str) -> bool:
        with self._lock:
            if account_id not in self._accounts:
                return False

            referencing = [
                t.id for t in self._transactions.values() if t.account_id == account_id
            ]
            if referencing:
                if self.account_delete_policy != "cascade":
                    raise AccountInUseError(account_id, len(referencing))
                for transaction_id in referencing:
                    del self._transactions[transaction_id]
                logger.info(
                    f"[STORAGE] Cascade-deleted {len(referencing)} transaction(s) of account {account_id}"
                )

            del self._accounts[account_id]
            return True

    # Categories
    def list_categories(self) -> List[Category]:
        with self._lock:
            return list(self._categories.values())

    def get_category(self, category_id: str) -> Optional[Category]:
        with self._lock:
            return self._categories.get(category_id)

    def create_category(self, category: CategoryCreate) -> Category:
        with self._lock:
            record = Category(id=_new_id(), **category.model_dump())
            self._categories[record.id] = record
            return record

    def update_category(self, category_id: str, updates: CategoryUpdate) -> Optional[Category]:
        with self._lock:
            category = self._categories.get(category_id)
            if not category:
                return None
            updated = category.model_copy(update=changes(updates))
            self._categories[category_id] = updated
            return updated

    def delete_category(self, category_id: str) -> bool:
        with self._lock:
            return self._categories.pop(category_id, None) is not None

    # Transactions
    def list_transactions(self) -> List[Transaction]:
        with self._lock:
            return sorted(self._transactions.values(), key=lambda t: t.date, reverse=True)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        with self._lock:
            return self._transactions.get(transaction_id)

    def create_transaction(self, transaction: TransactionCreate) -> Transaction:
        with self._lock:
            record = Transaction(
                id=_new_id(),
                created_at=utcnow(),
                **transaction.model_dump(),
            )
            self._post(plan_create(Posting.of(record)))
            self._transactions[record.id] = record
            return record

    def update_transaction(
        self,
        transaction_id: str,
        updates: TransactionUpdate,
    ) -> Optional[Transaction]:
        with self._lock:
            existing = self._transactions.get(transaction_id)
            if not existing:
                return None

            updated = existing.model_copy(update=changes(updates))
            self._post(plan_update(Posting.of(existing), Posting.of(updated)))
            self._transactions[transaction_id] = updated
            return updated

    def delete_transaction(self, transaction_id: str) -> bool:
        with self._lock:
            existing = self._transactions.get(transaction_id)
            if not existing:
                return False

            self._post(plan_delete(Posting.of(existing)))
            del self._transactions[transaction_id]
            return True

    # Glossary
    def list_glossary_terms(self) -> List[GlossaryTerm]:
        with self._lock:
            return sorted(self._glossary_terms.values(), key=lambda g: g.term)

    def get_glossary_term(self, term_id: str) -> Optional[GlossaryTerm]:
        with self._lock:
            return self._glossary_terms.get(term_id)

    def create_glossary_term(self, term: GlossaryTermCreate) -> GlossaryTerm:
        with self._lock:
            record = GlossaryTerm(id=_new_id(), **term.model_dump())
            self._glossary_terms[record.id] = record
            return record

    def update_glossary_term(
        self,
        term_id: str,
        updates: GlossaryTermUpdate,
    ) -> Optional[GlossaryTerm]:
        with self._lock:
            term = self._glossary_terms.get(term_id)
            if not term:
                return None
            updated = term.model_copy(update=changes(updates))
            self._glossary_terms[term_id] = updated
            return updated

    def delete_glossary_term(self, term_id: str) -> bool:
        with self._lock:
            return self._glossary_terms.pop(term_id, None) is not None
