"""
Abstract storage interface.

Two backends implement it: an in-memory store and a SQLAlchemy-backed
relational store. The backend is picked explicitly from settings at startup.

Absence is a normal result: `get_*` and `update_*` return None and `delete_*`
returns False for unknown ids. Failures raise a StorageError subclass.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

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
)


class StorageInterface(ABC):
    """
    CRUD over accounts, categories, transactions and glossary terms.

    Transaction mutations keep the owning account's balance equal to its
    opening balance plus the signed amounts of its transactions.
    """

    # Accounts
    @abstractmethod
    def list_accounts(self) -> List[Account]:
        """List all accounts. No ordering guarantee."""
        pass

    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        pass

    @abstractmethod
    def create_account(self, account: AccountCreate) -> Account:
        pass

    @abstractmethod
    def update_account(self, account_id: str, updates: AccountUpdate) -> Optional[Account]:
        pass

    @abstractmethod
    def delete_account(self, account_id: str) -> bool:
        """
        Delete an account.

        Returns:
            True if the account existed and was removed

        Raises:
            AccountInUseError: If transactions still reference the account and
                the store rejects such deletions
        """
        pass

    # Categories
    @abstractmethod
    def list_categories(self) -> List[Category]:
        pass

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    def create_category(self, category: CategoryCreate) -> Category:
        pass

    @abstractmethod
    def update_category(self, category_id: str, updates: CategoryUpdate) -> Optional[Category]:
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> bool:
        pass

    # Transactions
    @abstractmethod
    def list_transactions(self) -> List[Transaction]:
        """List transactions, newest event date first."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        pass

    @abstractmethod
    def create_transaction(self, transaction: TransactionCreate) -> Transaction:
        """
        Persist a transaction and post its delta to the target account.

        A missing account is tolerated: the transaction is still stored.
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: str,
        updates: TransactionUpdate,
    ) -> Optional[Transaction]:
        """
        Revert the old posting, merge the changes, then post the new effect
        to the (possibly different) target account.
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> bool:
        """Revert the transaction's posting and remove it."""
        pass

    # Glossary
    @abstractmethod
    def list_glossary_terms(self) -> List[GlossaryTerm]:
        """List glossary terms ordered by term, ascending."""
        pass

    @abstractmethod
    def get_glossary_term(self, term_id: str) -> Optional[GlossaryTerm]:
        pass

    @abstractmethod
    def create_glossary_term(self, term: GlossaryTermCreate) -> GlossaryTerm:
        pass

    @abstractmethod
    def update_glossary_term(
        self,
        term_id: str,
        updates: GlossaryTermUpdate,
    ) -> Optional[GlossaryTerm]:
        pass

    @abstractmethod
    def delete_glossary_term(self, term_id: str) -> bool:
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageBackendError(StorageError):
    """The underlying store failed (I/O, constraint, driver error)."""
    pass


class AccountInUseError(StorageError):
    """An account cannot be deleted while transactions reference it."""

    def __init__(self, account_id: str, transaction_count: int):
        self.account_id = account_id
        self.transaction_count = transaction_count
        super().__init__(
            f"Account {account_id} is referenced by {transaction_count} transaction(s)"
        )


class BalanceOverflowError(StorageError):
    """A balance adjustment would leave the NUMERIC(12, 2) range."""

    def __init__(self, account_id: str, balance):
        self.account_id = account_id
        self.balance = balance
        super().__init__(f"Balance {balance} for account {account_id} exceeds NUMERIC(12, 2)")
