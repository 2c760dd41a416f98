"""
Caller-side checks that the storage layer deliberately does not perform.

Raise HTTPException so the routes can use them directly.
"""
from typing import Optional

from fastapi import HTTPException, status

from fintrack.schemas import Account, Category, Transaction, TransactionUpdate
from fintrack.storage import StorageInterface


def resolve_default_account(storage: StorageInterface) -> Optional[Account]:
    """The account flagged as default, falling back to the first account."""
    accounts = storage.list_accounts()
    for account in accounts:
        if account.is_default:
            return account
    return accounts[0] if accounts else None


def require_matching_category(
    storage: StorageInterface,
    category_id: str,
    transaction_type: str,
) -> Category:
    """Reject unknown categories and categories of the other type."""
    category = storage.get_category(category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Category not found",
        )
    if category.category_type != transaction_type:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"Category '{category.name}' is an {category.category_type} category "
                f"but the transaction is {transaction_type}"
            ),
        )
    return category


def check_transaction_update(
    storage: StorageInterface,
    existing: Transaction,
    updates: TransactionUpdate,
) -> None:
    """Validate the category/type pairing the update would produce."""
    if updates.category_id is None and updates.transaction_type is None:
        return
    require_matching_category(
        storage,
        updates.category_id or existing.category_id,
        updates.transaction_type or existing.transaction_type,
    )


def check_category_deletable(category: Category) -> None:
    if category.is_default:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Default categories cannot be deleted",
        )
