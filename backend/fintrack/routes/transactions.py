from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List
import logging

from fintrack.dependencies import get_storage
from fintrack.schemas import Transaction, TransactionCreate, TransactionDraft, TransactionUpdate
from fintrack.storage import StorageInterface
from fintrack.validation import (
    check_transaction_update,
    require_matching_category,
    resolve_default_account,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[Transaction])
def list_transactions(storage: StorageInterface = Depends(get_storage)):
    """List transactions, newest first."""
    return storage.list_transactions()


@router.get("/{transaction_id}", response_model=Transaction)
def get_transaction(transaction_id: str, storage: StorageInterface = Depends(get_storage)):
    """Get a specific transaction by ID."""
    transaction = storage.get_transaction(transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.post("/", response_model=Transaction, status_code=201)
def create_transaction(draft: TransactionDraft, storage: StorageInterface = Depends(get_storage)):
    """
    Create a transaction and post it to its account.

    Without an account_id the default account is used.
    """
    require_matching_category(storage, draft.category_id, draft.transaction_type)

    data = draft.model_dump()
    if not data["account_id"]:
        account = resolve_default_account(storage)
        if not account:
            raise HTTPException(status_code=422, detail="No account available for the transaction")
        data["account_id"] = account.id
        logger.info(f"Transaction without account assigned to default account {account.id}")

    return storage.create_transaction(TransactionCreate(**data))


@router.api_route("/{transaction_id}", methods=["PUT", "PATCH"], response_model=Transaction)
def update_transaction(
    transaction_id: str,
    updates: TransactionUpdate,
    storage: StorageInterface = Depends(get_storage),
):
    """Update a transaction; its balance effect moves with it."""
    existing = storage.get_transaction(transaction_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Transaction not found")
    check_transaction_update(storage, existing, updates)

    transaction = storage.update_transaction(transaction_id, updates)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str, storage: StorageInterface = Depends(get_storage)):
    """Delete a transaction and revert its balance effect."""
    if not storage.delete_transaction(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    return Response(status_code=204)
