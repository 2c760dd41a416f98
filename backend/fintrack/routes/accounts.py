from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List

from fintrack.dependencies import get_storage
from fintrack.schemas import Account, AccountCreate, AccountReconciliation, AccountUpdate
from fintrack.storage import StorageInterface
from fintrack.storage.balance import ledger_net
from fintrack.validation import resolve_default_account

router = APIRouter()


@router.get("/", response_model=List[Account])
def list_accounts(storage: StorageInterface = Depends(get_storage)):
    """List all accounts."""
    return storage.list_accounts()


@router.get("/default", response_model=Account)
def get_default_account(storage: StorageInterface = Depends(get_storage)):
    """Account used for new transactions that do not name one."""
    account = resolve_default_account(storage)
    if not account:
        raise HTTPException(status_code=404, detail="No accounts exist")
    return account


@router.get("/{account_id}", response_model=Account)
def get_account(account_id: str, storage: StorageInterface = Depends(get_storage)):
    """Get a specific account by ID."""
    account = storage.get_account(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


@router.get("/{account_id}/reconciliation", response_model=AccountReconciliation)
def reconcile_account(account_id: str, storage: StorageInterface = Depends(get_storage)):
    """
    Compare the cached balance with the net of the account's transactions.

    The difference between the two is the account's opening balance.
    """
    account = storage.get_account(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")

    transactions = storage.list_transactions()
    return AccountReconciliation(
        account_id=account.id,
        balance=account.balance,
        transaction_net=ledger_net(transactions, account.id),
        transaction_count=sum(1 for t in transactions if t.account_id == account.id),
    )


@router.post("/", response_model=Account, status_code=201)
def create_account(account: AccountCreate, storage: StorageInterface = Depends(get_storage)):
    """Create a new account."""
    return storage.create_account(account)


@router.api_route("/{account_id}", methods=["PUT", "PATCH"], response_model=Account)
def update_account(
    account_id: str,
    updates: AccountUpdate,
    storage: StorageInterface = Depends(get_storage),
):
    """Update an account."""
    account = storage.update_account(account_id, updates)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


@router.delete("/{account_id}", status_code=204)
def delete_account(account_id: str, storage: StorageInterface = Depends(get_storage)):
    """Delete an account. Blocked while transactions reference it unless cascading."""
    if not storage.delete_account(account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    return Response(status_code=204)
