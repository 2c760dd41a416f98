"""
Balance adjustment protocol.

Keeps Account.balance equal to the opening balance plus the signed amounts of
the transactions posted against the account:

    create: apply the new posting
    update: revert the old posting, then apply the new one (the account may
            have changed, so these can hit two different accounts)
    delete: revert the old posting

The backends supply `load_balance` / `store_balance` callbacks and decide how
the writes are made atomic (a staging dict in memory, a database transaction
for SQL).
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional
import logging

from fintrack.money import fits_precision, to_money
from fintrack.storage.interface import BalanceOverflowError

logger = logging.getLogger(__name__)

INCOME = "income"
EXPENSE = "expense"

BalanceLoader = Callable[[str], Optional[Decimal]]
BalanceStorer = Callable[[str, Decimal], None]


@dataclass(frozen=True)
class Posting:
    """The balance-relevant part of a transaction."""
    account_id: str
    transaction_type: str
    amount: Decimal

    @classmethod
    def of(cls, transaction) -> "Posting":
        return cls(
            account_id=transaction.account_id,
            transaction_type=transaction.transaction_type,
            amount=to_money(transaction.amount),
        )

    @property
    def delta(self) -> Decimal:
        return signed_delta(self.transaction_type, self.amount)

    @property
    def reversal(self) -> Decimal:
        return reverse_delta(self.transaction_type, self.amount)


@dataclass(frozen=True)
class Adjustment:
    account_id: str
    delta: Decimal
    reason: str


def signed_delta(transaction_type: str, amount) -> Decimal:
    """Income adds to the balance, expense subtracts."""
    magnitude = to_money(amount)
    if transaction_type == INCOME:
        return magnitude
    if transaction_type == EXPENSE:
        return -magnitude
    raise ValueError(f"Unknown transaction type: {transaction_type!r}")


def reverse_delta(transaction_type: str, amount) -> Decimal:
    return -signed_delta(transaction_type, amount)


def plan_create(new: Posting) -> List[Adjustment]:
    return [Adjustment(new.account_id, new.delta, "apply")]


def plan_update(old: Posting, new: Posting) -> List[Adjustment]:
    """Revert first, then reapply. Order matters when the account is unchanged."""
    return [
        Adjustment(old.account_id, old.reversal, "revert"),
        Adjustment(new.account_id, new.delta, "apply"),
    ]


def plan_delete(old: Posting) -> List[Adjustment]:
    return [Adjustment(old.account_id, old.reversal, "revert")]


def lock_order(adjustments: Iterable[Adjustment]) -> List[str]:
    """Distinct account ids in sorted order, the order their rows are locked in."""
    return sorted({adjustment.account_id for adjustment in adjustments})


def apply_delta(account_id: str, balance, delta: Decimal) -> Decimal:
    updated = to_money(to_money(balance) + delta)
    if not fits_precision(updated):
        raise BalanceOverflowError(account_id, updated)
    return updated


def post_adjustments(
    adjustments: Iterable[Adjustment],
    load_balance: BalanceLoader,
    store_balance: BalanceStorer,
) -> Dict[str, Decimal]:
    """
    Apply adjustments in order through the backend callbacks.

    Adjustments against accounts that do not exist are skipped. Any error
    aborts the remaining adjustments; the caller is responsible for
    discarding writes already made.

    Returns:
        Final balance per adjusted account
    """
    results: Dict[str, Decimal] = {}
    for adjustment in adjustments:
        current = load_balance(adjustment.account_id)
        if current is None:
            logger.warning(
                f"[BALANCE] Account {adjustment.account_id} not found, "
                f"skipping {adjustment.reason} of {adjustment.delta}"
            )
            continue

        updated = apply_delta(adjustment.account_id, current, adjustment.delta)
        store_balance(adjustment.account_id, updated)
        results[adjustment.account_id] = updated
        logger.debug(
            f"[BALANCE] {adjustment.reason} account={adjustment.account_id} "
            f"delta={adjustment.delta} balance={current} -> {updated}"
        )
    return results


def ledger_net(transactions: Iterable, account_id: str) -> Decimal:
    """Net signed total of the transactions posted against an account."""
    total = Decimal("0.00")
    for transaction in transactions:
        if transaction.account_id == account_id:
            total += signed_delta(transaction.transaction_type, transaction.amount)
    return to_money(total)
