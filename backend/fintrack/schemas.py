"""
Insertable, partial and stored shapes for the four entity types.

`<Entity>Create` is what callers hand to `create_*`, `<Entity>Update` is the
partial payload for `update_*`, and the bare `<Entity>` is the stored record
returned by every storage backend.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from fintrack.money import fits_precision, to_money

AccountType = Literal["checking", "savings", "credit", "investment"]
EntryType = Literal["income", "expense"]


def utcnow() -> datetime:
    """Current time as naive UTC, the form stored in both backends."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _money(value: Decimal) -> Decimal:
    quantized = to_money(value)
    if not fits_precision(quantized):
        raise ValueError("Value does not fit NUMERIC(12, 2)")
    return quantized


def _non_negative(value: Decimal) -> Decimal:
    if value < 0:
        raise ValueError("Amount must be a non-negative magnitude; the sign is carried by the type")
    return value


Money = Annotated[Decimal, AfterValidator(_money)]
Amount = Annotated[Decimal, AfterValidator(_money), AfterValidator(_non_negative)]
UtcDatetime = Annotated[datetime, AfterValidator(_naive_utc)]
NonEmpty = Annotated[str, Field(min_length=1)]


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


# Account Schemas
class AccountCreate(BaseModel):
    name: NonEmpty
    account_type: AccountType
    balance: Money = Decimal("0.00")
    is_default: bool = False


class AccountUpdate(BaseModel):
    name: Optional[NonEmpty] = None
    account_type: Optional[AccountType] = None
    balance: Optional[Money] = None
    is_default: Optional[bool] = None


class Account(_Record):
    id: str
    name: str
    account_type: AccountType
    balance: Money
    is_default: bool


# Category Schemas
class CategoryCreate(BaseModel):
    name: NonEmpty
    category_type: EntryType
    color: NonEmpty
    icon: NonEmpty
    is_default: bool = False


class CategoryUpdate(BaseModel):
    name: Optional[NonEmpty] = None
    category_type: Optional[EntryType] = None
    color: Optional[NonEmpty] = None
    icon: Optional[NonEmpty] = None
    is_default: Optional[bool] = None


class Category(_Record):
    id: str
    name: str
    category_type: EntryType
    color: str
    icon: str
    is_default: bool


# Transaction Schemas
class TransactionBase(BaseModel):
    amount: Amount
    description: str
    transaction_type: EntryType
    category_id: NonEmpty
    date: UtcDatetime


class TransactionCreate(TransactionBase):
    account_id: NonEmpty


class TransactionDraft(TransactionBase):
    """Request body for new transactions; a missing account means the default account."""
    account_id: Optional[NonEmpty] = None


class TransactionUpdate(BaseModel):
    amount: Optional[Amount] = None
    description: Optional[str] = None
    transaction_type: Optional[EntryType] = None
    category_id: Optional[NonEmpty] = None
    account_id: Optional[NonEmpty] = None
    date: Optional[UtcDatetime] = None


class Transaction(_Record):
    id: str
    amount: Amount
    description: str
    transaction_type: EntryType
    category_id: str
    account_id: str
    date: UtcDatetime
    created_at: UtcDatetime


# Glossary Schemas
class GlossaryTermCreate(BaseModel):
    term: NonEmpty
    definition: NonEmpty


class GlossaryTermUpdate(BaseModel):
    term: Optional[NonEmpty] = None
    definition: Optional[NonEmpty] = None


class GlossaryTerm(_Record):
    id: str
    term: str
    definition: str


# Reconciliation
class AccountReconciliation(BaseModel):
    account_id: str
    balance: Decimal
    transaction_net: Decimal
    transaction_count: int


def changes(updates: BaseModel) -> dict:
    """Fields explicitly set on a partial update, ignoring explicit nulls."""
    return updates.model_dump(exclude_unset=True, exclude_none=True)
