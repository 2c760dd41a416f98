"""
Fixed-point money helpers.

Balances and amounts are stored as NUMERIC(12, 2): ten integer digits and two
fractional digits. All arithmetic goes through Decimal, never float.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")
MONEY_PRECISION = 12
MONEY_SCALE = 2
MAX_MONEY = Decimal("9999999999.99")

MoneyLike = Union[Decimal, str, int, float]


def to_money(value: MoneyLike) -> Decimal:
    """
    Convert a value to a two-place Decimal.

    Floats are converted through their string form so that 0.1 becomes
    Decimal("0.10") rather than the binary expansion.
    """
    if isinstance(value, Decimal):
        candidate = value
    else:
        try:
            candidate = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Invalid money value: {value!r}") from exc
    if not candidate.is_finite():
        raise ValueError(f"Invalid money value: {value!r}")
    try:
        return candidate.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Money value out of range: {value!r}") from exc


def fits_precision(value: Decimal) -> bool:
    return abs(value) <= MAX_MONEY
