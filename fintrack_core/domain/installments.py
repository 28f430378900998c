"""Installment schedule generation for split and recurring charges"""

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Union
from fintrack_core.domain.exceptions import InvalidArgumentError
from fintrack_core.domain.models import Installment
from fintrack_core.utils.date_utils import add_months

CENT = Decimal("0.01")

Amount = Union[Decimal, float, int, str]


def _to_decimal(amount: Amount) -> Decimal:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation as e:
        raise InvalidArgumentError(f"amount {amount!r} is not a number") from e
    if not value.is_finite():
        raise InvalidArgumentError(f"amount must be a finite number, got {amount!r}")
    return value


def to_money(amount: Amount) -> Decimal:
    """Convert to a Decimal rounded to cents, half away from zero"""
    value = _to_decimal(amount)
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        # quantize overflows the context precision (28 digits) for huge values
        raise InvalidArgumentError(f"amount {amount!r} is too large to represent in cents") from e


def calculate_installments(
    amount: Amount,
    count: int,
    first_due_date: date,
    is_recurring: bool = False,
) -> List[Installment]:
    """
    Build a monthly installment schedule.

    Requirements:
    - Split mode divides the total in whole cents; the first installment
      absorbs the whole remainder so the sum matches the rounded total exactly
    - Recurring mode repeats the rounded amount on every installment
    - Due dates advance one calendar month per installment, clamped to the
      last day of shorter months

    Args:
        amount: Total (split) or per-period (recurring) amount, >= 0
        count: Number of installments, >= 1
        first_due_date: Due date of installment 1 (date or datetime)
        is_recurring: Repeat the amount instead of splitting it

    Raises:
        InvalidArgumentError: count < 1, amount < 0, or an amount that is not
            a finite number representable in cents

    Example:
        100.00 / 3 -> 10000 cents // 3 = 3333, remainder 1
        [33.34, 33.33, 33.33]
    """
    if count < 1:
        raise InvalidArgumentError("installments count must be at least 1")

    value = _to_decimal(amount)
    if value < 0:
        raise InvalidArgumentError("amount must be non-negative")
    total = to_money(value)

    if is_recurring:
        part_amount = total
        first_amount = total
    else:
        total_cents = int(total.scaleb(2))
        part_cents, remainder_cents = divmod(total_cents, count)
        part_amount = to_money(Decimal(part_cents).scaleb(-2))
        first_amount = to_money(Decimal(part_cents + remainder_cents).scaleb(-2))

    return [
        Installment(
            sequence_number=i + 1,
            amount=first_amount if i == 0 else part_amount,
            due_date=add_months(first_due_date, i),
        )
        for i in range(count)
    ]
