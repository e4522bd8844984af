"""
Input Normalisation

Amounts arrive from form fields as text or numbers. They are checked here,
before any state is touched, so a bad value never produces a half-applied
transition.

IMPORTANT: Nothing is silently corrected except the documented split rule:
an empty split falls back to the payer.
"""

from decimal import Decimal, InvalidOperation
from typing import Iterable, TypeVar, Union

from expense_ledger.exceptions import InvalidAmountError


AmountInput = Union[Decimal, int, float, str]

_Id = TypeVar("_Id", bound=str)


def _to_decimal(value: AmountInput) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmountError(value)
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        # via str so 0.1 stays 0.1 rather than its binary expansion
        number = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidAmountError(value, "empty")
        try:
            number = Decimal(text)
        except InvalidOperation as e:
            raise InvalidAmountError(value) from e
    else:
        raise InvalidAmountError(value, f"unsupported type {type(value).__name__}")

    if not number.is_finite():
        raise InvalidAmountError(value, "not finite")
    return number


def parse_amount(value: AmountInput) -> Decimal:
    """
    Parse an expense amount.

    Raises:
        InvalidAmountError: if the value is not numeric, not finite,
            or not strictly positive.
    """
    number = _to_decimal(value)
    if number <= 0:
        raise InvalidAmountError(value, "must be greater than zero")
    return number


def parse_limit(value: AmountInput) -> Decimal:
    """
    Parse a budget limit.

    Limits are not bound-checked; zero or negative limits are accepted
    and classify as exceeded.
    """
    return _to_decimal(value)


def normalize_split(split_between: Iterable[_Id], paid_by: _Id) -> tuple[_Id, ...]:
    """
    Return the split as a tuple of unique ids, in first-seen order.

    An empty split becomes ``(paid_by,)``.
    """
    members = tuple(dict.fromkeys(split_between))
    return members or (paid_by,)
