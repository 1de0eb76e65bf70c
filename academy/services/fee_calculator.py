# academy/services/fee_calculator.py
"""Fee balance arithmetic shared by payments, debtors and reports."""
from decimal import Decimal
from typing import Any, Iterable, Union
import enum
from pydantic import BaseModel

Number = Union[Decimal, int, float, str]
ZERO = Decimal("0")


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    VERIFIED = "Verified"
    REJECTED = "Rejected"


class PaymentMethod(str, enum.Enum):
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"
    POS = "POS"
    ONLINE = "Online Payment"
    CHEQUE = "Cheque"


class ScholarshipType(str, enum.Enum):
    PERCENTAGE = "Percentage"
    FIXED_AMOUNT = "Fixed Amount"


class BalanceStatus(str, enum.Enum):
    PAID = "Paid"
    PARTIAL = "Partial"
    UNPAID = "Unpaid"


class FeeBalance(BaseModel):
    total_required: Decimal
    discount: Decimal
    total_paid: Decimal
    total_pending: Decimal
    balance: Decimal
    credit: Decimal
    status: BalanceStatus


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def initial_status(method: Union[PaymentMethod, str]) -> PaymentStatus:
    """Cash is counted at the desk, so it is verified on entry."""
    if PaymentMethod(method) == PaymentMethod.CASH:
        return PaymentStatus.VERIFIED
    return PaymentStatus.PENDING


def apply_scholarship(total: Number, scholarship_type: Union[ScholarshipType, str], value: Number) -> Decimal:
    """Amount a scholarship takes off a fee total, never more than the total."""
    total = to_decimal(total)
    value = to_decimal(value)
    if ScholarshipType(scholarship_type) == ScholarshipType.PERCENTAGE:
        percent = min(max(value, ZERO), Decimal("100"))
        discount = (total * percent / Decimal("100")).quantize(Decimal("0.01"))
    else:
        discount = max(value, ZERO)
    return min(discount, total)


def _status_of(payment: Any) -> PaymentStatus:
    return PaymentStatus(getattr(payment, "status"))


def total_verified(payments: Iterable[Any]) -> Decimal:
    return sum(
        (to_decimal(p.amount) for p in payments if _status_of(p) == PaymentStatus.VERIFIED),
        ZERO,
    )


def total_pending(payments: Iterable[Any]) -> Decimal:
    return sum(
        (to_decimal(p.amount) for p in payments if _status_of(p) == PaymentStatus.PENDING),
        ZERO,
    )


def compute_balance(total_required: Number, payments: Iterable[Any], discount: Number = 0) -> FeeBalance:
    """Outstanding fees after verified payments.

    ``payments`` is any iterable of objects with ``amount`` and ``status``.
    Pending and rejected payments never reduce the balance. The balance is
    floored at zero and any overpayment is reported as ``credit``.
    """
    payments = list(payments)
    required = to_decimal(total_required)
    discount = min(to_decimal(discount), required)
    paid = total_verified(payments)
    due = required - discount

    balance = max(due - paid, ZERO)
    credit = max(paid - due, ZERO)

    if balance == ZERO and (due > ZERO or paid > ZERO):
        status = BalanceStatus.PAID
    elif paid > ZERO:
        status = BalanceStatus.PARTIAL
    else:
        status = BalanceStatus.UNPAID

    return FeeBalance(
        total_required=required,
        discount=discount,
        total_paid=paid,
        total_pending=total_pending(payments),
        balance=balance,
        credit=credit,
        status=status,
    )
