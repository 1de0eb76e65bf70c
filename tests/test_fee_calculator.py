from decimal import Decimal
from types import SimpleNamespace

import pytest

from academy.services.fee_calculator import (
    BalanceStatus, PaymentMethod, PaymentStatus, apply_scholarship,
    compute_balance, initial_status
)


def payment(amount, status):
    return SimpleNamespace(amount=Decimal(str(amount)), status=status)


def test_only_verified_payments_reduce_balance():
    result = compute_balance(200000, [payment(120000, "Verified")])
    assert result.balance == Decimal("80000")
    assert result.total_paid == Decimal("120000")
    assert result.status == BalanceStatus.PARTIAL


def test_pending_payment_leaves_balance():
    payments = [payment(120000, "Verified"), payment(50000, "Pending")]
    result = compute_balance(200000, payments)
    assert result.balance == Decimal("80000")
    assert result.total_pending == Decimal("50000")


def test_rejected_payment_is_ignored():
    result = compute_balance(200000, [payment(200000, "Rejected")])
    assert result.balance == Decimal("200000")
    assert result.status == BalanceStatus.UNPAID


def test_overpayment_is_reported_as_credit():
    result = compute_balance(200000, [payment(210000, "Verified")])
    assert result.balance == 0
    assert result.credit == Decimal("10000")
    assert result.status == BalanceStatus.PAID


def test_nothing_required_nothing_paid():
    result = compute_balance(0, [])
    assert result.balance == 0
    assert result.status == BalanceStatus.UNPAID


def test_discount_reduces_amount_due():
    result = compute_balance(200000, [payment(100000, "Verified")], discount=50000)
    assert result.balance == Decimal("50000")
    assert result.discount == Decimal("50000")


def test_recomputing_gives_same_result():
    payments = [payment(120000, "Verified"), payment(50000, "Pending")]
    assert compute_balance(200000, payments) == compute_balance(200000, payments)


def test_initial_status():
    assert initial_status(PaymentMethod.CASH) == PaymentStatus.VERIFIED
    assert initial_status("Bank Transfer") == PaymentStatus.PENDING
    assert initial_status("POS") == PaymentStatus.PENDING


def test_unknown_method_is_rejected():
    with pytest.raises(ValueError):
        initial_status("Barter")


def test_percentage_scholarship():
    assert apply_scholarship(200000, "Percentage", 10) == Decimal("20000.00")
    assert apply_scholarship(200000, "Percentage", 150) == Decimal("200000.00")


def test_fixed_scholarship_is_capped_at_total():
    assert apply_scholarship(200000, "Fixed Amount", 25000) == Decimal("25000")
    assert apply_scholarship(200000, "Fixed Amount", 250000) == Decimal("200000")
