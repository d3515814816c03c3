from datetime import datetime
from decimal import Decimal

import pytest

from bpay.models.charge import ChargeStatus
from bpay.services.charge_status import (
    ChargeAlreadyPaid,
    InvalidStatusTransition,
    confirm_payment_fields,
    transition_fields,
)

NOW = datetime(2025, 2, 10, 12, 0)
AMOUNT = Decimal("450.00")


def test_paid_defaults_to_amount_and_now():
    fields = transition_fields(ChargeStatus.PENDING, ChargeStatus.PAID, AMOUNT, NOW)

    assert fields["status"] == ChargeStatus.PAID
    assert fields["paid_amount"] == AMOUNT
    assert fields["paid_at"] == NOW


def test_paid_with_explicit_values():
    paid_at = datetime(2025, 2, 9, 8, 0)
    fields = transition_fields(
        ChargeStatus.OVERDUE, ChargeStatus.PAID, AMOUNT, NOW, paid_amount=Decimal("400"), paid_at=paid_at
    )

    assert fields["paid_amount"] == Decimal("400.00")
    assert fields["paid_at"] == paid_at


@pytest.mark.parametrize("target", [ChargeStatus.PENDING, ChargeStatus.OVERDUE, ChargeStatus.CANCELLED])
def test_reversing_a_payment_clears_payment_fields(target):
    fields = transition_fields(ChargeStatus.PAID, target, AMOUNT, NOW)

    assert fields["status"] == target
    assert fields["paid_at"] is None
    assert fields["paid_amount"] is None


@pytest.mark.parametrize(
    "current, target",
    [
        (ChargeStatus.CANCELLED, ChargeStatus.PAID),
        (ChargeStatus.CANCELLED, ChargeStatus.OVERDUE),
        (ChargeStatus.PENDING, ChargeStatus.PENDING),
        (ChargeStatus.PAID, ChargeStatus.PAID),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidStatusTransition):
        transition_fields(current, target, AMOUNT, NOW)


def test_paid_implies_paid_at_for_every_allowed_transition():
    from bpay.services.charge_status import ALLOWED_TRANSITIONS

    for current, targets in ALLOWED_TRANSITIONS.items():
        for target in targets:
            fields = transition_fields(current, target, AMOUNT, NOW)
            if target == ChargeStatus.PAID:
                assert fields["paid_at"] is not None
            else:
                assert fields["paid_at"] is None and fields["paid_amount"] is None


def test_confirm_payment():
    fields = confirm_payment_fields(ChargeStatus.OVERDUE, AMOUNT, NOW)
    assert fields["status"] == ChargeStatus.PAID
    assert fields["paid_amount"] == AMOUNT

    with pytest.raises(ChargeAlreadyPaid):
        confirm_payment_fields(ChargeStatus.PAID, AMOUNT, NOW)


@pytest.mark.parametrize("current", [ChargeStatus.PENDING, ChargeStatus.OVERDUE, ChargeStatus.CANCELLED])
def test_confirm_payment_records_any_unpaid_charge(current):
    fields = confirm_payment_fields(current, Decimal("450"), NOW)

    assert fields == {
        "status": ChargeStatus.PAID,
        "paid_amount": Decimal("450.00"),
        "paid_at": NOW,
        "updated_at": NOW,
    }
