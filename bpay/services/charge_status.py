"""Charge status transitions and payment fields."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from bpay.models.charge import ChargeStatus
from bpay.models.money import quantize_money

ALLOWED_TRANSITIONS: dict[ChargeStatus, set[ChargeStatus]] = {
    ChargeStatus.PENDING: {ChargeStatus.PAID, ChargeStatus.OVERDUE, ChargeStatus.CANCELLED},
    ChargeStatus.OVERDUE: {ChargeStatus.PAID, ChargeStatus.CANCELLED, ChargeStatus.PENDING},
    # corrective reversal of a confirmed payment
    ChargeStatus.PAID: {ChargeStatus.PENDING, ChargeStatus.OVERDUE, ChargeStatus.CANCELLED},
    ChargeStatus.CANCELLED: {ChargeStatus.PENDING},
}


class InvalidStatusTransition(ValueError):
    def __init__(self, current: ChargeStatus, target: ChargeStatus):
        super().__init__(f"Cannot change charge status from {current.value} to {target.value}")
        self.current = current
        self.target = target


class ChargeAlreadyPaid(ValueError):
    pass


def transition_fields(
    current: ChargeStatus,
    target: ChargeStatus,
    amount: Decimal,
    now: datetime,
    paid_amount: Optional[Decimal] = None,
    paid_at: Optional[datetime] = None,
) -> dict:
    """Fields to write for current -> target.

    Entering paid always sets paid_amount (default: the charge amount) and
    paid_at (default: now); any other target clears both.
    """
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransition(current, target)
    if target == ChargeStatus.PAID:
        return {
            "status": target,
            "paid_amount": quantize_money(paid_amount if paid_amount is not None else amount),
            "paid_at": paid_at or now,
            "updated_at": now,
        }
    return {"status": target, "paid_amount": None, "paid_at": None, "updated_at": now}


def confirm_payment_fields(current: ChargeStatus, amount: Decimal, now: datetime) -> dict:
    """Simulated PIX confirmation: pays the full amount now.

    A received payment is recorded whatever the charge status, cancelled
    included; only a second confirmation of a paid charge is refused.
    """
    if current == ChargeStatus.PAID:
        raise ChargeAlreadyPaid("Charge already paid")
    return {
        "status": ChargeStatus.PAID,
        "paid_amount": quantize_money(amount),
        "paid_at": now,
        "updated_at": now,
    }
