"""Monthly charges with synthetic PIX payment data."""
from datetime import date, datetime
from enum import Enum
from typing import Optional

import pymongo
from beanie import Document, Indexed
from pydantic import BaseModel, Field, field_validator

from bpay.models.money import Money, MoneyInput
from bpay.services.dates import now_local, to_local_naive


class ChargeStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Charge(Document):
    """One billing obligation for one student; at most one per student and month."""

    student_id: Indexed(str)
    student_name: Indexed(str)
    campus_name: Indexed(str)
    amount: Money  # snapshot of the student's monthly fee
    due_date: Indexed(datetime)  # local midnight
    billing_month: str  # "YYYY-MM" of due_date
    status: ChargeStatus = ChargeStatus.PENDING
    pix_qr_code: str
    pix_copy_paste: str
    pix_payment_link: str
    paid_at: Optional[datetime] = None
    paid_amount: Optional[Money] = None
    created_at: datetime = Field(default_factory=now_local)
    updated_at: datetime = Field(default_factory=now_local)

    class Settings:
        name = "charges"
        use_state_management = True
        indexes = [
            "status",
            pymongo.IndexModel(
                [("student_id", pymongo.ASCENDING), ("billing_month", pymongo.ASCENDING)],
                name="student_month_unique",
                unique=True,
            ),
        ]


class ChargeDraft(BaseModel):
    """A charge built in memory, not yet persisted."""
    student_id: str
    student_name: str
    campus_name: str
    amount: Money
    due_date: datetime
    billing_month: str
    status: ChargeStatus = ChargeStatus.PENDING
    pix_qr_code: str
    pix_copy_paste: str
    pix_payment_link: str


class ChargeCreate(BaseModel):
    """Manual charge creation; PIX data is always synthesized server-side."""
    student_id: str
    student_name: str = Field(min_length=1)
    campus_name: str = Field(min_length=1)
    amount: MoneyInput
    due_date: date
    status: ChargeStatus = ChargeStatus.PENDING


class ChargeStatusUpdate(BaseModel):
    status: ChargeStatus
    paid_amount: Optional[MoneyInput] = None
    paid_at: Optional[datetime] = None

    @field_validator("paid_at")
    @classmethod
    def paid_at_local(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(v) if v is not None else v


class PaymentWebhookBody(BaseModel):
    charge_id: str = Field(min_length=1)
