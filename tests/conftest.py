import asyncio
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from bpay.models.charge import ChargeDraft, ChargeStatus
from bpay.models.generation_log import GenerationLogCreate, GenerationLogOut
from bpay.models.student import BillableStudent
from bpay.services.recurrence import MonthLocks, RecurrenceGenerator


class FakeBillingStore:
    """In-memory BillingStore enforcing one charge per student and month."""

    def __init__(self):
        self.students: list[BillableStudent] = []
        self.inactive: set[str] = set()
        self.charges: list[ChargeDraft] = []
        self.logs: list[GenerationLogOut] = []
        self._clock = datetime(2025, 1, 1)

    def add_student(self, id, fee="450.00", due_day=10, active=True, name=None, campus="Bonfim"):
        student = BillableStudent(
            id=id,
            name=name or f"Student {id}",
            campus_name=campus,
            monthly_fee=Decimal(fee),
            due_day=due_day,
        )
        self.students.append(student)
        if not active:
            self.inactive.add(id)
        return student

    def add_charge(self, student_id, due_date, status=ChargeStatus.PENDING):
        self.charges.append(
            ChargeDraft(
                student_id=student_id,
                student_name=f"Student {student_id}",
                campus_name="Bonfim",
                amount=Decimal("100.00"),
                due_date=due_date,
                billing_month=f"{due_date.year}-{due_date.month:02d}",
                status=status,
                pix_qr_code="qr",
                pix_copy_paste="qr",
                pix_payment_link="link",
            )
        )

    def charges_for(self, month: str) -> list[ChargeDraft]:
        return [c for c in self.charges if c.billing_month == month]

    async def list_active_students(self, due_day: Optional[int] = None) -> list[BillableStudent]:
        await asyncio.sleep(0)
        return [
            s for s in self.students
            if s.id not in self.inactive and (due_day is None or s.due_day == due_day)
        ]

    async def covered_student_ids(self, start, end) -> set[str]:
        await asyncio.sleep(0)
        return {c.student_id for c in self.charges if start <= c.due_date <= end}

    async def insert_charges(self, drafts):
        await asyncio.sleep(0)
        taken = {(c.student_id, c.billing_month) for c in self.charges}
        duplicates = []
        for d in drafts:
            key = (d.student_id, d.billing_month)
            if key in taken:
                duplicates.append(d.student_id)
                continue
            taken.add(key)
            self.charges.append(d)
        return duplicates

    async def insert_generation_log(self, entry: GenerationLogCreate) -> GenerationLogOut:
        self._clock += timedelta(seconds=1)
        log = GenerationLogOut(id=str(len(self.logs) + 1), executed_at=self._clock, **entry.model_dump())
        self.logs.append(log)
        return log

    async def list_generation_logs(self, limit: int):
        return sorted(self.logs, key=lambda log: log.executed_at, reverse=True)[:limit]


@pytest.fixture
def store():
    return FakeBillingStore()


@pytest.fixture
def clock():
    return lambda: datetime(2025, 2, 10, 9, 30)


@pytest.fixture
def generator(store, clock):
    return RecurrenceGenerator(store, locks=MonthLocks(), clock=clock)
