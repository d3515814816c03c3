"""Recurring monthly charge generation.

One charge per active student per calendar month. A student counts as already
covered when any charge (whatever its status, cancelled included) is due inside
the target month, so re-running a month never bills twice. Runs for the same
month are serialized in-process by a per-month lock; across processes the
unique (student_id, billing_month) index on charges rejects the duplicate and
the rejected student is reported in the run's errors.
"""
import asyncio
import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, Optional

from bpay.models.charge import ChargeDraft, ChargeStatus
from bpay.models.generation_log import (
    GenerationDetails,
    GenerationLogCreate,
    GenerationLogOut,
    GenerationResult,
    ResultDetails,
    TriggerType,
)
from bpay.models.student import BillableStudent
from bpay.services.dates import due_date_for, format_month, month_window, now_local, parse_target_month
from bpay.services.pix import build_pix_payload, new_charge_token
from bpay.services.store import BillingStore

logger = logging.getLogger(__name__)


class MonthLocks:
    """asyncio.Lock per target month, shared by every generator of the process."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def for_month(self, target_month: str) -> asyncio.Lock:
        return self._locks[target_month]


class RecurrenceGenerator:
    def __init__(
        self,
        store: BillingStore,
        locks: Optional[MonthLocks] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self.store = store
        self.locks = locks or MonthLocks()
        self.clock = clock

    def build_draft(self, student: BillableStudent, year: int, month: int) -> ChargeDraft:
        due_date = due_date_for(student.due_day, year, month)
        pix = build_pix_payload(new_charge_token(), student.monthly_fee)
        return ChargeDraft(
            student_id=student.id,
            student_name=student.name,
            campus_name=student.campus_name,
            amount=student.monthly_fee,
            due_date=due_date,
            billing_month=format_month(year, month),
            status=ChargeStatus.PENDING,
            pix_qr_code=pix.qr_code,
            pix_copy_paste=pix.copy_paste,
            pix_payment_link=pix.payment_link,
        )

    async def generate(
        self,
        target_month: Optional[str] = None,
        *,
        trigger_type: TriggerType,
        executed_by: str,
    ) -> GenerationResult:
        if target_month:
            year, month = parse_target_month(target_month)
        else:
            now = self.clock()
            year, month = now.year, now.month
        month_str = format_month(year, month)

        async with self.locks.for_month(month_str):
            return await self._generate_locked(year, month, month_str, trigger_type, executed_by)

    async def _generate_locked(
        self,
        year: int,
        month: int,
        month_str: str,
        trigger_type: TriggerType,
        executed_by: str,
    ) -> GenerationResult:
        start, end = month_window(year, month)
        active = await self.store.list_active_students()
        covered = await self.store.covered_student_ids(start, end)
        candidates = [s for s in active if s.id not in covered]

        drafts: list[ChargeDraft] = []
        errors: list[str] = []
        for student in candidates:
            try:
                drafts.append(self.build_draft(student, year, month))
            except Exception as e:
                logger.warning("Could not build charge for student %s (%s): %s", student.name, student.id, e)
                errors.append(f"Error processing student {student.name} ({student.id}): {e}")

        duplicates: list[str] = []
        if drafts:
            duplicates = await self.store.insert_charges(drafts)
        for student_id in duplicates:
            errors.append(f"Student {student_id} already has a charge for {month_str}")
        rejected = set(duplicates)
        created_ids = [d.student_id for d in drafts if d.student_id not in rejected]

        await self.store.insert_generation_log(
            GenerationLogCreate(
                trigger_type=trigger_type,
                charges_created=len(created_ids),
                target_month=month_str,
                executed_by=executed_by,
                details=GenerationDetails(
                    student_ids=created_ids,
                    errors=errors,
                    total_active_students=len(active),
                    already_had_charges=len(covered),
                ),
            )
        )
        logger.info(
            "Recurring generation %s (%s by %s): %d created, %d already covered, %d errors",
            month_str,
            trigger_type.value,
            executed_by,
            len(created_ids),
            len(covered),
            len(errors),
        )
        return GenerationResult(
            charges_created=len(created_ids),
            target_month=month_str,
            details=ResultDetails(student_ids=created_ids, errors=errors),
        )

    async def check_and_generate_today(self) -> Optional[GenerationResult]:
        """Generate the current month only when some active student is due today; no log otherwise."""
        today = self.clock()
        due_today = await self.store.list_active_students(due_day=today.day)
        if not due_today:
            logger.debug("No active student due on day %d, skipping generation", today.day)
            return None
        return await self.generate(
            format_month(today.year, today.month),
            trigger_type=TriggerType.AUTOMATIC,
            executed_by="system",
        )

    async def get_generation_logs(self, limit: int = 50) -> list[GenerationLogOut]:
        return await self.store.list_generation_logs(limit)
