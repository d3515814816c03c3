"""Persistence port used by the recurrence generator, and its Beanie implementation."""
from datetime import datetime
from typing import Optional, Protocol

from pymongo.errors import BulkWriteError

from bpay.models.charge import Charge, ChargeDraft
from bpay.models.generation_log import ChargeGenerationLog, GenerationLogCreate, GenerationLogOut
from bpay.models.student import BillableStudent, Student, StudentStatus

DUPLICATE_KEY = 11000


class BillingStore(Protocol):
    async def list_active_students(self, due_day: Optional[int] = None) -> list[BillableStudent]:
        ...

    async def covered_student_ids(self, start: datetime, end: datetime) -> set[str]:
        """Students with a charge of any status due inside [start, end]."""
        ...

    async def insert_charges(self, drafts: list[ChargeDraft]) -> list[str]:
        """Bulk insert; returns the student ids rejected because they already have a charge that month."""
        ...

    async def insert_generation_log(self, entry: GenerationLogCreate) -> GenerationLogOut:
        ...

    async def list_generation_logs(self, limit: int) -> list[GenerationLogOut]:
        ...


def _to_billable(s: Student) -> BillableStudent:
    return BillableStudent(
        id=str(s.id),
        name=s.name,
        campus_name=s.campus_name,
        monthly_fee=s.monthly_fee,
        due_day=s.due_day,
    )


def _log_out(log: ChargeGenerationLog) -> GenerationLogOut:
    return GenerationLogOut(
        id=str(log.id),
        executed_at=log.executed_at,
        trigger_type=log.trigger_type,
        charges_created=log.charges_created,
        target_month=log.target_month,
        executed_by=log.executed_by or "",
        details=log.details,
    )


class BeanieBillingStore:
    """BillingStore over the Beanie collections; requires init_beanie to have run."""

    async def list_active_students(self, due_day: Optional[int] = None) -> list[BillableStudent]:
        query = {"status": StudentStatus.ACTIVE.value}
        if due_day is not None:
            query["due_day"] = due_day
        students = await Student.find(query).to_list()
        return [_to_billable(s) for s in students]

    async def covered_student_ids(self, start: datetime, end: datetime) -> set[str]:
        ids = await Charge.distinct("student_id", {"due_date": {"$gte": start, "$lte": end}})
        return set(ids)

    async def insert_charges(self, drafts: list[ChargeDraft]) -> list[str]:
        if not drafts:
            return []
        docs = [Charge(**d.model_dump()) for d in drafts]
        try:
            await Charge.insert_many(docs, ordered=False)
        except BulkWriteError as e:
            write_errors = e.details.get("writeErrors", [])
            if e.details.get("writeConcernErrors") or not write_errors:
                raise
            if any(err.get("code") != DUPLICATE_KEY for err in write_errors):
                raise
            return [drafts[err["index"]].student_id for err in write_errors]
        return []

    async def insert_generation_log(self, entry: GenerationLogCreate) -> GenerationLogOut:
        log = ChargeGenerationLog(**entry.model_dump())
        await log.insert()
        return _log_out(log)

    async def list_generation_logs(self, limit: int) -> list[GenerationLogOut]:
        logs = (
            await ChargeGenerationLog.find_all()
            .sort(-ChargeGenerationLog.executed_at)
            .limit(limit)
            .to_list()
        )
        return [_log_out(log) for log in logs]
