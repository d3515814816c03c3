"""Audit trail of recurring charge generation runs."""
import re
from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field, field_validator

from bpay.services.dates import now_local

TARGET_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


class TriggerType(str, Enum):
    MANUAL = "manual"
    AUTOMATIC = "automatic"


class GenerationDetails(BaseModel):
    student_ids: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    total_active_students: int = 0
    already_had_charges: int = 0


class GenerationLogCreate(BaseModel):
    trigger_type: TriggerType
    charges_created: int
    target_month: str
    executed_by: str
    details: GenerationDetails


class GenerationLogOut(GenerationLogCreate):
    id: str
    executed_at: datetime


class ChargeGenerationLog(Document):
    """One row per generator invocation; never updated."""

    executed_at: Indexed(datetime) = Field(default_factory=now_local)
    trigger_type: TriggerType
    charges_created: int
    target_month: str
    executed_by: Optional[str] = None
    details: GenerationDetails = Field(default_factory=GenerationDetails)

    class Settings:
        name = "charge_generation_logs"


class ResultDetails(BaseModel):
    student_ids: list[str]
    errors: list[str]


class GenerationResult(BaseModel):
    charges_created: int
    target_month: str
    details: ResultDetails


class GenerateRecurringBody(BaseModel):
    target_month: str

    @field_validator("target_month")
    @classmethod
    def check_target_month(cls, v: str) -> str:
        if not TARGET_MONTH_RE.match(v):
            raise ValueError("Format must be YYYY-MM")
        if not 1 <= int(v[5:]) <= 12:
            raise ValueError("Month must be between 01 and 12")
        return v
