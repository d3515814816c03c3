"""Beanie document models and Pydantic schemas."""
from bpay.models.campus import Campus, CampusCreate
from bpay.models.student import Student, StudentCreate, StudentUpdate, StudentStatus, BillableStudent
from bpay.models.guardian import Guardian, GuardianCreate, GuardianUpdate, StudentGuardian, StudentGuardianCreate
from bpay.models.charge import Charge, ChargeCreate, ChargeDraft, ChargeStatus, ChargeStatusUpdate
from bpay.models.generation_log import (
    ChargeGenerationLog,
    GenerationDetails,
    GenerationLogCreate,
    GenerationLogOut,
    GenerationResult,
    TriggerType,
)
from bpay.models.settings import SystemSetting, SettingsUpdate

__all__ = [
    "Campus",
    "CampusCreate",
    "Student",
    "StudentCreate",
    "StudentUpdate",
    "StudentStatus",
    "BillableStudent",
    "Guardian",
    "GuardianCreate",
    "GuardianUpdate",
    "StudentGuardian",
    "StudentGuardianCreate",
    "Charge",
    "ChargeCreate",
    "ChargeDraft",
    "ChargeStatus",
    "ChargeStatusUpdate",
    "ChargeGenerationLog",
    "GenerationDetails",
    "GenerationLogCreate",
    "GenerationLogOut",
    "GenerationResult",
    "TriggerType",
    "SystemSetting",
    "SettingsUpdate",
]
