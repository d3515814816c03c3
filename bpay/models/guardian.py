"""Guardians (responsáveis) and their N:N links to students."""
import re
from datetime import datetime
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, EmailStr, Field, field_validator

from bpay.services.dates import now_local


def is_valid_cpf(cpf: str) -> bool:
    """Check a Brazilian CPF (punctuation ignored) against its two check digits."""
    digits = re.sub(r"\D", "", cpf)
    if len(digits) != 11:
        return False
    if digits == digits[0] * 11:
        return False
    for size in (9, 10):
        total = sum(int(d) * (size + 1 - i) for i, d in enumerate(digits[:size]))
        check = (total * 10) % 11
        if check == 10:
            check = 0
        if check != int(digits[size]):
            return False
    return True


def _normalize_cpf(v: str) -> str:
    if not is_valid_cpf(v):
        raise ValueError("CPF inválido")
    return re.sub(r"\D", "", v)


class Guardian(Document):
    name: Indexed(str)
    cpf: Indexed(str, unique=True)  # 11 digits, no punctuation
    email: str
    phone: str
    created_at: datetime = Field(default_factory=now_local)

    class Settings:
        name = "guardians"
        use_state_management = True


class StudentGuardian(Document):
    """Link between a student and a guardian with the relationship label (Mãe, Pai...)."""

    student_id: Indexed(str)
    guardian_id: Indexed(str)
    relationship: str
    created_at: datetime = Field(default_factory=now_local)

    class Settings:
        name = "student_guardians"


class GuardianCreate(BaseModel):
    name: str = Field(min_length=1)
    cpf: str
    email: EmailStr
    phone: str = Field(min_length=10)

    @field_validator("cpf")
    @classmethod
    def check_cpf(cls, v: str) -> str:
        return _normalize_cpf(v)


class GuardianUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    cpf: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, min_length=10)

    @field_validator("cpf")
    @classmethod
    def check_cpf(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_cpf(v) if v is not None else v


class StudentGuardianCreate(BaseModel):
    student_id: str
    guardian_id: str
    relationship: str = Field(min_length=1)
