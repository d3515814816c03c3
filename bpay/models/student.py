"""Student directory: monthly fee and due day drive recurring billing."""
from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, EmailStr, Field, model_validator

from bpay.models.money import Money, MoneyInput
from bpay.services.dates import now_local


class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Student(Document):
    """Student document: campus (id + denormalized name), fee, due day."""

    name: Indexed(str)
    email: str
    phone: str
    campus_id: str
    campus_name: str
    monthly_fee: Money
    due_day: int = Field(ge=1, le=31)
    status: StudentStatus = StudentStatus.ACTIVE
    created_at: datetime = Field(default_factory=now_local)

    class Settings:
        name = "students"
        use_state_management = True
        indexes = ["status", "due_day"]


class InlineGuardian(BaseModel):
    """Guardian supplied together with a new student; reused when the CPF exists."""
    name: str = Field(min_length=1)
    relationship: str = Field(min_length=1)
    cpf: str = Field(pattern=r"^\d{11}$|^\d{3}\.\d{3}\.\d{3}-\d{2}$")
    phone: str = Field(min_length=10)
    email: EmailStr

    @model_validator(mode="after")
    def strip_cpf_punctuation(self):
        self.cpf = "".join(ch for ch in self.cpf if ch.isdigit())
        return self


class StudentCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=10)
    campus_id: str
    campus_name: str
    monthly_fee: MoneyInput
    due_day: int = Field(ge=1, le=31)
    status: StudentStatus = StudentStatus.ACTIVE
    guardian: Optional[InlineGuardian] = None


class StudentUpdate(BaseModel):
    """All fields optional for PATCH; campus_id and campus_name travel together."""
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, min_length=10)
    campus_id: Optional[str] = None
    campus_name: Optional[str] = Field(default=None, min_length=1)
    monthly_fee: Optional[MoneyInput] = None
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    status: Optional[StudentStatus] = None

    @model_validator(mode="after")
    def check_campus_pair(self):
        if bool(self.campus_id) != bool(self.campus_name):
            raise ValueError("campus_id and campus_name must be updated together")
        return self


class BulkDeleteStudents(BaseModel):
    ids: list[str]


class BillableStudent(BaseModel):
    """What the recurrence generator needs to know about an active student."""
    id: str
    name: str
    campus_name: str
    monthly_fee: Money
    due_day: int
