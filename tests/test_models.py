from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from bpay.config import settings
from bpay.models.charge import ChargeStatus, ChargeStatusUpdate
from bpay.models.generation_log import GenerateRecurringBody
from bpay.models.guardian import GuardianCreate, GuardianUpdate, is_valid_cpf
from bpay.models.student import BillableStudent, InlineGuardian, StudentCreate, StudentUpdate


@pytest.mark.parametrize("value", ["2025-02", "1999-12", "2030-01"])
def test_target_month_accepts(value):
    assert GenerateRecurringBody(target_month=value).target_month == value


@pytest.mark.parametrize("value", ["2025-2", "2025/02", "202502", "2025-13", "2025-00", "abcd-ef", ""])
def test_target_month_rejects(value):
    with pytest.raises(ValidationError):
        GenerateRecurringBody(target_month=value)


def test_cpf_check_digits():
    assert is_valid_cpf("529.982.247-25")
    assert is_valid_cpf("52998224725")
    assert not is_valid_cpf("52998224724")
    assert not is_valid_cpf("111.111.111-11")
    assert not is_valid_cpf("1234")


def test_guardian_cpf_is_stored_as_digits():
    g = GuardianCreate(name="Maria", cpf="529.982.247-25", email="maria@email.com", phone="71999998888")
    assert g.cpf == "52998224725"
    with pytest.raises(ValidationError):
        GuardianCreate(name="Maria", cpf="529.982.247-24", email="maria@email.com", phone="71999998888")
    assert GuardianUpdate(phone="71999998888").cpf is None


def test_inline_guardian_strips_punctuation():
    g = InlineGuardian(name="João", relationship="Pai", cpf="529.982.247-25", phone="71999998888", email="j@e.com")
    assert g.cpf == "52998224725"


def _student(**overrides):
    data = dict(
        name="Ana",
        email="ana@email.com",
        phone="71999998888",
        campus_id="c1",
        campus_name="Bonfim",
        monthly_fee="450.00",
        due_day=10,
    )
    data.update(overrides)
    return StudentCreate(**data)


def test_student_validation():
    assert _student().monthly_fee == Decimal("450.00")
    for bad in ({"due_day": 0}, {"due_day": 32}, {"monthly_fee": "45.001"}, {"phone": "123"}, {"email": "x"}):
        with pytest.raises(ValidationError):
            _student(**bad)


def test_student_update_requires_campus_pair():
    with pytest.raises(ValidationError):
        StudentUpdate(campus_id="c2")
    assert StudentUpdate(campus_id="c2", campus_name="Villas").campus_name == "Villas"
    assert StudentUpdate(due_day=5).campus_id is None


def test_money_is_quantized_to_cents():
    s = BillableStudent(id="s", name="n", campus_name="c", monthly_fee="450", due_day=1)
    assert s.monthly_fee == Decimal("450.00")
    assert str(s.monthly_fee) == "450.00"


def test_status_update_paid_at_is_stored_as_local_time(monkeypatch):
    monkeypatch.setattr(settings, "billing_timezone", "America/Sao_Paulo")

    aware = ChargeStatusUpdate.model_validate(
        {"status": "paid", "paid_at": "2025-02-10T12:00:00+00:00"}
    )
    naive = ChargeStatusUpdate(status=ChargeStatus.PAID, paid_at=datetime(2025, 2, 10, 12, 0))

    assert aware.paid_at == datetime(2025, 2, 10, 9, 0)
    assert aware.paid_at.tzinfo is None
    assert naive.paid_at == datetime(2025, 2, 10, 12, 0)
    assert ChargeStatusUpdate(status=ChargeStatus.PENDING).paid_at is None
