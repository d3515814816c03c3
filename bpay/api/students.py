"""Student CRUD and bulk deletion."""
import logging

from fastapi import APIRouter, HTTPException

from bpay.api.deps import parse_object_id
from bpay.models.charge import Charge
from bpay.models.guardian import Guardian, StudentGuardian
from bpay.models.money import quantize_money
from bpay.models.student import BulkDeleteStudents, Student, StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def student_out(s: Student) -> dict:
    return {
        "id": str(s.id),
        "name": s.name,
        "email": s.email,
        "phone": s.phone,
        "campus_id": s.campus_id,
        "campus_name": s.campus_name,
        "monthly_fee": str(s.monthly_fee),
        "due_day": s.due_day,
        "status": s.status.value,
        "created_at": s.created_at.isoformat() if s.created_at else None,
    }


@router.get("/")
async def list_students():
    students = await Student.find_all().sort("name").to_list()
    return [student_out(s) for s in students]


@router.post("/", status_code=201)
async def create_student(data: StudentCreate):
    s = Student(**data.model_dump(exclude={"guardian"}))
    await s.insert()

    if data.guardian:
        g = data.guardian
        guardian = await Guardian.find_one(Guardian.cpf == g.cpf)
        if not guardian:
            guardian = Guardian(name=g.name, cpf=g.cpf, email=g.email, phone=g.phone)
            await guardian.insert()
        await StudentGuardian(
            student_id=str(s.id),
            guardian_id=str(guardian.id),
            relationship=g.relationship,
        ).insert()
    return student_out(s)


@router.post("/bulk-delete")
async def bulk_delete_students(data: BulkDeleteStudents):
    """Delete students together with their charges and guardian links."""
    ids = [parse_object_id(i, "Student") for i in data.ids]
    str_ids = [str(i) for i in ids]
    await Charge.find({"student_id": {"$in": str_ids}}).delete()
    await StudentGuardian.find({"student_id": {"$in": str_ids}}).delete()
    await Student.find({"_id": {"$in": ids}}).delete()
    logger.info("Deleted %d students with their charges", len(ids))
    return {"success": True, "message": "Estudantes excluídos com sucesso"}


@router.get("/{student_id}")
async def get_student(student_id: str):
    s = await Student.get(parse_object_id(student_id, "Student"))
    if not s:
        raise HTTPException(status_code=404, detail="Student not found")
    return student_out(s)


@router.patch("/{student_id}")
async def update_student(student_id: str, data: StudentUpdate):
    s = await Student.get(parse_object_id(student_id, "Student"))
    if not s:
        raise HTTPException(status_code=404, detail="Student not found")
    update = data.model_dump(exclude_unset=True)
    if update.get("monthly_fee") is not None:
        update["monthly_fee"] = quantize_money(update["monthly_fee"])
    for key, value in update.items():
        if value is None:
            continue
        setattr(s, key, value)
    await s.save()
    return student_out(s)

