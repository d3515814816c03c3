"""Student <-> guardian relationships."""
from fastapi import APIRouter, HTTPException

from bpay.api.deps import parse_object_id
from bpay.api.guardians import guardian_out
from bpay.api.students import student_out
from bpay.models.guardian import Guardian, StudentGuardian, StudentGuardianCreate
from bpay.models.student import Student

router = APIRouter()


@router.get("/students/{student_id}/guardians")
async def list_student_guardians(student_id: str):
    links = await StudentGuardian.find(StudentGuardian.student_id == student_id).to_list()
    ids = [parse_object_id(link.guardian_id) for link in links]
    guardians = {str(g.id): g for g in await Guardian.find({"_id": {"$in": ids}}).to_list()}
    return [
        {**guardian_out(guardians[link.guardian_id]), "relationship": link.relationship, "relationship_id": str(link.id)}
        for link in links
        if link.guardian_id in guardians
    ]


@router.get("/guardians/{guardian_id}/students")
async def list_guardian_students(guardian_id: str):
    links = await StudentGuardian.find(StudentGuardian.guardian_id == guardian_id).to_list()
    ids = [parse_object_id(link.student_id) for link in links]
    students = {str(s.id): s for s in await Student.find({"_id": {"$in": ids}}).to_list()}
    return [
        {**student_out(students[link.student_id]), "relationship": link.relationship, "relationship_id": str(link.id)}
        for link in links
        if link.student_id in students
    ]


@router.post("/student-guardians", status_code=201)
async def associate(data: StudentGuardianCreate):
    existing = await StudentGuardian.find_one(
        StudentGuardian.student_id == data.student_id,
        StudentGuardian.guardian_id == data.guardian_id,
    )
    if existing:
        raise HTTPException(status_code=409, detail="Relationship already exists")
    link = StudentGuardian(**data.model_dump())
    await link.insert()
    return {
        "id": str(link.id),
        "student_id": link.student_id,
        "guardian_id": link.guardian_id,
        "relationship": link.relationship,
    }


@router.delete("/student-guardians/{link_id}", status_code=204)
async def dissociate(link_id: str):
    link = await StudentGuardian.get(parse_object_id(link_id, "Relationship"))
    if not link:
        raise HTTPException(status_code=404, detail="Relationship not found")
    await link.delete()
