"""Guardians (responsáveis) CRUD."""
from fastapi import APIRouter, HTTPException
from pymongo.errors import DuplicateKeyError

from bpay.api.deps import parse_object_id
from bpay.models.guardian import Guardian, GuardianCreate, GuardianUpdate, StudentGuardian

router = APIRouter()


def guardian_out(g: Guardian) -> dict:
    return {
        "id": str(g.id),
        "name": g.name,
        "cpf": g.cpf,
        "email": g.email,
        "phone": g.phone,
        "created_at": g.created_at.isoformat() if g.created_at else None,
    }


@router.get("/")
async def list_guardians():
    guardians = await Guardian.find_all().sort("name").to_list()
    return [guardian_out(g) for g in guardians]


@router.post("/", status_code=201)
async def create_guardian(data: GuardianCreate):
    g = Guardian(**data.model_dump())
    try:
        await g.insert()
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="A guardian with this CPF already exists")
    return guardian_out(g)


@router.get("/{guardian_id}")
async def get_guardian(guardian_id: str):
    g = await Guardian.get(parse_object_id(guardian_id, "Guardian"))
    if not g:
        raise HTTPException(status_code=404, detail="Guardian not found")
    return guardian_out(g)


@router.patch("/{guardian_id}")
async def update_guardian(guardian_id: str, data: GuardianUpdate):
    update = data.model_dump(exclude_unset=True, exclude_none=True)
    if not update:
        raise HTTPException(status_code=400, detail="At least one field must be provided")
    g = await Guardian.get(parse_object_id(guardian_id, "Guardian"))
    if not g:
        raise HTTPException(status_code=404, detail="Guardian not found")
    for key, value in update.items():
        setattr(g, key, value)
    try:
        await g.save()
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="A guardian with this CPF already exists")
    return guardian_out(g)


@router.delete("/{guardian_id}", status_code=204)
async def delete_guardian(guardian_id: str):
    """Delete a guardian after removing its student links."""
    g = await Guardian.get(parse_object_id(guardian_id, "Guardian"))
    if not g:
        raise HTTPException(status_code=404, detail="Guardian not found")
    await StudentGuardian.find(StudentGuardian.guardian_id == guardian_id).delete()
    await g.delete()
