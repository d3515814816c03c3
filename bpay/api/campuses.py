"""Campuses (sedes)."""
from fastapi import APIRouter

from bpay.models.campus import Campus, CampusCreate

router = APIRouter()


def campus_out(c: Campus) -> dict:
    return {"id": str(c.id), "name": c.name, "city": c.city, "neighborhood": c.neighborhood}


@router.get("/")
async def list_campuses():
    campuses = await Campus.find_all().sort("name").to_list()
    return [campus_out(c) for c in campuses]


@router.post("/", status_code=201)
async def create_campus(data: CampusCreate):
    c = Campus(name=data.name.strip(), city=data.city.strip(), neighborhood=data.neighborhood.strip())
    await c.insert()
    return campus_out(c)
