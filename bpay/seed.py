"""Seed demo campuses and students when the directory is empty."""
import logging
from decimal import Decimal

from bpay.models.campus import Campus
from bpay.models.student import Student

logger = logging.getLogger(__name__)

DEMO_CAMPUSES = [
    {"name": "Bonfim", "city": "Salvador", "neighborhood": "Bonfim"},
    {"name": "Villas do Atlântico", "city": "Lauro de Freitas", "neighborhood": "Vilas do Atlântico"},
]

# (name, email, phone, campus index, monthly fee, due day)
DEMO_STUDENTS = [
    ("Ana Paula Silva", "ana.silva@email.com", "(11) 98765-4321", 0, "899.00", 10),
    ("Carlos Eduardo Santos", "carlos.santos@email.com", "(21) 97654-3210", 1, "1099.00", 15),
    ("Mariana Costa", "mariana.costa@email.com", "(31) 96543-2109", 0, "799.00", 5),
    ("Pedro Henrique Oliveira", "pedro.oliveira@email.com", "(41) 95432-1098", 1, "1299.00", 20),
    ("Juliana Ferreira", "juliana.ferreira@email.com", "(51) 94321-0987", 0, "450.00", 31),
]


async def seed_demo_data():
    if await Student.find_all().count():
        return
    campuses = []
    for data in DEMO_CAMPUSES:
        campus = await Campus.find_one(Campus.name == data["name"])
        if not campus:
            campus = Campus(**data)
            await campus.insert()
        campuses.append(campus)
    for name, email, phone, idx, fee, due_day in DEMO_STUDENTS:
        await Student(
            name=name,
            email=email,
            phone=phone,
            campus_id=str(campuses[idx].id),
            campus_name=campuses[idx].name,
            monthly_fee=Decimal(fee),
            due_day=due_day,
        ).insert()
    logger.info("Seeded %d demo students", len(DEMO_STUDENTS))
