"""MongoDB connection and Beanie document registration."""
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from bpay.config import settings
from bpay.models import (
    Campus,
    Student,
    Guardian,
    StudentGuardian,
    Charge,
    ChargeGenerationLog,
    SystemSetting,
)


_client = None


async def db_startup():
    """Connect to MongoDB and initialize Beanie ODM (creates indexes)."""
    global _client
    _client = AsyncIOMotorClient(settings.mongodb_url)
    await init_beanie(
        database=_client[settings.mongodb_db_name],
        document_models=[
            Campus,
            Student,
            Guardian,
            StudentGuardian,
            Charge,
            ChargeGenerationLog,
            SystemSetting,
        ],
    )


async def db_shutdown():
    """Close MongoDB connection."""
    global _client
    if _client:
        _client.close()
        _client = None
