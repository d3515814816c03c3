"""Audit history of recurring charge generation."""
from fastapi import APIRouter, Query

from bpay.api.deps import Generator
from bpay.config import settings

router = APIRouter()


@router.get("/")
async def list_generation_logs(generator: Generator, limit: int | None = Query(None, ge=1, le=500)):
    """Most recent first."""
    return await generator.get_generation_logs(limit or settings.generation_log_limit)
