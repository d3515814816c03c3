from fastapi import APIRouter
from typing import Any, Dict, List

from bpay.services.dashboard import get_dashboard_metrics, get_monthly_receipts

router = APIRouter()


@router.get("/metrics")
async def dashboard_metrics(campus_name: str | None = None) -> Dict[str, Any]:
    """Receivables overview: totals by status, payments today, last 30 days of receipts."""
    return await get_dashboard_metrics(campus_name or None)


@router.get("/monthly-receipts")
async def monthly_receipts(campus_name: str | None = None) -> List[Dict[str, Any]]:
    return await get_monthly_receipts(campus_name or None)
