"""Receivables metrics for the admin dashboard."""
import asyncio
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Optional

from bson.decimal128 import Decimal128

from bpay.models.charge import Charge, ChargeStatus
from bpay.services.dates import format_month, now_local, shift_month

RECEIVED_AMOUNT = {"$ifNull": ["$paid_amount", "$amount"]}


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return Decimal(str(value))


def fill_daily_series(totals: dict[str, Decimal], today: date, days: int = 30) -> list[dict]:
    """One entry per day ending today, oldest first; missing days are zero."""
    series = []
    for i in range(days - 1, -1, -1):
        day = (today - timedelta(days=i)).isoformat()
        series.append({"date": day, "amount": float(totals.get(day, Decimal("0")))})
    return series


def fill_monthly_series(rows: dict[str, tuple[Decimal, int]], today: date, months: int = 12) -> list[dict]:
    series = []
    for i in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -i)
        key = format_month(year, month)
        total, count = rows.get(key, (Decimal("0"), 0))
        series.append({"month": key, "total": float(total), "count": count})
    return series


def _match(campus_name: Optional[str], **conditions) -> dict:
    query = dict(conditions)
    if campus_name:
        query["campus_name"] = campus_name
    return query


async def _sum(match: dict, expr: Any = "$amount") -> Decimal:
    rows = await Charge.aggregate(
        [{"$match": match}, {"$group": {"_id": None, "total": {"$sum": expr}}}]
    ).to_list()
    return to_decimal(rows[0]["total"]) if rows else Decimal("0")


async def _grouped(match: dict, key: Any, expr: Any = RECEIVED_AMOUNT) -> list[dict]:
    return await Charge.aggregate(
        [
            {"$match": match},
            {"$group": {"_id": key, "total": {"$sum": expr}, "count": {"$sum": 1}}},
        ]
    ).to_list()


async def get_dashboard_metrics(campus_name: Optional[str] = None, now: Optional[datetime] = None) -> dict:
    now = now or now_local()
    today_start = datetime.combine(now.date(), time.min)
    tomorrow = today_start + timedelta(days=1)
    window_start = today_start - timedelta(days=29)

    billed, received, pending, overdue, paid_today, daily_rows, status_rows = await asyncio.gather(
        _sum(_match(campus_name)),
        _sum(_match(campus_name, status=ChargeStatus.PAID.value), RECEIVED_AMOUNT),
        _sum(_match(campus_name, status=ChargeStatus.PENDING.value)),
        _sum(_match(campus_name, status=ChargeStatus.OVERDUE.value)),
        Charge.find(_match(campus_name, paid_at={"$gte": today_start, "$lt": tomorrow})).count(),
        _grouped(
            _match(campus_name, status=ChargeStatus.PAID.value, paid_at={"$gte": window_start}),
            {"$dateToString": {"format": "%Y-%m-%d", "date": "$paid_at"}},
        ),
        _grouped(_match(campus_name), "$status", 1),
    )

    daily = {row["_id"]: to_decimal(row["total"]) for row in daily_rows if row["_id"]}
    counts = {row["_id"]: row["count"] for row in status_rows}
    return {
        "total_billed": float(billed),
        "total_received": float(received),
        "total_pending": float(pending),
        "total_overdue": float(overdue),
        "payments_today": paid_today,
        "daily_receipts": fill_daily_series(daily, now.date()),
        "default_rate": {
            "paid": counts.get(ChargeStatus.PAID.value, 0),
            "overdue": counts.get(ChargeStatus.OVERDUE.value, 0),
            "pending": counts.get(ChargeStatus.PENDING.value, 0),
        },
    }


async def get_monthly_receipts(campus_name: Optional[str] = None, now: Optional[datetime] = None) -> list[dict]:
    now = now or now_local()
    year, month = shift_month(now.year, now.month, -11)
    start = datetime(year, month, 1)
    rows = await _grouped(
        _match(campus_name, status=ChargeStatus.PAID.value, paid_at={"$gte": start}),
        {"$dateToString": {"format": "%Y-%m", "date": "$paid_at"}},
    )
    by_month = {row["_id"]: (to_decimal(row["total"]), row["count"]) for row in rows if row["_id"]}
    return fill_monthly_series(by_month, now.date())
