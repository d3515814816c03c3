"""Charges: listing, export, manual creation, status changes, recurring generation."""
from datetime import date, datetime, time
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from pymongo.errors import DuplicateKeyError

from bpay.api.deps import Generator, parse_object_id
from bpay.models.charge import Charge, ChargeCreate, ChargeStatus, ChargeStatusUpdate
from bpay.models.generation_log import GenerateRecurringBody, TriggerType
from bpay.services.charge_status import InvalidStatusTransition, transition_fields
from bpay.services.dates import format_month, now_local
from bpay.services.export import charges_dataframe, to_csv, to_xlsx
from bpay.services.pix import build_pix_payload, new_charge_token

router = APIRouter()


def charge_out(c: Charge) -> dict:
    return {
        "id": str(c.id),
        "student_id": c.student_id,
        "student_name": c.student_name,
        "campus_name": c.campus_name,
        "amount": str(c.amount),
        "due_date": c.due_date.date().isoformat(),
        "billing_month": c.billing_month,
        "status": c.status.value,
        "pix_qr_code": c.pix_qr_code,
        "pix_copy_paste": c.pix_copy_paste,
        "pix_payment_link": c.pix_payment_link,
        "paid_at": c.paid_at.isoformat() if c.paid_at else None,
        "paid_amount": str(c.paid_amount) if c.paid_amount is not None else None,
        "created_at": c.created_at.isoformat() if c.created_at else None,
        "updated_at": c.updated_at.isoformat() if c.updated_at else None,
    }


def build_charge_query(
    status: Optional[str] = None,
    student_name: Optional[str] = None,
    campus_name: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> dict:
    query: dict = {}
    if status and status != "all":
        query["status"] = status
    if student_name and student_name.strip():
        query["student_name"] = {"$regex": student_name.strip(), "$options": "i"}
    if campus_name and campus_name.strip():
        query["campus_name"] = {"$regex": campus_name.strip(), "$options": "i"}
    due: dict = {}
    if start_date:
        due["$gte"] = datetime.combine(start_date, time.min)
    if end_date:
        due["$lte"] = datetime.combine(end_date, time.max)
    if due:
        query["due_date"] = due
    return query


StatusFilter = Optional[Literal["all", "pending", "paid", "overdue", "cancelled"]]


async def _find_charges(status, student_name, campus_name, start_date, end_date) -> list[Charge]:
    query = build_charge_query(status, student_name, campus_name, start_date, end_date)
    return await Charge.find(query).sort("due_date").to_list()


@router.get("/")
async def list_charges(
    status: StatusFilter = None,
    student_name: str | None = Query(None, description="Case-insensitive partial match"),
    campus_name: str | None = Query(None, description="Case-insensitive partial match"),
    start_date: date | None = None,
    end_date: date | None = None,
):
    charges = await _find_charges(status, student_name, campus_name, start_date, end_date)
    return [charge_out(c) for c in charges]


@router.get("/export")
async def export_charges(
    format: Literal["csv", "xlsx"] = "csv",
    status: StatusFilter = None,
    student_name: str | None = None,
    campus_name: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
):
    """Same filters as the listing; CSV or Excel download."""
    charges = await _find_charges(status, student_name, campus_name, start_date, end_date)
    df = charges_dataframe(charges)
    stamp = now_local().strftime("%Y%m%d")
    if format == "csv":
        return Response(
            content=to_csv(df),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename=cobrancas_{stamp}.csv"},
        )
    return Response(
        content=to_xlsx(df),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=cobrancas_{stamp}.xlsx"},
    )


@router.post("/", status_code=201)
async def create_charge(data: ChargeCreate):
    due_date = datetime.combine(data.due_date, time.min)
    pix = build_pix_payload(new_charge_token(), data.amount)
    c = Charge(
        student_id=data.student_id,
        student_name=data.student_name,
        campus_name=data.campus_name,
        amount=data.amount,
        due_date=due_date,
        billing_month=format_month(due_date.year, due_date.month),
        status=data.status,
        pix_qr_code=pix.qr_code,
        pix_copy_paste=pix.copy_paste,
        pix_payment_link=pix.payment_link,
    )
    if c.status == ChargeStatus.PAID:
        c.paid_amount = c.amount
        c.paid_at = now_local()
    try:
        await c.insert()
    except DuplicateKeyError:
        raise HTTPException(
            status_code=409,
            detail=f"Student already has a charge for {c.billing_month}",
        )
    return charge_out(c)


@router.post("/generate-recurring")
async def generate_recurring(body: GenerateRecurringBody, generator: Generator):
    result = await generator.generate(
        body.target_month, trigger_type=TriggerType.MANUAL, executed_by="admin"
    )
    return {
        "success": True,
        "message": f"{result.charges_created} cobranças geradas para {result.target_month}",
        "data": result,
    }


@router.post("/check-today")
async def check_today(generator: Generator):
    """Run the daily due-day check now; null when no active student is due today."""
    return await generator.check_and_generate_today()


@router.get("/{charge_id}")
async def get_charge(charge_id: str):
    c = await Charge.get(parse_object_id(charge_id, "Charge"))
    if not c:
        raise HTTPException(status_code=404, detail="Charge not found")
    return charge_out(c)


@router.patch("/{charge_id}/status")
async def update_charge_status(charge_id: str, body: ChargeStatusUpdate):
    c = await Charge.get(parse_object_id(charge_id, "Charge"))
    if not c:
        raise HTTPException(status_code=404, detail="Charge not found")
    try:
        fields = transition_fields(
            c.status,
            body.status,
            c.amount,
            now_local(),
            paid_amount=body.paid_amount,
            paid_at=body.paid_at,
        )
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    for key, value in fields.items():
        setattr(c, key, value)
    await c.save()
    return charge_out(c)
