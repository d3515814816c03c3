"""Simulated PIX payment confirmation."""
import logging

from fastapi import APIRouter, HTTPException

from bpay.api.charges import charge_out
from bpay.api.deps import parse_object_id
from bpay.models.charge import Charge, PaymentWebhookBody
from bpay.services.charge_status import ChargeAlreadyPaid, confirm_payment_fields
from bpay.services.dates import now_local

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/payment")
async def payment_webhook(body: PaymentWebhookBody):
    c = await Charge.get(parse_object_id(body.charge_id, "Charge"))
    if not c:
        raise HTTPException(status_code=404, detail="Charge not found")
    try:
        fields = confirm_payment_fields(c.status, c.amount, now_local())
    except ChargeAlreadyPaid as e:
        raise HTTPException(status_code=400, detail=str(e))
    for key, value in fields.items():
        setattr(c, key, value)
    await c.save()
    logger.info("Payment confirmed for charge %s (%s)", c.id, c.student_name)
    return {"success": True, "message": "Pagamento confirmado", "charge": charge_out(c)}
