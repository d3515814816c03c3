"""Synthetic PIX payloads.

The strings only mimic the shape of an EMV "copia e cola" code and a payment
link; nothing here is validated by a bank or follows BACEN rules.
"""
import secrets
import time
from decimal import Decimal
from typing import NamedTuple

from bpay.config import settings

PIX_PREFIX = "00020126580014br.gov.bcb.pix0136"


class PixPayload(NamedTuple):
    qr_code: str
    copy_paste: str
    payment_link: str


def new_charge_token() -> str:
    """Timestamp plus random suffix, e.g. CHG-1718035200123-k3f9a2x1q."""
    return f"CHG-{int(time.time() * 1000)}-{secrets.token_hex(5)[:9]}"


def build_pix_payload(token: str, amount: Decimal) -> PixPayload:
    amount_str = f"{amount:.2f}"
    merchant = settings.pix_merchant_name[:25]
    city = settings.pix_merchant_city[:15]
    qr_code = (
        f"{PIX_PREFIX}{token}"
        f"520400005303986"
        f"54{len(amount_str):02d}{amount_str}"
        f"5802BR59{len(merchant):02d}{merchant}"
        f"60{len(city):02d}{city}"
        f"62070503***6304"
    )
    payment_link = f"{settings.pix_base_url.rstrip('/')}/{token}"
    return PixPayload(qr_code=qr_code, copy_paste=qr_code, payment_link=payment_link)
