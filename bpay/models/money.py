"""Decimal money type stored as BSON Decimal128, always quantized to cents."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from beanie import DecimalAnnotation
from pydantic import AfterValidator, Field

CENTS = Decimal("0.01")


def quantize_money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


# Persisted amounts (Decimal128 in Mongo, "450.00" in JSON)
Money = Annotated[DecimalAnnotation, AfterValidator(quantize_money)]

# Request bodies: at most 2 decimal places, non-negative
MoneyInput = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
