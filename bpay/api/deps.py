"""Shared dependencies: billing store and recurrence generator injection."""
from typing import Annotated

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Depends, HTTPException

from bpay.services.recurrence import MonthLocks, RecurrenceGenerator
from bpay.services.store import BeanieBillingStore, BillingStore

# Process-wide: every generator must see the same per-month locks
generation_locks = MonthLocks()


def get_billing_store() -> BillingStore:
    return BeanieBillingStore()


def get_recurrence_generator(
    store: Annotated[BillingStore, Depends(get_billing_store)],
) -> RecurrenceGenerator:
    return RecurrenceGenerator(store, locks=generation_locks)


def parse_object_id(value: str, what: str = "Resource") -> PydanticObjectId:
    """Path ids that are not ObjectIds cannot exist; answer 404 like a missing document."""
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=404, detail=f"{what} not found")


# Type aliases for route injection
Generator = Annotated[RecurrenceGenerator, Depends(get_recurrence_generator)]
