"""BPay tuition billing - FastAPI entrypoint."""
import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import ServerSelectionTimeoutError

from bpay.config import settings
from bpay.db import db_shutdown, db_startup
from bpay.seed import seed_demo_data
from bpay.services.recurrence import RecurrenceGenerator
from bpay.services.scheduler import run_daily_trigger
from bpay.services.store import BeanieBillingStore
from bpay.api import campuses, students, guardians, student_guardians, charges, generation_logs, webhook, dashboard, settings as settings_api
from bpay.api.deps import generation_locks

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _make_generator() -> RecurrenceGenerator:
    return RecurrenceGenerator(BeanieBillingStore(), locks=generation_locks)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await db_startup()
        if settings.seed_demo_data:
            await seed_demo_data()
    except ServerSelectionTimeoutError as e:
        logger.error(
            "MongoDB is not reachable at %s. Start it with: docker compose up -d",
            settings.mongodb_url,
        )
        raise RuntimeError("MongoDB connection failed.") from e

    daily_task = None
    if settings.auto_generation_enabled:
        daily_task = asyncio.create_task(run_daily_trigger(_make_generator, settings.auto_generation_hour))
        logger.info("Daily charge generation scheduled at %02d:00 (%s)", settings.auto_generation_hour, settings.billing_timezone)
    yield
    if daily_task:
        daily_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await daily_task
    await db_shutdown()


app = FastAPI(
    title=settings.app_name,
    description="Tuition billing: students, guardians, campuses, monthly PIX charges",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())},
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(campuses.router, prefix="/api/campuses", tags=["Campuses"])
app.include_router(students.router, prefix="/api/students", tags=["Students"])
app.include_router(guardians.router, prefix="/api/guardians", tags=["Guardians"])
app.include_router(student_guardians.router, prefix="/api", tags=["Student Guardians"])
app.include_router(charges.router, prefix="/api/charges", tags=["Charges"])
app.include_router(generation_logs.router, prefix="/api/generation-logs", tags=["Charges"])
app.include_router(webhook.router, prefix="/api/webhook", tags=["Webhook"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(settings_api.router, prefix="/api/settings", tags=["Settings"])


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.app_name}
