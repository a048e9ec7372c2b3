# main.py
import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError

from fabtrack.routers import (
    auth_router,
    activity_router,
    client_router,
    order_router,
)

from fabtrack.core.config import APP_ENV, CORS_ORIGINS, ENABLE_SCHEDULER
from fabtrack.core.db import AsyncSessionLocal, init_models
from fabtrack.core.exceptions import AppException
from fabtrack.core.logging import setup_logging
from fabtrack.core.scheduler import create_scheduler, register_jobs
from fabtrack.core.state import build_app_state
from fabtrack.middleware.request_logging import request_logging_middleware
from fabtrack.services.auth.auth_service import ensure_admin_credential
from fabtrack.core.error_handlers import (
    app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    database_error_handler,
    unhandled_exception_handler,
)

# ------------------------------------------------------------------------------
# ENV CONFIG
# ------------------------------------------------------------------------------
APP_NAME = "Fabrication Order Tracker API"
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

# ------------------------------------------------------------------------------
# LOGGING
# ------------------------------------------------------------------------------
setup_logging()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# LIFESPAN
# ------------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application")

    # DB init ONLY in development
    if APP_ENV == "development":
        await init_models()
        logger.info("Database models initialized (development)")
    else:
        logger.info("%s mode: init_models() skipped", APP_ENV)

    async with AsyncSessionLocal() as db:
        await ensure_admin_credential(db)

    state = build_app_state()
    app.state.fabtrack = state
    await state.startup()

    scheduler = None
    if ENABLE_SCHEDULER:
        scheduler = create_scheduler()
        register_jobs(scheduler, state.store)
        scheduler.start()
        logger.info("Scheduler started")
    else:
        logger.info("Scheduler disabled")

    yield

    logger.info("Shutting down application")
    if scheduler and scheduler.running:
        scheduler.shutdown()
    await state.shutdown()

# ------------------------------------------------------------------------------
# APP INIT
# ------------------------------------------------------------------------------
app = FastAPI(
    title=APP_NAME,
    description="Backend API for tracking fabrication orders from quotation to delivery",
    version=APP_VERSION,
    docs_url="/docs" if APP_ENV != "production" else None,
    redoc_url=None,
    lifespan=lifespan,
)

# ------------------------------------------------------------------------------
# EXCEPTION HANDLERS
# ------------------------------------------------------------------------------
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# ------------------------------------------------------------------------------
# MIDDLEWARE
# ------------------------------------------------------------------------------
app.middleware("http")(request_logging_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------------------
# HEALTH CHECK
# ------------------------------------------------------------------------------
@app.get("/", tags=["Health"])
async def health_check():
    return {
        "status": "ok",
        "service": "fabtrack-api",
        "environment": APP_ENV,
        "version": APP_VERSION,
    }

# ------------------------------------------------------------------------------
# ROUTERS
# ------------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(activity_router)
app.include_router(client_router)
app.include_router(order_router)
