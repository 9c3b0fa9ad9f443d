# fundiflow/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fundiflow.core.config import settings
from fundiflow.core.env_validation import validate_env
from fundiflow.api.v1.api import api_router
from fundiflow.api.routes_system import router as system_router
from fundiflow.db.init_db import init_db, seed_initial_data
from fundiflow.db.session import SessionLocal

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ---------- ENVIRONMENT ----------
    # Raises EnvironmentValidationError and aborts startup on failure.
    if settings.is_production:
        validate_env()
        logger.info("[ENV] Environment variables validated successfully")

    # ---------- DATABASE ----------
    init_db()
    if settings.environment == "development":
        with SessionLocal() as db:
            seed_initial_data(db)

    yield


def create_application() -> FastAPI:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # ---------- CORS ----------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- ROUTERS ----------
    app.include_router(api_router, prefix=settings.api_v1_prefix)
    app.include_router(system_router, prefix="/api", tags=["system"])

    return app


app = create_application()
