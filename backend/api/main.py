"""Main FastAPI application entry point.

Creates the app instance, registers all API routers, configures middleware,
and seeds the breach catalog on startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from .routes.actions import router as actions_router
from .routes.alerts import router as alerts_router
from .routes.assets import router as assets_router
from .routes.security import router as security_router
from .routes.users import router as users_router
from backend.config.settings import settings
from backend.database.connection import SessionLocal, get_db_session, init_db
from backend.database.repository import SecurityRepository
from backend.ingestion.breach_catalog import SAMPLE_BREACHES

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s — %(name)s — %(levelname)s — %(message)s"
)
logger = logging.getLogger(__name__)


def seed_breach_catalog() -> int:
    """Insert any reference breaches missing from the database."""
    db: Session = SessionLocal()
    try:
        count: int = SecurityRepository(db).sync_breach_catalog(SAMPLE_BREACHES)
        db.commit()
        return count
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and teardown lifecycle events."""
    try:
        init_db()
        seeded: int = seed_breach_catalog()
        logger.info(f"Breach catalog holds {seeded} reference breaches")
        logger.info(f"{settings.APP_NAME} API started, version {settings.APP_VERSION}")
    except Exception as e:
        logger.error(f"Critical error during API startup initialization: {e}", exc_info=True)
        raise e

    yield

    logger.info(f"{settings.APP_NAME} API shutting down")


app = FastAPI(
    title="Aegis API",
    description="Personal security posture and breach monitoring API",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_router, prefix="/api/v1")
app.include_router(assets_router, prefix="/api/v1")
app.include_router(alerts_router, prefix="/api/v1")
app.include_router(actions_router, prefix="/api/v1")
app.include_router(security_router, prefix="/api/v1")


@app.get("/", status_code=status.HTTP_200_OK, tags=["System"])
def root_health_check() -> dict[str, str]:
    """Provide a minimal root-level system health beacon."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


@app.get("/api/v1/health", status_code=status.HTTP_200_OK, tags=["System"])
def detailed_health_check(db: Session = Depends(get_db_session)) -> dict[str, str]:
    """Assess subsystem health including active database connectivity."""
    db_status: str = "disconnected"

    try:
        result = db.execute(text("SELECT 1")).scalar()
        if result == 1:
            db_status = "connected"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")

    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": db_status
    }
