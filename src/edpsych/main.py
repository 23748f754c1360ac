"""
EdPsych Connect FastAPI Application

Educational psychology platform for UK schools: assessments, CPD,
wellbeing, restorative practice and curriculum collaboration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from edpsych.config import settings
from edpsych.core.database import close_db, engine
from edpsych.wellbeing import catalogue_summary

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

API_PREFIX = "/api/v1"


async def ping_database() -> None:
    """Run a trivial query; raises if the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def _database_check() -> dict[str, Any]:
    try:
        await ping_database()
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy"}


def _catalogue_check() -> dict[str, Any]:
    try:
        summary = catalogue_summary()
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    return {
        "status": "healthy" if summary["strategies"] else "unhealthy",
        "strategies": summary["strategies"],
        "categories": summary["categories"],
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Startup verifies the database and the strategy catalogue; shutdown
    disposes of the connection pool.
    """
    print("🚀 EdPsych Connect starting...")

    summary = catalogue_summary()
    print(f"🧘 Loaded {summary['strategies']} regulation strategies")

    try:
        await ping_database()
        print("✅ Database connection verified")
    except Exception as e:
        print(f"❌ Database connection failed: {e}")
        raise

    print("✅ EdPsych Connect ready!")

    yield

    print("🛑 EdPsych Connect shutting down...")
    await close_db()
    print("✅ Shutdown complete")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide their details from clients."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_health_routes(app: FastAPI) -> None:
    """Root, health, readiness and liveness endpoints (tagged "Health")."""

    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        return {
            "service": "EdPsych Connect",
            "status": "operational",
            "version": VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health", tags=["Health"], response_model=None)
    async def health_check() -> JSONResponse:
        """Dependency checks for load balancers; 503 when any check fails."""
        checks = {
            "database": await _database_check(),
            "strategy_catalogue": _catalogue_check(),
        }
        healthy = all(check["status"] == "healthy" for check in checks.values())

        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "environment": settings.ENVIRONMENT,
                "checks": checks,
            },
        )

    @app.get("/health/ready", tags=["Health"], response_model=None)
    async def readiness_check() -> dict[str, str] | JSONResponse:
        """Ready to serve traffic once the database answers."""
        database = await _database_check()
        if database["status"] != "healthy":
            return JSONResponse(status_code=503, content={"status": "not_ready"})
        return {"status": "ready"}

    @app.get("/health/live", tags=["Health"])
    async def liveness_check() -> dict[str, str]:
        return {"status": "alive"}


def register_api_routes(app: FastAPI) -> None:
    from edpsych.api.v1 import (
        assessments,
        auth,
        cpd,
        curriculum,
        developer,
        emotional_regulation,
        mentoring,
        pacing,
        portfolio,
        restorative_justice,
        users,
    )

    routes = (
        (auth.router, "/auth", "Auth"),
        (users.router, "/users", "Users"),
        (restorative_justice.router, "/restorative-justice", "Restorative Justice"),
        (cpd.router, "/cpd", "CPD"),
        (mentoring.router, "/cpd/mentoring", "Mentoring"),
        (portfolio.router, "/cpd/portfolio", "Portfolio"),
        (emotional_regulation.router, "/emotional-regulation", "Emotional Regulation"),
        (curriculum.router, "/curriculum", "Curriculum"),
        (assessments.router, "/assessments", "Assessments"),
        (assessments.attempt_router, "/attempts", "Assessments"),
        (assessments.student_router, "/students", "Assessments"),
        (pacing.router, "/pacing", "Pacing"),
        (developer.router, "/developer/oauth", "Developer API"),
    )
    for router, prefix, tag in routes:
        app.include_router(router, prefix=f"{API_PREFIX}{prefix}", tags=[tag])


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="EdPsych Connect",
        description="Educational psychology and school wellbeing platform",
        version=VERSION,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )

    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Open CORS only for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_local else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_health_routes(app)
    register_api_routes(app)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "edpsych.main:app",
        host="0.0.0.0",  # nosec B104 - Intentional for containerized deployment
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
