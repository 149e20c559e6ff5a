"""
FastAPI application for Aib HUB
Creator directory, job briefs, memberships and outreach workflows
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import config
from .logging_config import RequestIDMiddleware, setup_logging
from .middleware.error_handler import register_error_handlers
from .db import init_db
from .auth_routes import router as auth_router
from .directory_routes import router as directory_router
from .job_routes import router as job_router
from .engagement_routes import router as engagement_router
from .profile_routes import router as profile_router
from .admin_routes import router as admin_router
from .membership_routes import router as membership_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging(config.ENV, config.LOG_LEVEL)

    # SQLite dev databases are created from the models; PostgreSQL is migrated with Alembic
    if config.is_sqlite:
        init_db()

    app = FastAPI(title="Aib HUB API", version=config.BUILD_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(directory_router)
    app.include_router(job_router)
    app.include_router(engagement_router)
    app.include_router(profile_router)
    app.include_router(admin_router)
    app.include_router(membership_router)

    @app.get("/")
    async def root():
        return {"message": "Aib HUB API", "status": "running"}

    @app.get("/health")
    async def health():
        """Health check endpoint for monitoring"""
        return {"status": "healthy", "service": "aib-hub", "version": config.BUILD_VERSION}

    logger.info(f"Aib HUB API configured (env: {config.ENV})")
    return app


app = create_app()
