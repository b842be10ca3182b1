"""
User Catalog Backend API Server
Core functionality: CRUD for user records backed by PostgreSQL
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_catalog import __version__
from user_catalog.api.routes import health, users
from user_catalog.config.settings import ALLOWED_ORIGINS, LOG_LEVEL
from user_catalog.database.connection import close_database, init_database
from user_catalog.database.user_repository import UserRepository
from user_catalog.services.user_service import UserService
from user_catalog.utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(user_service: Optional[UserService] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        user_service: Prebuilt service; when omitted, one is wired to a
            PostgreSQL pool opened at startup and closed at shutdown
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        if user_service is not None:
            app.state.user_service = user_service
            yield
            return

        pool = await init_database()
        app.state.user_service = UserService(UserRepository(pool))
        try:
            yield
        finally:
            await close_database()

    app = FastAPI(
        title="User Catalog Backend",
        description="Backend API for creating, reading, updating and deleting user records",
        version=__version__,
        lifespan=lifespan
    )

    # Available before startup so routes work without running the lifespan
    if user_service is not None:
        app.state.user_service = user_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials="*" not in ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    app.include_router(users.router, prefix="/usuarios", tags=["Users"], include_in_schema=False)

    return app


# FastAPI app instance is exported for use by uvicorn
app = create_app()
