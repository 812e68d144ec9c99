from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from walletauth.app import App
from walletauth.config import Config
from walletauth.errors import UserError
from walletauth.utils import now
from walletauth.web.error_handlers import (
    http_exception_handler,
    make_general_exception_handler,
    request_validation_handler,
    user_error_handler,
)
from walletauth.web.responses import HealthResponse
from walletauth.web.routers import auth_router

LOCALHOST_ORIGIN_REGEX = r"^http://localhost:\d+$"


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="Wallet Auth API", lifespan=lifespan)
    # Available before startup so requests work even without lifespan events
    app.state.app = app_instance

    # Credentials are allowed, so origins must be explicit. Any localhost port is accepted outside production.
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_origin_regex=None if config.is_production else LOCALHOST_ORIGIN_REGEX,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> HealthResponse:
        return HealthResponse(status="healthy", timestamp=now().isoformat(), uptime=app_instance.uptime())

    app.include_router(auth_router, prefix="/api")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, make_general_exception_handler(expose_details=not config.is_production))

    return app
