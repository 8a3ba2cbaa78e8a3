"""
Example host application.

Serves the dashboard API under /authzkit and one guarded demo route. The
store comes from AUTHZKIT_* environment variables, or memory when unset.

    python server.py
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from authzkit import __version__
from authzkit.core import config
from authzkit.engine import Authzkit
from authzkit.features.authorization.dependencies import authorize
from authzkit.features.dashboard.routes import create_dashboard_router
from authzkit.stores.factory import create_store
from authzkit.utils import get_logger


log = get_logger(__name__)


async def principal_from_header(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Demo authentication: trust the X-User-Id header."""
    return x_user_id


def create_app(authzkit: Optional[Authzkit] = None, dashboard_secret: Optional[str] = None) -> FastAPI:
    """
    Build the example app.

    Args:
        authzkit: Instance to serve. Built from environment configuration when omitted.
        dashboard_secret: Basic auth password for the dashboard API
    """
    if authzkit is None:
        authzkit = Authzkit(create_store(config.load_config_from_env()))

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        log.info("Connecting authorization store...")
        await authzkit.store.connect()
        await authzkit.store.init_schema()
        log.info("Authorization store ready")
        yield
        await authzkit.close()

    log.info("Initializing server")
    app = FastAPI(
        title="Authzkit",
        description="Role-based access control with pluggable storage",
        version=__version__,
        docs_url="/docs" if config.ENABLE_DOCS else None,
        redoc_url="/redoc" if config.ENABLE_DOCS else None,
        openapi_url="/openapi.json" if config.ENABLE_DOCS else None,
        lifespan=lifespan,
    )
    app.state.authzkit = authzkit

    if config.ENABLE_DOCS:
        log.warning("Docs enabled")
    if config.ALLOW_ORIGIN:
        log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[config.ALLOW_ORIGIN],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError):
        errors = dict()
        for error in exc.errors():
            if "loc" not in error or "msg" not in error:
                continue
            key = error["loc"][-1]
            if key == "__root__":
                key = "root"
            errors[key] = error["msg"]
        log.info("Request validation error %s", errors)
        return JSONResponse(status_code=400, content=jsonable_encoder(errors))

    @app.get("/")
    async def root():
        """Root endpoint - API health check."""
        return {
            "message": "Authzkit example app",
            "version": __version__,
            "status": "online",
            "docs": "/docs" if config.ENABLE_DOCS else None,
            "dashboard": "/authzkit/api",
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/articles/edit")
    async def edit_articles(
        user_id: str = Depends(authorize(authzkit, ["editor", "edit_articles"], principal_from_header)),
    ):
        """Demo route open to editors or holders of edit_articles."""
        return {"message": "Welcome to the editor", "user_id": user_id}

    app.include_router(
        create_dashboard_router(authzkit, secret=dashboard_secret),
        prefix="/authzkit",
        tags=["dashboard"],
    )
    return app
