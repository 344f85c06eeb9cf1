"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from supportdesk.api.v1 import router as api_router
from supportdesk.core.config import Settings, get_settings
from supportdesk.core.database import Database
from supportdesk.services.categories import CategoryRegistry
from supportdesk.services.seed_export import SeedFileWriter

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies and parameters are client errors: 400, not FastAPI's 422."""
    logger.info("Request validation failed on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """
    Build the application with explicit collaborators.

    The database, category registry and optional seed writer live on app.state;
    request handlers reach them through dependencies, never through module globals.
    """
    settings = settings or get_settings()
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    app = FastAPI(
        title="SupportDesk API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.database = database
    app.state.categories = CategoryRegistry(settings.CATEGORIES)
    app.state.seed_writer = (
        SeedFileWriter(database, settings.SEED_FILE_PATH) if settings.SEED_FILE_PATH else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "SupportDesk API"}

    logger.info(
        "SupportDesk API configured: env=%s categories=%s seed_file=%s",
        settings.APP_ENV,
        len(settings.CATEGORIES),
        settings.SEED_FILE_PATH or "disabled",
    )
    return app


app = create_app()
