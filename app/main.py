import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import admin, appointments, auth, catalog, enrollments, slots
from app.core.config import _ENV_FILE, settings
from app.core.db import async_session_maker
from app.services.auth_service import ensure_admin_user
from app.services.lead_service import LeadLog

API_PREFIX = "/api/v1"
CORS_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Authorization", "Content-Type", "X-Refresh-Token"]

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    # One JSON object per line in production so the host's log viewer can parse it
    if settings.env == "production":
        logging.basicConfig(
            level=logging.INFO,
            format='{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
        )
    else:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")


async def _bootstrap_admin() -> None:
    if not settings.admin_bootstrap_enabled:
        logger.warning("No bootstrap admin: set ADMIN_EMAIL and ADMIN_PASSWORD in %s", _ENV_FILE)
        return
    async with async_session_maker() as session:
        try:
            await ensure_admin_user(session, settings.admin_email, settings.admin_password, settings.admin_full_name)
            await session.commit()
        except Exception:
            await session.rollback()
            # The public site keeps working without the dashboard account
            logger.exception("Could not create bootstrap admin %s", settings.admin_email)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Settings loaded from %s (exists: %s)", _ENV_FILE, _ENV_FILE.exists())
    logger.info("Booking calendar uses %s for today's date", settings.studio_timezone)
    await _bootstrap_admin()
    yield


def _error_cors_headers(origin: str | None) -> dict[str, str]:
    """Exception responses skip CORSMiddleware; without these the browser hides the error body."""
    origins = settings.cors_origins_list
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
    }
    if origins:
        headers["Access-Control-Allow-Origin"] = origin if origin in origins else origins[0]
    return headers


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    headers = _error_cors_headers(request.headers.get("origin"))
    if isinstance(exc, HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"}, headers=headers)


def create_application() -> FastAPI:
    _configure_logging()

    application = FastAPI(
        title=f"{settings.site_name} API",
        description="Catalog, online booking, course leads and admin dashboard for the studio site",
        version="0.1.0",
        lifespan=lifespan,
    )
    # Enrollment leads live as long as the process does
    application.state.leads = LeadLog()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    for module in (auth, catalog, slots, appointments, enrollments, admin):
        application.include_router(module.router, prefix=API_PREFIX)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    @application.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return application


app = create_application()
