import logging
import traceback
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from homeservices.api.routes import (
    addresses,
    admin,
    auth,
    bookings,
    categories,
    occupations,
    partner,
    provider,
    public,
    reviews,
    services,
)
from homeservices.core.config import Settings, get_settings
from homeservices.core.errors import AppError
from homeservices.db.base import init_db

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Reduce verbosity of third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _field_name(loc) -> str:
    # drop the "body"/"query"/"path" prefix; body fields already carry their alias
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(to_camel(p) if "_" in p else p for p in parts)


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            if error.get("type") == "json_invalid":
                return JSONResponse(status_code=400, content={"success": False, "error": "Malformed JSON body"})
            errors.append({"field": _field_name(error.get("loc", ())), "message": error.get("msg")})
        logger.warning(f"Validation error for {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Validation failed", "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"💥 Unhandled error on {request.method} {request.url.path}")
        content = {"success": False, "error": "Internal server error"}
        if not settings.is_production:
            content["message"] = str(exc)
            content["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
        return JSONResponse(status_code=500, content=content)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings)

    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app, settings)

    @app.on_event("startup")
    def startup():
        init_db()
        logger.info(f"🚀 {settings.app_name} started ({settings.environment})")

    @app.get("/")
    def root():
        return {"success": True, "message": f"{settings.app_name} API running"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    api = APIRouter(prefix="/api")

    @api.get("")
    def api_root():
        return {"success": True, "message": "API is running"}

    api.include_router(auth.router)
    api.include_router(bookings.router)
    api.include_router(partner.router)
    api.include_router(reviews.router)
    api.include_router(public.router)
    api.include_router(categories.router)
    api.include_router(services.router)
    api.include_router(services.types_router)
    api.include_router(provider.router)
    api.include_router(addresses.router)
    api.include_router(admin.router)
    api.include_router(occupations.router)
    app.include_router(api)

    return app


app = create_app()
