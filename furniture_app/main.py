# furniture_app/main.py
import logging
import os
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings
from .db import SessionLocal, init_db
from .errors import AppError, ValidationError
from .seed import ensure_admin, seed_static_data

from .routers import (
    api_ads as ads_router,
    api_auth as auth_router,
    api_static as static_router,
    api_users as users_router,
)


def configure_logging(app_settings: Settings) -> logging.Logger:
    level = getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger("furniture_app")
    logger.setLevel(level)
    return logger


logger = configure_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    db = SessionLocal()
    try:
        if settings.SEED_STATIC_DATA:
            seed_static_data(db)
        ensure_admin(db, settings)
    finally:
        db.close()
    logger.info("Startup complete")
    yield
    logger.info("Shutting down")


def _error_code(status_code: int) -> str:
    try:
        words = HTTPStatus(status_code).phrase.split()
    except ValueError:
        return "httpError"
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for e in exc.errors():
            # drop the "body" / "query" / "path" prefix
            loc = [str(p) for p in e.get("loc", ())]
            field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
            errors.append({"field": field or "request", "message": e.get("msg", "")})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "code": "requestValidationFailed",
                "description": "; ".join(f"{e['field']}: {e['message']}" for e in errors),
                "errors": errors,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": _error_code(exc.status_code), "description": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        content = {"code": exc.code, "description": exc.message}
        if isinstance(exc, ValidationError):
            content["errors"] = [{"field": f, "message": m} for f, m in exc.errors]
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"code": "serverError", "description": "An unexpected error occurred"},
        )


def create_app(app_settings: Settings = settings) -> FastAPI:
    app = FastAPI(title="Furniture Marketplace", lifespan=lifespan)

    # --- CORS ---
    allowed_origins = (
        [o.strip() for o in app_settings.ALLOWED_ORIGINS.split(",")]
        if app_settings.ALLOWED_ORIGINS
        else ["*"]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # --- Uploaded images ---
    os.makedirs(app_settings.UPLOAD_DIR, exist_ok=True)
    app.mount(app_settings.UPLOAD_URL_PREFIX, StaticFiles(directory=app_settings.UPLOAD_DIR), name="uploads")

    app.include_router(auth_router.router)
    app.include_router(ads_router.router)
    app.include_router(users_router.router)
    app.include_router(static_router.router)
    return app


app = create_app()
