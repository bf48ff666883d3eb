import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from .auth import auth_router
from .auth_utils import get_password_hash
from .config import settings
from .database import Base, SessionLocal, engine
from .errors import AuthorizationFailure, PersistenceFailure, TugzaError, ValidationFailure
from .models import Operator
from .routers.accounts import accounts_router
from .routers.admin import admin_router
from .routers.banks import banks_router
from .routers.locations import locations_router
from .routers.vouchers import vouchers_router
from .validation import field_errors

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger(__name__)


async def create_db_and_tables():
    """Creates all database tables defined in models.py."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("Database tables ensured")


async def create_default_operator():
    """Creates the configured operator login if it doesn't exist."""
    async with SessionLocal() as db:
        result = await db.execute(select(Operator).filter(Operator.email == settings.ADMIN_EMAIL))
        if result.scalars().first():
            return
        db.add(Operator(
            email=settings.ADMIN_EMAIL,
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            is_active=True,
        ))
        await db.commit()
        log.info(f"Default operator {settings.ADMIN_EMAIL} created")


def error_body(exc: TugzaError) -> dict:
    body = {"success": False, "error": exc.error, "message": exc.public_message}
    if isinstance(exc, ValidationFailure):
        body["errors"] = exc.errors
    return body


async def tugza_error_handler(request: Request, exc: TugzaError):
    if isinstance(exc, ValidationFailure):
        log.info(f"{request.method} {request.url.path} rejected: {exc.detail}")
    elif exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        log.warning(f"{request.method} {request.url.path}: {exc.detail}")

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthorizationFailure) else None
    return JSONResponse(status_code=exc.status_code, content=error_body(exc), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return await tugza_error_handler(request, ValidationFailure(field_errors(exc.errors())))


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    return await tugza_error_handler(request, PersistenceFailure(str(exc)))


def create_app() -> FastAPI:
    app = FastAPI(title="Tugza Bank")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TugzaError, tugza_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    @app.on_event("startup")
    async def startup_event():
        await create_db_and_tables()
        await create_default_operator()

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(auth_router, prefix="/auth")
    app.include_router(banks_router)
    app.include_router(accounts_router)
    app.include_router(vouchers_router)
    app.include_router(locations_router)
    app.include_router(admin_router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("tugza.main:app", host="0.0.0.0", port=8000)
