import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fresh_laundry.api import admin, auth, dashboard, orders
from fresh_laundry.core.config import Settings
from fresh_laundry.core.errors import LaundryError
from fresh_laundry.core.security import PasswordHasher, TokenIssuer
from fresh_laundry.db.session import Database
from fresh_laundry.services.accounts_service import AccountsService
from fresh_laundry.services.orders_service import OrdersService
from fresh_laundry.services.stats_service import StatsService

logger = logging.getLogger(__name__)


async def laundry_error_handler(request: Request, exc: LaundryError):
    content = {"message": exc.message}
    if exc.error:
        content["error"] = exc.error
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request. " + "; ".join(problems)},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    database = Database.from_settings(settings)
    database.create_all()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    app.state.settings = settings
    app.state.database = database
    app.state.token_issuer = TokenIssuer(settings.SECRET_KEY, settings.ALGORITHM)
    app.state.accounts_service = AccountsService(database, PasswordHasher(settings.BCRYPT_ROUNDS))
    app.state.orders_service = OrdersService(database)
    app.state.stats_service = StatsService(database)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LaundryError, laundry_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
    app.include_router(orders.router, prefix="/api", tags=["orders"])
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])

    @app.get("/")
    def root():
        return {"status": "ok", "app": settings.APP_NAME}

    return app
