"""Pesantren finance FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from src.core.auth.router import router as auth_router
from src.core.config import settings
from src.core.exceptions import AppException
from src.core.exceptions.handlers import (
    app_exception_handler,
    http_exception_handler,
    sqlalchemy_db_error_handler,
    validation_exception_handler,
)
from src.modules.cash.router import router as cash_router
from src.modules.dashboard.router import router as dashboard_router
from src.modules.donations.router import router as donations_router
from src.modules.expenses.router import router as expenses_router
from src.modules.monitoring.router import router as monitoring_router
from src.modules.reports.router import router as reports_router
from src.modules.savings.router import router as savings_router
from src.modules.spp.router import router as spp_router
from src.modules.students.router import router as students_router
from src.modules.teachers.router import router as teachers_router
from src.modules.users.router import router as users_router

API_PREFIX = "/api/v1"

API_ROUTERS = (
    auth_router,
    dashboard_router,
    students_router,
    teachers_router,
    spp_router,
    savings_router,
    expenses_router,
    donations_router,
    cash_router,
    monitoring_router,
    reports_router,
    users_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    yield
    # Shutdown


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title="Pesantren Finance",
        description="Finance administration for a pesantren: SPP, savings, cash, expenses and ZISWAF",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_db_error_handler)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "institution": settings.institution_name}

    for router in API_ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
