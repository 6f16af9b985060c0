import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from expense_tracker.core.config import Settings, settings
from expense_tracker.core.database import Database
from expense_tracker.core.errors import AppError, DatabaseConnectionError, ValidationError
from expense_tracker.core.logging_config import setup_logging
from expense_tracker.core.middleware import RequestContextMiddleware
from expense_tracker.domain.categories.repository import CategoryRepository
from expense_tracker.web.routes import api

setup_logging()

logger = logging.getLogger(__name__)


def _request_error_messages(exc: RequestValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("query", "path", "body"))
        messages.append(f"{location or 'request'}: {error.get('msg', 'invalid value')}")
    return messages


def create_app(current: Settings = settings) -> FastAPI:
    """Build the application; the database is opened by the lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connect, create the schema and seed defaults; close on shutdown."""
        database = Database.from_settings(current)
        try:
            await database.connect()
            await database.init_schema()
            if current.SEED_DEFAULT_CATEGORIES:
                await CategoryRepository(database).initialize_default_categories()
        except DatabaseConnectionError:
            logger.critical("Database initialization failed, shutting down")
            await database.close()
            raise SystemExit(1)

        app.state.database = database
        logger.info(
            "%s started (env=%s, database=%s)",
            current.APP_NAME,
            current.ENV,
            database.backend_kind.value.upper(),
        )
        try:
            yield
        finally:
            await database.close()

    app = FastAPI(
        title=current.APP_NAME,
        description="Household income and expense tracker",
        version=current.VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(RequestContextMiddleware)
    app.include_router(api.router, prefix="/api")

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("Application error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = _request_error_messages(exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": ", ".join(messages), "errors": messages},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        detail = str(exc) if current.is_development else "Internal server error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": detail},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.is_development)
