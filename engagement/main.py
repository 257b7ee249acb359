from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi_pagination import add_pagination

from engagement import __version__
from engagement.config import get_settings
from engagement.exceptions import NotFoundError, PersistenceError, ValidationError
from engagement.infra.logging_config import LoggingConfig, get_logger
from engagement.routers import (
    agent_assignments_router,
    contact_analytics_router,
    qualifications_router,
)

logger = get_logger("api")


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Persistence failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app(testing: bool = False) -> FastAPI:
    settings = get_settings()
    LoggingConfig()

    app = FastAPI(title=settings.app_name, version=__version__)

    app.include_router(qualifications_router)
    app.include_router(contact_analytics_router)
    app.include_router(agent_assignments_router)

    _register_exception_handlers(app)
    add_pagination(app)

    if not testing:
        logger.info("Starting %s (%s)", settings.app_name, settings.environment)

    return app


app = create_app()
