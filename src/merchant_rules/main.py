import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from merchant_rules.api.middleware.error_handler import (
    handle_generic_error,
    handle_rules_engine_error,
    handle_validation_error,
)
from merchant_rules.api.middleware.logging import JSONLogFormatter, RequestLoggingMiddleware
from merchant_rules.api.v1 import router as v1_router
from merchant_rules.api.v1.health import router as health_router
from merchant_rules.config import Settings, settings as default_settings
from merchant_rules.core.exceptions import RulesEngineError
from merchant_rules.core.logger import setup_logging
from merchant_rules.db.session import build_engine
from merchant_rules.services.rules import RulesService
from merchant_rules.storage.memory import InMemoryKeyValueStore
from merchant_rules.storage.sql import SqlKeyValueStore

logger = logging.getLogger(__name__)


def create_app(service: RulesService | None = None, config: Settings | None = None) -> FastAPI:
    """Build the API application.

    Args:
        service: Pre-built service (tests inject one over an in-memory store).
            When omitted, one is built at startup from settings.
        config: Settings to use instead of the process-wide instance.
    """
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sql_store = None
        if service is not None:
            app.state.rules_service = service
        elif config.storage_backend == "sql":
            sql_store = SqlKeyValueStore(build_engine(config))
            await sql_store.init_schema()
            app.state.rules_service = RulesService.from_settings(sql_store, config)
        else:
            app.state.rules_service = RulesService.from_settings(InMemoryKeyValueStore(), config)
        logger.info("Merchant rules API started", extra={"backend": config.storage_backend})
        yield
        if sql_store is not None:
            await sql_store.close()

    app = FastAPI(
        title="Merchant Rules API",
        description="Learned merchant-to-category rules for transaction auto-categorization",
        version="0.1.0",
        debug=config.debug,
        lifespan=lifespan,
    )

    # ASGITransport does not run lifespan events.
    if service is not None:
        app.state.rules_service = service

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(RulesEngineError, handle_rules_engine_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


def configure_logging(config: Settings) -> None:
    """Plain text logs in debug, JSON lines with PII filtered otherwise."""
    formatter = None if config.debug else JSONLogFormatter()
    setup_logging(config.log_level, formatter=formatter)


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    configure_logging(default_settings)
    uvicorn.run(create_app(), host=default_settings.host, port=default_settings.port)
