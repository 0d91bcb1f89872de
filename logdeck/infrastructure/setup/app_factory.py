# Path: logdeck/infrastructure/setup/app_factory.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from logdeck.domain.logs.services.log_manager import LogManager
from logdeck.infrastructure.setup.middleware_setup import setup_middlewares
from logdeck.infrastructure.setup.router_setup import setup_routers
from logdeck.shared.errors.exception_handlers import register_exception_handlers
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())


def create_app(manager: LogManager) -> FastAPI:
    """
    Build the access-gated dashboard application for ``manager``.

    Args:
        manager: The engine whose logs, metrics and files are served.

    Returns:
        FastAPI: The configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        server = manager.get_config().server_config
        logger.info("Log viewer started", context={"host": server.host, "port": server.server_port})
        yield
        logger.info("Log viewer stopped", context={})

    app = FastAPI(
        title="logdeck",
        version="1.0.0",
        description="Access-gated log viewer with live updates.",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.log_manager = manager

    setup_middlewares(app, manager)
    register_exception_handlers(app)
    setup_routers(app)
    return app
