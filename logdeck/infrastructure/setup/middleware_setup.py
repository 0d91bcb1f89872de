# Path: logdeck/infrastructure/setup/middleware_setup.py
from fastapi import FastAPI, Request

from logdeck.domain.logs.services.log_manager import LogManager
from logdeck.domain.security.services.access_gate import AccessGate
from logdeck.shared.errors.base import BaseError
from logdeck.shared.errors.domain.security import ResourceNotFoundError
from logdeck.shared.errors.exception_handlers import render_error
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.utilities.network import extract_client_ip

logger = LoggingService(LogConfig())

METRICS_PATH = "/metrics"


async def log_requests_middleware(request: Request, call_next):
    """
    Middleware to log incoming HTTP requests.

    Args:
        request: The incoming HTTP request.
        call_next: The next middleware or endpoint to process the request.

    Returns:
        Response: The HTTP response.
    """
    logger.debug(
        "Incoming request",
        context={"method": request.method, "url": str(request.url), "client_ip": extract_client_ip(request)},
    )
    return await call_next(request)


def build_access_middleware(manager: LogManager):
    """Middleware that admits a request only if the access gate accepts it."""
    gate = AccessGate(lambda: manager.get_config().server_config)

    async def access_gate_middleware(request: Request, call_next):
        if request.url.path == METRICS_PATH and not manager.get_config().metrics_endpoint_enabled:
            return render_error(ResourceNotFoundError(resource=METRICS_PATH))
        try:
            gate.check(extract_client_ip(request), request.headers.get("authorization"))
        except BaseError as e:
            return render_error(e)
        return await call_next(request)

    return access_gate_middleware


def setup_middlewares(app: FastAPI, manager: LogManager):
    """
    Configure FastAPI middlewares (access gate, request logging).

    Args:
        app: The FastAPI application instance.
        manager: Engine whose server settings drive the access gate.
    """
    app.middleware("http")(build_access_middleware(manager))
    # Outermost, runs before the gate
    app.middleware("http")(log_requests_middleware)
    server = manager.get_config().server_config
    logger.info(
        "Middlewares configured",
        context={"auth_enabled": server.auth_enabled, "allowed_ips": server.allowed_ips},
    )
