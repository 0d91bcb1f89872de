# Path: logdeck/shared/errors/exception_handlers.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from logdeck.shared.errors.base import BaseError
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.models.responses.base import ErrorResponse
from logdeck.shared.utilities.constants import DomainErrorCode

logger = LoggingService(LogConfig())


def render_error(error: BaseError) -> JSONResponse:
    """Build the structured JSON response for a BaseError."""
    response = ErrorResponse.from_error(error)
    return JSONResponse(
        status_code=error.status_code,
        content=response.model_dump(),
        headers=error.headers or None
    )


def register_exception_handlers(app: FastAPI):
    """
    Register exception handlers for FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        details = []
        for err in exc.errors():
            loc = err.get("loc", [])
            msg = err.get("msg", "Invalid input.")
            field = loc[-1] if loc else "field"
            details.append(f"{field}: {msg}")

        error_message = "; ".join(details)
        logger.warning("Validation error", context={
            "path": request.url.path,
            "method": request.method,
            "errors": error_message
        })
        return render_error(BaseError(
            error_code=DomainErrorCode.VALIDATION_ERROR.value,
            message="Invalid input data.",
            status_code=HTTP_400_BAD_REQUEST,
            details={"errors": error_message}
        ))

    @app.exception_handler(BaseError)
    async def base_error_handler(request: Request, exc: BaseError):
        """Handle custom BaseError exceptions."""
        log = logger.error if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR else logger.info
        log("Request failed", context={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "error_code": exc.error_code
        })
        return render_error(exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error("Unhandled exception", context={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc)
        })
        return render_error(BaseError(
            error_code="INTERNAL_SERVER_ERROR",
            message="Unexpected server error.",
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            details={"error": str(exc)}
        ))
