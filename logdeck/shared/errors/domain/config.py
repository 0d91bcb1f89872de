# Path: logdeck/shared/errors/domain/config.py
from ..base import BaseError
from ...utilities.constants import DomainErrorCode, HttpStatus
from ...utilities.types import ErrorDetails, TraceId


class ConfigurationError(BaseError):
    """Error when the supplied options cannot form a valid configuration."""

    def __init__(
            self,
            message: str,
            trace_id: TraceId = None,
            details: ErrorDetails = None
    ):
        super().__init__(
            error_code=DomainErrorCode.INVALID_CONFIGURATION.value,
            message=message,
            status_code=HttpStatus.INTERNAL_SERVER_ERROR.value,
            trace_id=trace_id,
            details=details
        )
