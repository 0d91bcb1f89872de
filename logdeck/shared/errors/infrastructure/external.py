# Path: logdeck/shared/errors/infrastructure/external.py
from ..base import BaseError
from ...utilities.constants import HttpStatus, InfraErrorCode
from ...utilities.types import ErrorDetails, TraceId


class SmtpServiceError(BaseError):
    """Error when the SMTP server rejects or drops an alert e-mail."""

    def __init__(
            self,
            host: str,
            trace_id: TraceId = None,
            details: ErrorDetails = None
    ):
        super().__init__(
            error_code=InfraErrorCode.SMTP_SERVICE.value,
            message=f"SMTP service {host} failed.",
            status_code=HttpStatus.SERVICE_UNAVAILABLE.value,
            trace_id=trace_id,
            details=details or {"host": host}
        )
