# Path: logdeck/shared/errors/domain/security.py
from typing import Dict, Optional

from ..base import BaseError
from ...utilities.constants import AUTH_REALM, DomainErrorCode, HttpStatus
from ...utilities.types import ErrorDetails, TraceId


class UnauthorizedAccessError(BaseError):
    """Error when credentials are missing, malformed or wrong (401)."""

    def __init__(
            self,
            message: str = "Authentication required.",
            challenge: bool = True,
            trace_id: TraceId = None,
            details: ErrorDetails = None
    ):
        headers: Optional[Dict[str, str]] = None
        if challenge:
            headers = {"WWW-Authenticate": f'Basic realm="{AUTH_REALM}"'}
        super().__init__(
            error_code=DomainErrorCode.UNAUTHORIZED_ACCESS.value,
            message=message,
            status_code=HttpStatus.UNAUTHORIZED.value,
            trace_id=trace_id,
            details=details,
            headers=headers
        )


class ForbiddenAccessError(BaseError):
    """Error when the client address is not on the allow-list (403)."""

    def __init__(
            self,
            client_ip: str,
            trace_id: TraceId = None,
            details: ErrorDetails = None
    ):
        super().__init__(
            error_code=DomainErrorCode.FORBIDDEN_ACCESS.value,
            message="Access denied.",
            status_code=HttpStatus.FORBIDDEN.value,
            trace_id=trace_id,
            details=details or {"client_ip": client_ip}
        )


class ResourceNotFoundError(BaseError):
    """Error when a route or file does not exist or is disabled (404)."""

    def __init__(
            self,
            resource: str,
            trace_id: TraceId = None,
            details: ErrorDetails = None
    ):
        super().__init__(
            error_code=DomainErrorCode.RESOURCE_NOT_FOUND.value,
            message="Not Found",
            status_code=HttpStatus.NOT_FOUND.value,
            trace_id=trace_id,
            details=details or {"resource": resource}
        )
