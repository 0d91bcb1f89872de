# Path: logdeck/shared/errors/infrastructure/database.py
from ..base import BaseError
from ...utilities.constants import HttpStatus, InfraErrorCode
from ...utilities.types import ErrorDetails, TraceId


class DatabaseConnectionError(BaseError):
    """Error when database connection fails."""

    def __init__(
            self,
            db_type: str,
            trace_id: TraceId = None,
            details: ErrorDetails = None
    ):
        super().__init__(
            error_code=InfraErrorCode.DATABASE_CONNECTION.value,
            message=f"Failed to connect to {db_type} database.",
            status_code=HttpStatus.SERVICE_UNAVAILABLE.value,
            trace_id=trace_id,
            details=details or {"db_type": db_type}
        )


class MongoError(BaseError):
    """Error for MongoDB-specific issues."""

    def __init__(
            self,
            operation: str,
            trace_id: TraceId = None,
            details: ErrorDetails = None
    ):
        super().__init__(
            error_code=InfraErrorCode.MONGO_ERROR.value,
            message=f"MongoDB error during {operation}.",
            status_code=HttpStatus.SERVICE_UNAVAILABLE.value,
            trace_id=trace_id,
            details=details or {"operation": operation}
        )
