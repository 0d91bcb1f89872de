# Path: logdeck/shared/models/responses/base.py
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from logdeck.shared.errors.base import BaseError


class Meta(BaseModel):
    message: str = Field(..., description="Human-readable summary of the result")
    status: Literal["success", "error"] = Field(..., examples=["success", "error"])
    code: int = Field(..., description="HTTP status code")
    count: Optional[int] = Field(None, description="Number of items when the payload is a list")


class StandardResponse(BaseModel):
    """Envelope of every JSON dashboard route."""
    data: Optional[Any] = Field(None, description="Entries, metrics snapshot or file listing")
    meta: Meta

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "Success", code: int = 200) -> "StandardResponse":
        count = len(data) if isinstance(data, list) else None
        return cls(data=data, meta=Meta(message=message, status="success", code=code, count=count))


class ErrorResponse(BaseModel):
    """Body of every rejected or failed request."""
    detail: str = Field(..., description="What went wrong")
    error_code: str = Field(..., examples=["UNAUTHORIZED_ACCESS", "FORBIDDEN_ACCESS", "RESOURCE_NOT_FOUND"])
    status: Literal["error"] = "error"
    trace_id: Optional[str] = Field(None, description="Correlates the response with the operational log")
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def from_error(cls, error: BaseError) -> "ErrorResponse":
        return cls(
            detail=error.message,
            error_code=error.error_code,
            trace_id=str(error.trace_id),
            metadata=error.details or None
        )
