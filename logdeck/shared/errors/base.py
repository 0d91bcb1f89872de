# Path: logdeck/shared/errors/base.py
from typing import Dict, Optional

from ..utilities.helpers import generate_trace_id
from ..utilities.types import ErrorDetails, TraceId


class BaseError(Exception):
    """Base class for custom errors."""

    def __init__(
            self,
            error_code: str,
            message: str,
            status_code: int,
            trace_id: Optional[TraceId] = None,
            details: Optional[ErrorDetails] = None,
            headers: Optional[Dict[str, str]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.trace_id = trace_id or generate_trace_id()
        self.details = details or {}
        self.headers = headers or {}
        super().__init__(self.message)
