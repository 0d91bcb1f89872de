# Path: logdeck/shared/utilities/helpers.py
import uuid
from datetime import datetime
from typing import Optional

from logdeck.shared.utilities.constants import TIMESTAMP_FORMAT
from logdeck.shared.utilities.types import TraceId


# Generate unique trace ID attached to errors
def generate_trace_id() -> TraceId:
    return uuid.uuid4()


# Local wall-clock timestamp with second precision
def format_timestamp(moment: Optional[datetime] = None) -> str:
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


# Timestamp safe for file names ("2024-12-21 11:10:23" -> "2024-12-21-11-10-23")
def file_safe_timestamp(timestamp: str) -> str:
    return timestamp.replace(":", "-").replace(" ", "-")


# Mask sensitive data, keeping the last four characters
def sanitize_data(data: str) -> str:
    if len(data) > 4:
        return "****" + data[-4:]
    return "****"
