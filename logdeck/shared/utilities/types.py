# Path: logdeck/shared/utilities/types.py
from typing import Any, Callable, Dict
from uuid import UUID

# Type for trace IDs attached to errors
TraceId = UUID

# Type for error details (flexible key-value pairs)
ErrorDetails = Dict[str, Any]

# (level, timestamp, message) -> formatted line
LogFormatter = Callable[[str, str, str], str]

# Raw user options, camelCase or snake_case keys
Options = Dict[str, Any]
