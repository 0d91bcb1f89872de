# Path: logdeck/domain/logs/services/formatting.py
import json
import traceback
from typing import Any, Iterable


def default_format(level: str, timestamp: str, message: str) -> str:
    """Default line layout: ``[<date> <time>] [<LEVEL>]: <message>``."""
    return f"[{timestamp}] [{level.upper()}]: {message}"


def _format_exception(error: BaseException) -> str:
    stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return f"{error} \n{stack.rstrip()}"


def _json_fallback(value: Any) -> Any:
    if isinstance(value, BaseException):
        return _format_exception(value)
    if hasattr(value, "__dict__"):
        return vars(value)
    return str(value)


def _dumps(value: Any) -> str:
    try:
        return json.dumps(value, default=_json_fallback, ensure_ascii=False)
    except (TypeError, ValueError):
        # Cycles and non-scalar dict keys
        return repr(value)


def render_value(value: Any) -> str:
    """Flatten a single log argument to text.

    Exceptions become ``"<message> \\n<traceback>"``, also when nested in a
    container; containers and plain objects are serialized as JSON including
    every instance attribute (underscore-prefixed ones too), or ``repr()``-ed
    when they cannot be; anything else is ``str()``-ed.
    """
    if isinstance(value, BaseException):
        return _format_exception(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        return _dumps(value)
    if value is None or isinstance(value, (bool, int, float)):
        return str(value)
    if hasattr(value, "__dict__"):
        return _dumps(vars(value))
    return str(value)


def render_message(values: Iterable[Any]) -> str:
    """Join flattened values with a single space."""
    return " ".join(render_value(value) for value in values)
