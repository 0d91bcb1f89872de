# Path: logdeck/shared/logging/filters.py
import logging

from logdeck.shared.utilities.helpers import sanitize_data


class SensitiveDataFilter(logging.Filter):
    """Filter to mask credentials in structured log context."""

    SENSITIVE_FIELDS = {
        "password",
        "pass",
        "authorization",
        "token",
        "api_key",
        "uri"
    }

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask sensitive fields in log record."""
        context = getattr(record, "extra_context", None)
        if isinstance(context, dict):
            masked = {}
            for key, value in context.items():
                if key.lower() in self.SENSITIVE_FIELDS and isinstance(value, str):
                    masked[key] = sanitize_data(value)
                else:
                    masked[key] = value
            record.extra_context = masked
        return True
