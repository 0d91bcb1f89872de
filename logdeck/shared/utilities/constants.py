# Path: logdeck/shared/utilities/constants.py
from enum import Enum, IntEnum


class HttpStatus(IntEnum):
    """HTTP status codes used by the dashboard surface."""
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503


class LogLevel(str, Enum):
    """Levels of the operational (internal) logger."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DomainErrorCode(str, Enum):
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"
    FORBIDDEN_ACCESS = "FORBIDDEN_ACCESS"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class InfraErrorCode(str, Enum):
    DATABASE_CONNECTION = "DATABASE_CONNECTION"
    MONGO_ERROR = "MONGO_ERROR"
    SMTP_SERVICE = "SMTP_SERVICE"


class RealtimeEvent(str, Enum):
    """Event names exchanged over the dashboard WebSocket."""
    NEW_LOG = "newLog"
    METRICS_UPDATE = "metricsUpdate"
    LOG_ROTATION = "logRotation"
    INITIAL_LOGS = "initialLogs"
    REQUEST_LOGS = "requestLogs"
    LOGS_DATA = "logsData"
    REQUEST_METRICS = "requestMetrics"
    ERROR = "error"


class BusEvent(str, Enum):
    """Topics published on the in-process event bus."""
    LOG = "log"
    CONFIG_CHANGED = "configChanged"
    LOG_ROTATION = "logRotation"


DEFAULT_LEVELS = ["info", "warn", "error", "debug"]
DEFAULT_ERROR_LEVEL = "error"
DEFAULT_LOG_FILE_NAME = "logs.txt"
DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB
DEFAULT_BUFFER_SIZE = 1000
DEFAULT_SERVER_PORT = 9001
DEFAULT_ALLOWED_IPS = ["127.0.0.1", "::1"]

MINUTE_MS = 60_000
MAX_MINUTE_SAMPLES = 60
INITIAL_LOGS_COUNT = 50

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
AUTH_REALM = "logdeck"
