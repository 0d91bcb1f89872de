# Path: logdeck/api/v1/dependencies/log_manager.py
from starlette.requests import HTTPConnection

from logdeck.domain.logs.services.log_manager import LogManager


def get_log_manager(connection: HTTPConnection) -> LogManager:
    """The engine the application was built for."""
    return connection.app.state.log_manager
