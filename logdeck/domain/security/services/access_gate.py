# Path: logdeck/domain/security/services/access_gate.py
import secrets
from typing import Callable, Optional

from logdeck.shared.config.settings import ServerConfig
from logdeck.shared.errors.domain.security import ForbiddenAccessError, UnauthorizedAccessError
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.utilities.network import parse_basic_auth

logger = LoggingService(LogConfig())


def _same(given: str, expected: Optional[str]) -> bool:
    if expected is None:
        return False
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


class AccessGate:
    """IP allow-list then HTTP Basic credential check, stopping at the first failure."""

    def __init__(self, config_provider: Callable[[], ServerConfig]):
        self._config_provider = config_provider

    def check(self, client_ip: str, authorization: Optional[str]) -> None:
        """
        Admit or reject one request.

        Args:
            client_ip: Remote address of the peer.
            authorization: Raw ``Authorization`` header, if any.

        Raises:
            ForbiddenAccessError: If the address is not on the allow-list.
            UnauthorizedAccessError: If credentials are missing, malformed or wrong.
        """
        server = self._config_provider()
        if not server.auth_enabled:
            return

        if not server.bypass_ip_check and client_ip not in server.allowed_ips:
            logger.warning("Rejected client outside allow-list", context={"client_ip": client_ip})
            raise ForbiddenAccessError(client_ip=client_ip)

        credentials = parse_basic_auth(authorization)
        if credentials is None:
            raise UnauthorizedAccessError()

        user, password = credentials
        user_ok = _same(user, server.auth.user)
        password_ok = _same(password, server.auth.password)
        if not (user_ok and password_ok):
            logger.warning("Rejected invalid dashboard credentials", context={"client_ip": client_ip, "user": user})
            raise UnauthorizedAccessError(message="Invalid credentials.", challenge=False)
