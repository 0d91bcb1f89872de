# Path: logdeck/infrastructure/realtime/broadcaster.py
from typing import Any, Dict, List, Protocol

from logdeck.domain.logs.models.entry import LogEntry
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.utilities.constants import RealtimeEvent

logger = LoggingService(LogConfig())


class RealtimeSession(Protocol):
    """Anything that can push a JSON message to one dashboard viewer."""

    async def send_json(self, data: Any) -> None:
        ...


class RealtimeBroadcaster:
    """Fans events out to every open dashboard session.

    Delivery is best-effort: a session whose send fails is dropped and
    misses later events.
    """

    def __init__(self):
        self._sessions: Dict[int, RealtimeSession] = {}

    @property
    def connected_clients(self) -> int:
        return len(self._sessions)

    async def connect(self, session: RealtimeSession, initial_entries: List[LogEntry]) -> None:
        """Register ``session`` and send it the initial snapshot."""
        self._sessions[id(session)] = session
        logger.info("Dashboard client connected", context={"clients": self.connected_clients})
        await self.send(session, RealtimeEvent.INITIAL_LOGS.value, [entry.to_wire() for entry in initial_entries])

    def disconnect(self, session: RealtimeSession) -> None:
        if self._sessions.pop(id(session), None) is not None:
            logger.info("Dashboard client disconnected", context={"clients": self.connected_clients})

    async def send(self, session: RealtimeSession, event: str, data: Any) -> bool:
        try:
            await session.send_json({"event": event, "data": data})
            return True
        except Exception as e:
            logger.warning("Dropping unreachable dashboard client", context={"event": event, "error": str(e)})
            self.disconnect(session)
            return False

    async def broadcast(self, event: str, data: Any) -> int:
        """Send ``event`` to all sessions; returns how many received it."""
        delivered = 0
        for session in list(self._sessions.values()):
            if await self.send(session, event, data):
                delivered += 1
        return delivered
