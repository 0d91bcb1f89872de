# Path: logdeck/api/v1/endpoints/realtime.py
import json
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from logdeck.api.v1.dependencies.log_manager import get_log_manager
from logdeck.domain.logs.services.log_manager import LogManager
from logdeck.domain.security.services.access_gate import AccessGate
from logdeck.shared.errors.base import BaseError
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.utilities.constants import RealtimeEvent
from logdeck.shared.utilities.network import extract_client_ip

router = APIRouter(tags=["realtime"])

logger = LoggingService(LogConfig())


async def handle_client_message(manager: LogManager, websocket: WebSocket, packet: Any) -> None:
    """Answer one client request; unknown or malformed requests get an ``error`` event."""
    if not isinstance(packet, dict):
        await manager.broadcaster.send(websocket, RealtimeEvent.ERROR.value, {"message": "Malformed message."})
        return

    event = packet.get("event")
    data = packet.get("data") or {}
    if event == RealtimeEvent.REQUEST_LOGS.value:
        filters: Dict[str, Any] = data if isinstance(data, dict) else {}
        entries = await manager.filter_logs(
            level=filters.get("level"),
            search=filters.get("search"),
            start_date=filters.get("startDate"),
            end_date=filters.get("endDate")
        )
        await manager.broadcaster.send(
            websocket, RealtimeEvent.LOGS_DATA.value, [entry.to_wire() for entry in entries]
        )
    elif event == RealtimeEvent.REQUEST_METRICS.value:
        snapshot = manager.get_metrics()
        if snapshot is None:
            await manager.broadcaster.send(websocket, RealtimeEvent.ERROR.value, {"message": "Metrics are disabled."})
        else:
            await manager.broadcaster.send(websocket, RealtimeEvent.METRICS_UPDATE.value, snapshot.to_wire())
    else:
        await manager.broadcaster.send(websocket, RealtimeEvent.ERROR.value, {"message": f"Unknown event: {event}"})


@router.websocket("/ws")
async def realtime_endpoint(
        websocket: WebSocket,
        manager: Annotated[LogManager, Depends(get_log_manager)]
):
    """Live dashboard channel: initialLogs on connect, then newLog/metricsUpdate/logRotation pushes."""
    client_ip = extract_client_ip(websocket)
    if not manager.get_config().server_config.enable_realtime:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Realtime updates are disabled.")
        return

    gate = AccessGate(lambda: manager.get_config().server_config)
    try:
        gate.check(client_ip, websocket.headers.get("authorization"))
    except BaseError as e:
        logger.info("Rejected realtime client", context={"client_ip": client_ip, "error_code": e.error_code})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)
        return

    await websocket.accept()
    await manager.connect_client(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                packet = json.loads(raw)
            except ValueError:
                packet = None
            await handle_client_message(manager, websocket, packet)
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect_client(websocket)
