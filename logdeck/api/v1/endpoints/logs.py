# Path: logdeck/api/v1/endpoints/logs.py
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from logdeck.api.v1.dependencies.log_manager import get_log_manager
from logdeck.domain.logs.services.log_manager import LogManager
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.models.responses.base import StandardResponse
from logdeck.shared.utilities.network import extract_client_ip

router = APIRouter(tags=["logs"])

logger = LoggingService(LogConfig())

EMPTY_LOGS_TEXT = "No logs yet!"
CSV_FILENAME = "logs.csv"


@router.get(
    "/logs",
    status_code=status.HTTP_200_OK,
    summary="Filtered log view",
    description="File history merged with buffered entries, newest first, as plain text, JSON or CSV.",
    responses={
        200: {
            "description": "Matching entries",
            "content": {
                "text/plain": {"example": "[2024-05-01 10:00:00] [ERROR]: disk full"},
                "application/json": {
                    "example": {
                        "data": [
                            {
                                "level": "error",
                                "timestamp": "2024-05-01 10:00:00",
                                "message": "disk full",
                                "formattedMessage": "[2024-05-01 10:00:00] [ERROR]: disk full"
                            }
                        ],
                        "meta": {"message": "Logs retrieved successfully.", "status": "success", "code": 200}
                    }
                },
                "text/csv": {"example": "Timestamp,Level,Message\n\"2024-05-01 10:00:00\",\"error\",\"disk full\""}
            }
        }
    }
)
async def get_logs_endpoint(
        request: Request,
        manager: Annotated[LogManager, Depends(get_log_manager)],
        level: Annotated[Optional[str], Query(description="Level to match (case-insensitive)")] = None,
        search: Annotated[Optional[str], Query(description="Case-insensitive substring of the message")] = None,
        start_date: Annotated[Optional[str], Query(alias="startDate", description="Inclusive lower bound")] = None,
        end_date: Annotated[Optional[str], Query(alias="endDate", description="Inclusive upper bound")] = None,
        format: Annotated[Literal["text", "json", "csv"], Query(description="Response format")] = "text"
) -> Response:
    """Query the log history."""
    entries = await manager.filter_logs(level=level, search=search, start_date=start_date, end_date=end_date)

    logger.debug("Log query served", context={
        "client_ip": extract_client_ip(request),
        "format": format,
        "level": level,
        "count": len(entries)
    })

    if format == "json":
        body = StandardResponse.success(
            data=[entry.to_wire() for entry in entries],
            message="Logs retrieved successfully.",
            code=status.HTTP_200_OK
        )
        return JSONResponse(content=body.model_dump())

    if format == "csv":
        return Response(
            content=manager.export_logs_as_csv(entries),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'}
        )

    if not entries:
        return PlainTextResponse(EMPTY_LOGS_TEXT)
    return PlainTextResponse("\n".join(entry.formatted_message for entry in entries))
