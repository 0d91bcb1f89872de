# Path: logdeck/api/v1/endpoints/dashboard.py
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse

from logdeck.api.v1.dependencies.log_manager import get_log_manager
from logdeck.api.v1.templates.dashboard import render_dashboard
from logdeck.domain.logs.services.log_manager import LogManager

router = APIRouter(tags=["dashboard"])


@router.get(
    "/",
    status_code=status.HTTP_200_OK,
    response_class=HTMLResponse,
    summary="Dashboard page",
    description="Single-page log viewer with live updates, search, metrics and file downloads."
)
async def dashboard_endpoint(
        request: Request,
        manager: Annotated[LogManager, Depends(get_log_manager)]
) -> HTMLResponse:
    return HTMLResponse(render_dashboard(manager.get_config()))
