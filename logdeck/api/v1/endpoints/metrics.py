# Path: logdeck/api/v1/endpoints/metrics.py
from typing import Annotated

from fastapi import APIRouter, Depends, status

from logdeck.api.v1.dependencies.log_manager import get_log_manager
from logdeck.domain.logs.services.log_manager import LogManager
from logdeck.shared.errors.domain.security import ResourceNotFoundError
from logdeck.shared.models.responses.base import StandardResponse

router = APIRouter(tags=["metrics"])


@router.get(
    "/metrics",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Metrics snapshot",
    description="Totals, per-level counts and per-minute samples. Answers 404 when metrics are disabled."
)
async def get_metrics_endpoint(
        manager: Annotated[LogManager, Depends(get_log_manager)]
) -> StandardResponse:
    snapshot = manager.get_metrics()
    if snapshot is None or not manager.get_config().metrics_endpoint_enabled:
        raise ResourceNotFoundError(resource="/metrics")
    return StandardResponse.success(
        data=snapshot.to_wire(),
        message="Metrics retrieved successfully.",
        code=status.HTTP_200_OK
    )
