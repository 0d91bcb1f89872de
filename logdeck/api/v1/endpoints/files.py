# Path: logdeck/api/v1/endpoints/files.py
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse

from logdeck.api.v1.dependencies.log_manager import get_log_manager
from logdeck.domain.logs.services.log_manager import LogManager
from logdeck.shared.errors.domain.security import ResourceNotFoundError
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.models.responses.base import StandardResponse
from logdeck.shared.utilities.network import extract_client_ip

router = APIRouter(tags=["files"])

logger = LoggingService(LogConfig())


@router.get(
    "/files",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Log file listing",
    description="The active log file and its archives with size and creation time, newest first."
)
async def list_files_endpoint(
        manager: Annotated[LogManager, Depends(get_log_manager)]
) -> StandardResponse:
    files = [
        {"name": info.name, "size": info.size, "created": info.created}
        for info in manager.get_log_files()
    ]
    return StandardResponse.success(
        data=files,
        message="Log files retrieved successfully.",
        code=status.HTTP_200_OK
    )


@router.get(
    "/download/{name}",
    status_code=status.HTTP_200_OK,
    summary="Download a log file",
    description="Raw download of a listed log file; gzip archives are served as application/gzip."
)
async def download_file_endpoint(
        request: Request,
        name: str,
        manager: Annotated[LogManager, Depends(get_log_manager)]
) -> FileResponse:
    """Only files that appear in the listing are served."""
    match = next((info for info in manager.get_log_files() if info.name == name), None)
    if match is None:
        raise ResourceNotFoundError(resource=name)

    media_type = "application/gzip" if name.endswith(".gz") else "text/plain"
    logger.info("Log file downloaded", context={"file": name, "client_ip": extract_client_ip(request)})
    return FileResponse(match.path, media_type=media_type, filename=name)
