# Path: logdeck/infrastructure/setup/router_setup.py
from importlib import import_module
from pathlib import Path

from fastapi import APIRouter, FastAPI

from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())

PACKAGE_ROOT = Path(__file__).resolve().parent.parent.parent
ENDPOINTS_DIR = PACKAGE_ROOT / "api" / "v1" / "endpoints"


def setup_routers(app: FastAPI):
    """
    Automatically register all routers found under logdeck/api/v1/endpoints.

    Args:
        app: The FastAPI application instance.
    """
    base_router = APIRouter()
    registered_count = 0

    if not ENDPOINTS_DIR.exists():
        logger.error(
            "Routers directory not found, skipping router registration",
            context={"path": str(ENDPOINTS_DIR)},
        )
        app.include_router(base_router)
        return

    for file_path in sorted(ENDPOINTS_DIR.rglob("*.py")):
        if file_path.name.startswith("_"):
            continue

        relative_path = file_path.relative_to(PACKAGE_ROOT).with_suffix("")
        module_path = f"{PACKAGE_ROOT.name}.{relative_path.as_posix().replace('/', '.')}"

        try:
            module = import_module(module_path)
        except ImportError as e:
            logger.error(
                "Failed to import router module",
                context={"module": module_path, "error": str(e)},
            )
            continue

        if hasattr(module, "router"):
            base_router.include_router(module.router)
            registered_count += 1
            logger.debug("Registered router", context={"module": module_path})
        else:
            logger.debug("Skipped module without router", context={"module": module_path})

    app.include_router(base_router)

    if registered_count == 0:
        logger.warning("No routers were registered", context={"directory": str(ENDPOINTS_DIR)})
    else:
        logger.info(
            "All routers registered",
            context={
                "count": registered_count,
                "routes": [getattr(route, "path", None) for route in base_router.routes],
            },
        )
