# Path: main.py
"""Demo: log a few entries and serve the dashboard on http://127.0.0.1:9001."""
import asyncio
import os

from colorama import just_fix_windows_console

from logdeck.domain.logs.services.log_manager import LogManager
from logdeck.shared.errors.base import BaseError
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())

DEMO_OPTIONS = {
    "levels": ["info", "warn", "error", "debug"],
    "logDir": "logs",
    "enableMetrics": True,
    "maxFileSize": 64 * 1024,
    "serverConfig": {
        "startWebServer": True,
        "auth": {
            "user": os.getenv("LOGDECK_USER", "admin"),
            "pass": os.getenv("LOGDECK_PASSWORD", "admin")
        }
    }
}


async def run_demo():
    manager = LogManager(DEMO_OPTIONS)
    manager.on("logRotation", lambda rotation: logger.info("Log rotated", context=rotation))
    try:
        await manager.start_server()
        await manager.method("info")("Demo started", {"pid": os.getpid()})
        await manager.method("warn")("Disk usage at", 91, "%")
        try:
            raise RuntimeError("Something went wrong")
        except RuntimeError as exc:
            await manager.method("error")(exc)

        counter = 0
        while True:
            counter += 1
            await manager.method("debug")("Heartbeat", counter)
            await asyncio.sleep(5)
    finally:
        await manager.close()


def main():
    just_fix_windows_console()
    try:
        asyncio.run(run_demo())
    except KeyboardInterrupt:
        logger.info("Demo stopped", context={})
    except BaseError as e:
        logger.error("Demo failed", context={"error_code": e.error_code, "error": e.message})
        raise


if __name__ == "__main__":
    main()
