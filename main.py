"""
PULSE SIGNAL — Main Entry Point
Serves the HTTP API; request logs come from the app middleware, not uvicorn.
"""
import uvicorn
from pulse_signal.config.settings import get_settings
from pulse_signal.utils.logger import setup_logging, get_logger

logger = get_logger("main")


def run_api():
    """Run the FastAPI application."""
    settings = get_settings()
    setup_logging()
    logger.info("starting_pulse_signal", version=settings.version, port=settings.port)
    uvicorn.run(
        "pulse_signal.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=settings.debug,
    )


if __name__ == "__main__":
    run_api()
