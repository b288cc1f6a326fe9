"""Run with: python -m file_organizer_ai"""

import uvicorn

from file_organizer_ai.config import get_settings


def run() -> None:
    """Serve the organizer API with host, port and log level from settings."""
    settings = get_settings()
    uvicorn.run(
        "file_organizer_ai.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
