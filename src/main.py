"""
Main application entry point.

Runs the dashboard API with uvicorn: `python -m src.main`.
"""

import uvicorn

from .config.settings import settings


def main() -> None:
    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=settings.dashboard_api_port,
        log_level=settings.dashboard_api_log_level.lower(),
    )


if __name__ == "__main__":
    main()
