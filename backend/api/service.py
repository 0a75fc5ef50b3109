"""
API service entrypoint.
Runs the FastAPI application via uvicorn.
"""
from __future__ import annotations

import uvicorn

from shared.config import get_settings


def main() -> None:
    """Start the API service."""
    settings = get_settings()

    uvicorn.run(
        "api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        access_log=False,  # request logging happens in middleware
    )


if __name__ == "__main__":
    main()
