"""
Main module entry point.

This allows running the API server as: python -m aquacast.main
"""

import uvicorn

from .config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "aquacast.main.app:app",
        host=settings.ge.host,
        port=settings.ge.port,
        reload=settings.ge.reload,
        log_level=settings.logging.level.value.lower(),
    )


if __name__ == "__main__":
    main()
