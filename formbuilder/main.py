"""
ASGI entry point.

Usage:
    - Direct: python -m formbuilder.main
    - ASGI server: uvicorn formbuilder.main:app
"""

from formbuilder import create_app
from formbuilder.common.logger import get_logger
from formbuilder.config import settings

logger = get_logger("main")

app = create_app(settings)


def run() -> None:
    """Serve the application with uvicorn using HOST, PORT and RELOAD from settings."""
    import uvicorn

    logger.info(f"Serving {settings.PROJECT_NAME} on {settings.HOST}:{settings.PORT} (reload: {settings.RELOAD})")
    uvicorn.run(
        "formbuilder.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
