"""
Main FastAPI application entry point.

    uvicorn pkceflow.main:app
"""

from pkceflow.application import create_app
from pkceflow.config import get_settings
from pkceflow.core.logging import intercept_standard_logging

# Intercept logs from uvicorn and other libraries
intercept_standard_logging()

app = create_app()


def run() -> None:
    """Run the development server with settings from the environment."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "pkceflow.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )


if __name__ == "__main__":
    run()
