"""Main FastAPI application entry point."""

from pathlib import Path

from dotenv import load_dotenv

from view_renderer.config import get_settings
from view_renderer.core.app_factory import create_app
from view_renderer.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

settings = get_settings()

# Configure structured logging (JSON to file + console)
setup_logging(settings.log_level)

# Create application
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "view_renderer.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
