"""Main entry point for the dialogs webhook service."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    # Import after .env is loaded so settings and logging see it
    from dialogs.api import create_fastapi_app
    from dialogs.app import Application
    from dialogs.config import Settings
    from dialogs.logging_config import setup_logging

    setup_logging()
    settings = Settings.from_env()
    app = create_fastapi_app(Application(settings))

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
