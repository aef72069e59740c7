"""Main entry point for Welcome Bot."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from welcome_bot.api import create_fastapi_app
from welcome_bot.api.routes import control
from welcome_bot.app import Application
from welcome_bot.config import load_settings
from welcome_bot.logging_config import setup_logging
from sim import Sim


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    settings = load_settings()
    setup_logging(settings.log_level, settings.log_file)

    # SIM drives the API it runs next to
    control.set_sim_instance(Sim(api_url=settings.api_url))

    app = create_fastapi_app(Application(settings))

    # uvicorn turns SIGINT/SIGTERM into lifespan shutdown
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
