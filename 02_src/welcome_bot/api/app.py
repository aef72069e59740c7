"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..app import Application
from .routes import control, conversations, messaging


def create_fastapi_app(application: Application) -> FastAPI:
    """Create and configure FastAPI application around a not yet started Application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        sim_instance = control.get_sim_instance()
        yield
        # Shutdown: stop the scenario first so it stops submitting
        if sim_instance:
            await sim_instance.stop()
        await application.stop()

    fastapi_app = FastAPI(
        title="Welcome Bot API",
        description="Onboarding dialogue engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    fastapi_app.include_router(messaging.create_messaging_router(application))
    fastapi_app.include_router(conversations.create_conversations_router(application))
    fastapi_app.include_router(control.create_control_router(application))

    return fastapi_app
