"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI

from authlab.interface.api.routes import health, session, upgrade
from authlab.util.di.container import create_container, setup_di
from authlab.util.observability import instrument_fastapi, instrument_httpx


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Releases the identity subscription and closes the provider
    await app.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container (defaults to the production container)
    """
    instrument_httpx()

    app_instance = FastAPI(
        title="AuthLab API",
        description="Upgrade anonymous sessions to permanent email/password accounts",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(session.router)
    app_instance.include_router(upgrade.router)

    return app_instance
