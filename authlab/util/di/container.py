"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from authlab.util.di import PROVIDERS, get_provider


def create_container() -> AsyncContainer:
    """Build the production container.

    The identity provider is the Firebase adapter; settings come from the
    environment. Closing the container releases the identity observer's
    subscription.

    Returns:
        DI container with production providers

    Raises:
        ConfigurationError: On first resolution of the identity provider if
            no Firebase API key is configured
    """
    providers = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(*providers, FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the FastAPI app.

    Args:
        app: FastAPI application
        container: DI container
    """
    setup_dishka(container, app)
