"""Logfire setup for AuthLab.

Domain services and adapters emit spans and events directly:

    with logfire.span("upgrade_flow.attempt_link", uid=identity.uid):
        ...
    logfire.warn("Credential link failed", code=failure.code)

Passwords and id tokens are never passed as attributes.
"""

import logfire
from fastapi import FastAPI

from authlab.config import ObservabilitySettings, Settings


def _should_send(observability: ObservabilitySettings) -> bool:
    # Explicit flag wins; otherwise send only when a token is configured
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once at process start.

    Environment:
        OBSERVABILITY__LOGFIRE_TOKEN: enables sending to Logfire cloud
        OBSERVABILITY__SEND_TO_LOGFIRE: forces sending on or off

    Args:
        settings: Application settings
    """
    observability = settings.observability
    send_to_logfire = _should_send(observability)

    logfire.configure(
        service_name="authlab",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        git_sha=settings.git_sha,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace incoming requests.

    Headers and bodies are not captured; link and override requests carry
    passwords.

    Args:
        app: FastAPI application instance
    """
    logfire.instrument_fastapi(app, capture_headers=False)


def instrument_httpx() -> None:
    """Trace outbound Identity Toolkit calls."""
    logfire.instrument_httpx()
