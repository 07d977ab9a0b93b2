"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FirebaseSettings(BaseModel):
    """Firebase Authentication configuration."""

    # Web API key of the Firebase project (required by the production adapter)
    # Can be set via FIREBASE__API_KEY env var
    api_key: str | None = None

    # Identity Toolkit base URL
    # Point at the auth emulator in development, e.g.
    # http://localhost:9099/identitytoolkit.googleapis.com/v1
    identity_toolkit_url: str = "https://identitytoolkit.googleapis.com/v1"

    # Secure Token API base URL, used to refresh expired id tokens
    # Emulator: http://localhost:9099/securetoken.googleapis.com/v1
    secure_token_url: str = "https://securetoken.googleapis.com/v1"

    # Per-request timeout in seconds; a timeout surfaces as a network failure
    timeout: float = 30.0

    # Console linked from remediation hints (e.g. enabling Email/Password)
    console_url: str = "https://console.firebase.google.com/"


class UpgradeSettings(BaseModel):
    """Upgrade flow configuration."""

    # Start an anonymous session on startup when the provider has none
    start_anonymous_session: bool = False


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, nested with ``__``:

        ENVIRONMENT=production
        FIREBASE__API_KEY=AIza...
        FIREBASE__IDENTITY_TOOLKIT_URL=http://localhost:9099/identitytoolkit.googleapis.com/v1
        UPGRADE__START_ANONYMOUS_SESSION=true
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows FIREBASE__API_KEY syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Git commit SHA (loaded from version.txt file or defaults to "unknown")
    git_sha: str = "unknown"

    host: str = "localhost"
    port: int = 8000

    # Nested settings
    firebase: FirebaseSettings = FirebaseSettings()
    upgrade: UpgradeSettings = UpgradeSettings()
    observability: ObservabilitySettings = ObservabilitySettings()

    @model_validator(mode="after")
    def load_version(self) -> "Settings":
        """Load git SHA from the version file when present."""
        if self.git_sha == "unknown":
            self.git_sha = self._load_git_sha()
        return self

    @staticmethod
    def _load_git_sha() -> str:
        """Load git SHA from version file.

        Returns:
            Git SHA if version file exists, otherwise "unknown"
        """
        version_file = Path("/app/version.txt")
        if version_file.exists():
            try:
                return version_file.read_text().strip()
            except OSError:
                return "unknown"
        return "unknown"
