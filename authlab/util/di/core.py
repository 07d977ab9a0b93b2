"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from authlab.config import FirebaseSettings, Settings
from authlab.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_firebase_settings(self, settings: Settings) -> FirebaseSettings:
        """Provide Firebase settings."""
        return settings.firebase
