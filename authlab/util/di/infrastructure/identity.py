"""Identity provider infrastructure providers."""

from dishka import Scope, provide

from authlab.adapter.firebase.client import FirebaseIdentityProvider
from authlab.config import FirebaseSettings
from authlab.domain.service.identity_provider import IdentityProvider
from authlab.util.di.base import ProviderBase
from authlab.util.error import ConfigurationError


class IdentityProviderProvider(ProviderBase):
    """Identity provider component base."""

    __mock_component__ = "identity_provider"


class ProdIdentityProviderProvider(IdentityProviderProvider):
    """Production identity provider backed by Firebase Authentication."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_provider(
        self, firebase_settings: FirebaseSettings
    ) -> IdentityProvider:
        """Provide Firebase identity provider.

        Raises:
            ConfigurationError: If the Firebase API key is not configured
        """
        if not firebase_settings.api_key:
            raise ConfigurationError("Firebase API key must be configured")

        return FirebaseIdentityProvider(
            api_key=firebase_settings.api_key,
            base_url=firebase_settings.identity_toolkit_url,
            secure_token_url=firebase_settings.secure_token_url,
            timeout=firebase_settings.timeout,
        )
