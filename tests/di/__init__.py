"""Mock providers for testing."""

from .identity import (
    FixedIdentityProviderProvider,
    GatedIdentityProvider,
    MockIdentityProviderProvider,
)
from .container import build_test_container, mockable_components

__all__ = [
    "FixedIdentityProviderProvider",
    "GatedIdentityProvider",
    "MockIdentityProviderProvider",
    "build_test_container",
    "mockable_components",
]
