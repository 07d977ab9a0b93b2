"""Infrastructure providers."""

# Import bases
from .identity import IdentityProviderProvider

# Import implementations (needed for __subclasses__())
from .identity import ProdIdentityProviderProvider  # noqa: F401

__all__ = [
    "IdentityProviderProvider",
    "ProdIdentityProviderProvider",
]
