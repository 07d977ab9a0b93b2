"""Dependency injection for AuthLab.

``PROVIDERS`` lists every provider base. A base with subclasses is a
mockable component: production code picks the subclass with
``__is_mock__ = False``, the test container the one with ``True``.
"""

from typing import Type

from authlab.util.di.application import ProdApplicationProvider
from authlab.util.di.base import Component, ProviderBase
from authlab.util.di.core import ProdConfigProvider
from authlab.util.di.domain import ProdDomainProvider
from authlab.util.di.infrastructure import (
    IdentityProviderProvider,
    ProdIdentityProviderProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Mockable
    IdentityProviderProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve the provider class to instantiate for a base.

    Args:
        base: Entry from ``PROVIDERS``
        use_mock: Pick the test double of a mockable component

    Returns:
        ``base`` itself for concrete providers, else the matching subclass

    Raises:
        ValueError: If the component has no implementation of the requested kind
    """
    implementations = base.__subclasses__()
    if not implementations:
        return base

    for implementation in implementations:
        if getattr(implementation, "__is_mock__", False) == use_mock:
            return implementation

    kind = "mock" if use_mock else "production"
    name = base.__mock_component__ or base.__name__
    raise ValueError(f"No {kind} implementation for {name}")


__all__ = [
    "Component",
    "IdentityProviderProvider",
    "PROVIDERS",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdIdentityProviderProvider",
    "ProviderBase",
    "get_provider",
]
