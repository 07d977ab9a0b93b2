"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Components with a swappable implementation (production vs. test double)
Component = Literal["identity_provider"]


class ProviderBase(Provider):
    """Base for all AuthLab DI providers.

    A provider class with subclasses is a mockable component; its subclasses
    are told apart by ``__is_mock__``.

    Attributes:
        __mock_component__: Component name, None for concrete providers
        __is_mock__: Whether this is the test double implementation
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
