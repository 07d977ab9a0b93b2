"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any


class BaseUseCase(ABC):
    """Base use case.

    Upgrade use cases read the current identity from the observer, drive the
    upgrade flow and project the result for the HTTP layer.
    """

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        """Run the use case for a single request."""
