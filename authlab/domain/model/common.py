"""Base model for all domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for all domain models.

    Entities are snapshots handed out by the identity provider or held by the
    flow; they are immutable and replaced wholesale on change.
    """

    model_config = ConfigDict(frozen=True)
