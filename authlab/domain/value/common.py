"""Base class for value objects."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Base class for all value objects.

    Flow snapshots, classifications and conflict options are immutable and
    compared by value.
    """

    model_config = ConfigDict(frozen=True)
