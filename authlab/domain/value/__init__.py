"""Domain value objects for AuthLab."""

from authlab.domain.value.identifiers import IdentityId
from authlab.domain.value.types import (
    Classification,
    ConflictDecision,
    ConflictOption,
    ConflictOptionKind,
    FlowOutcome,
    FlowState,
    FlowStatus,
    ProviderOperation,
    ResetReport,
)

__all__ = [
    # Identifiers
    "IdentityId",
    # Types
    "Classification",
    "ConflictDecision",
    "ConflictOption",
    "ConflictOptionKind",
    "FlowOutcome",
    "FlowState",
    "FlowStatus",
    "ProviderOperation",
    "ResetReport",
]
