"""Domain model entities for AuthLab."""

from authlab.domain.model.candidate import CredentialCandidate
from authlab.domain.model.identity import Identity

__all__ = [
    "CredentialCandidate",
    "Identity",
]
