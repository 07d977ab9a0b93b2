"""Test configuration and fixtures."""

import pytest

from authlab.adapter.memory.provider import InMemoryIdentityProvider
from authlab.domain.model.candidate import CredentialCandidate

ANON_UID = "A1"
EMAIL = "u@ex.com"
PASSWORD = "Secret1!"


@pytest.fixture
def provider() -> InMemoryIdentityProvider:
    """In-memory provider with an anonymous session for uid ``A1``."""
    provider = InMemoryIdentityProvider()
    provider.start_anonymous_session(ANON_UID)
    return provider


@pytest.fixture
def candidate() -> CredentialCandidate:
    """Candidate used across the upgrade scenarios."""
    return CredentialCandidate.of(EMAIL, PASSWORD)
