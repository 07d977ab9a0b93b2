"""Upgrade status projection shared by the upgrade use cases."""

from datetime import datetime

from pydantic import BaseModel

from authlab.config import Settings
from authlab.domain.model.identity import Identity
from authlab.domain.value import (
    ConflictOptionKind,
    FlowOutcome,
    FlowState,
    FlowStatus,
)

# Outcomes whose remediation points at the provider console
CONSOLE_REMEDIATION_OUTCOMES = frozenset({FlowOutcome.PROVIDER_DISABLED})


class IdentityInfo(BaseModel):
    """Current session identity."""

    uid: str
    email: str | None
    is_anonymous: bool
    created_at: datetime | None


class ConflictOptionInfo(BaseModel):
    """One branch of the conflict decision."""

    kind: ConflictOptionKind
    title: str
    description: str
    available: bool
    warning: str | None
    unavailable_reason: str | None


class ConflictInfo(BaseModel):
    """Open conflict decision."""

    email: str
    options: list[ConflictOptionInfo]


class UpgradeStatusResponse(BaseModel):
    """Upgrade status response."""

    identity: IdentityInfo | None
    can_upgrade: bool  # Current identity is transient
    state: FlowState
    outcome: FlowOutcome
    message: str | None
    remediation: str | None
    remediation_url: str | None
    retryable: bool
    provider_code: str | None
    candidate_email: str | None
    conflict: ConflictInfo | None
    reset_available: bool


def build_status_response(
    identity: Identity | None, status: FlowStatus, settings: Settings
) -> UpgradeStatusResponse:
    """Project the current identity and flow status.

    Args:
        identity: Current session identity
        status: Flow snapshot
        settings: Application settings (console URL for remediation links)

    Returns:
        Upgrade status response
    """
    classification = status.classification
    remediation_url = (
        settings.firebase.console_url
        if classification is not None
        and classification.outcome in CONSOLE_REMEDIATION_OUTCOMES
        else None
    )

    return UpgradeStatusResponse(
        identity=(
            IdentityInfo(
                uid=identity.uid,
                email=identity.email,
                is_anonymous=identity.is_anonymous,
                created_at=identity.created_at,
            )
            if identity
            else None
        ),
        can_upgrade=bool(identity and identity.is_transient),
        state=status.state,
        outcome=status.outcome,
        message=classification.message if classification else None,
        remediation=classification.remediation if classification else None,
        remediation_url=remediation_url,
        retryable=classification.retryable if classification else False,
        provider_code=classification.provider_code if classification else None,
        candidate_email=status.candidate_email,
        conflict=(
            ConflictInfo(
                email=status.conflict.email,
                options=[
                    ConflictOptionInfo(
                        kind=option.kind,
                        title=option.title,
                        description=option.description,
                        available=option.available,
                        warning=option.warning,
                        unavailable_reason=option.unavailable_reason,
                    )
                    for option in status.conflict.options
                ],
            )
            if status.conflict
            else None
        ),
        reset_available=status.reset_available,
    )
