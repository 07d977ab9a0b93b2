"""Domain value objects for the account upgrade flow.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from authlab.domain.value.common import ValueObject


class FlowState(str, Enum):
    """State of the link/resolve state machine."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    LINKED = "linked"
    CONFLICT = "conflict"
    FAILED = "failed"
    OVERRIDE_SIGNED_IN = "override_signed_in"
    OVERRIDE_FAILED = "override_failed"
    RESET_OFFERED = "reset_offered"


class FlowOutcome(str, Enum):
    """Classified result of the most recent flow attempt.

    Exactly one outcome is active at a time.
    """

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    LINK_SUCCEEDED = "link_succeeded"
    CONFLICT_CREDENTIAL_IN_USE = "conflict_credential_in_use"
    PROVIDER_DISABLED = "provider_disabled"
    NETWORK_FAILURE = "network_failure"
    WEAK_CREDENTIAL = "weak_credential"
    INVALID_FORMAT = "invalid_format"
    OTHER_FAILURE = "other_failure"
    SIGN_IN_SUCCEEDED = "sign_in_succeeded"
    SIGN_IN_WRONG_SECRET = "sign_in_wrong_secret"


class ProviderOperation(str, Enum):
    """Provider write that produced a failure.

    Classification rules can be restricted to one operation.
    """

    LINK = "link"
    SIGN_IN = "sign_in"


class ConflictOptionKind(str, Enum):
    """Branches offered when a credential is already in use."""

    MERGE = "merge"
    OVERRIDE_SIGN_IN = "override_sign_in"


class Classification(ValueObject):
    """Result of mapping a provider outcome to a flow outcome."""

    outcome: FlowOutcome
    message: str
    remediation: str | None = None
    retryable: bool = False
    provider_code: str | None = None


class ConflictOption(ValueObject):
    """One branch of the conflict decision."""

    kind: ConflictOptionKind
    title: str
    description: str
    available: bool
    warning: str | None = None
    unavailable_reason: str | None = None


class ConflictDecision(ValueObject):
    """Decision offered after a ``credential already in use`` failure.

    Always carries both options; merging is listed but never available.
    """

    email: str
    options: tuple[ConflictOption, ...]

    def option(self, kind: ConflictOptionKind) -> ConflictOption:
        """Return the option of the given kind."""
        for option in self.options:
            if option.kind == kind:
                return option
        raise KeyError(kind)


class ResetReport(ValueObject):
    """Independent result of a password reset dispatch."""

    email: str
    sent: bool
    message: str
    provider_code: str | None = None


class FlowStatus(ValueObject):
    """Snapshot of the upgrade flow for projection to callers."""

    state: FlowState
    outcome: FlowOutcome
    classification: Classification | None = None
    candidate_email: str | None = None
    has_secret: bool = False
    conflict: ConflictDecision | None = None
    reset_available: bool = False
