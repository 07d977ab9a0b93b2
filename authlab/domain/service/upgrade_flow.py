"""Anonymous-to-permanent upgrade flow.

State machine::

    IDLE -> SUBMITTING -> LINKED | CONFLICT | FAILED
    CONFLICT -> SUBMITTING -> OVERRIDE_SIGNED_IN | OVERRIDE_FAILED | RESET_OFFERED
    any state but SUBMITTING -> IDLE (cancel)

Only one attempt may be submitting at a time. The busy check and the move
to SUBMITTING happen before the first await, so two coroutines sharing a
flow can never both reach the provider.
"""

import logfire

from authlab.domain.error import FlowBusyError, ProviderFailure
from authlab.domain.model.candidate import CredentialCandidate
from authlab.domain.model.identity import Identity
from authlab.domain.service.classification import classify_failure
from authlab.domain.service.identity_provider import IdentityProvider
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

from .base import Service

# States each operation may start from. A failed link can be corrected and
# resubmitted without cancelling. cancel() is allowed from any state but
# SUBMITTING.
ALLOWED_FROM: dict[str, frozenset[FlowState]] = {
    "attempt_link": frozenset({FlowState.IDLE, FlowState.FAILED}),
    "resolve_override_sign_in": frozenset({FlowState.CONFLICT}),
}

LINK_SUCCEEDED = Classification(
    outcome=FlowOutcome.LINK_SUCCEEDED,
    message="Account linked. Your anonymous user is now permanent.",
)
SIGN_IN_SUCCEEDED = Classification(
    outcome=FlowOutcome.SIGN_IN_SUCCEEDED,
    message=(
        "Signed in to the existing account. "
        "The previous anonymous session was discarded."
    ),
)
LINK_IN_PROGRESS = Classification(
    outcome=FlowOutcome.IN_PROGRESS, message="Linking credential..."
)
OVERRIDE_IN_PROGRESS = Classification(
    outcome=FlowOutcome.IN_PROGRESS, message="Attempting to switch user..."
)


def build_conflict_decision(email: str) -> ConflictDecision:
    """Build the two-branch decision offered for a credential already in use.

    Args:
        email: Email that is already registered

    Returns:
        Decision with merge (unsupported) and override sign-in options
    """
    return ConflictDecision(
        email=email,
        options=(
            ConflictOption(
                kind=ConflictOptionKind.MERGE,
                title="Merge accounts",
                description=(
                    "Merge the current anonymous user's data into the existing account."
                ),
                available=False,
                unavailable_reason="Not implemented",
            ),
            ConflictOption(
                kind=ConflictOptionKind.OVERRIDE_SIGN_IN,
                title="Sign in to the existing account",
                description=(
                    "Abandon the current anonymous user and sign in to the "
                    "existing account."
                ),
                available=True,
                warning="You will lose the data of the current anonymous session.",
            ),
        ),
    )


class UpgradeFlow(Service):
    """Link/resolve state machine for upgrading a transient identity."""

    def __init__(self, provider: IdentityProvider) -> None:
        """Initialize upgrade flow.

        Args:
            provider: Identity provider used for link, sign-in and reset
        """
        self.provider = provider
        self._state = FlowState.IDLE
        self._classification: Classification | None = None
        self._candidate: CredentialCandidate | None = None
        self._conflict: ConflictDecision | None = None

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def outcome(self) -> FlowOutcome:
        if self._classification is None:
            return FlowOutcome.IDLE
        return self._classification.outcome

    @property
    def candidate(self) -> CredentialCandidate | None:
        return self._candidate

    @property
    def conflict(self) -> ConflictDecision | None:
        return self._conflict

    def status(self) -> FlowStatus:
        """Return an immutable snapshot of the flow."""
        return FlowStatus(
            state=self._state,
            outcome=self.outcome,
            classification=self._classification,
            candidate_email=self._candidate.email if self._candidate else None,
            has_secret=self._candidate.has_secret if self._candidate else False,
            conflict=self._conflict,
            reset_available=self._state == FlowState.RESET_OFFERED,
        )

    async def attempt_link(
        self, identity: Identity | None, candidate: CredentialCandidate
    ) -> FlowStatus:
        """Try to attach the candidate credential to a transient identity.

        Guard violations (no identity, permanent identity, incomplete
        candidate, or a state that doesn't accept a new attempt) leave the
        flow untouched.

        Args:
            identity: Current session identity
            candidate: Email/password to link

        Returns:
            Flow status after the attempt

        Raises:
            FlowBusyError: If another attempt is submitting
        """
        self._ensure_not_submitting("link a credential")

        if identity is None or not identity.is_transient:
            logfire.debug("Link ignored - no transient identity")
            return self.status()
        if not candidate.is_complete:
            logfire.debug("Link ignored - incomplete candidate")
            return self.status()
        if self._state not in ALLOWED_FROM["attempt_link"]:
            logfire.debug("Link ignored - flow not armed", state=self._state.value)
            return self.status()

        self._candidate = candidate
        self._transition(FlowState.SUBMITTING, LINK_IN_PROGRESS)

        with logfire.span("upgrade_flow.attempt_link", uid=identity.uid):
            try:
                linked = await self.provider.link_credential(
                    identity, candidate.email, candidate.password.get_secret_value()
                )
            except ProviderFailure as failure:
                classification = classify_failure(
                    failure.code, failure.message, ProviderOperation.LINK
                )
                if classification.outcome == FlowOutcome.CONFLICT_CREDENTIAL_IN_USE:
                    self._conflict = build_conflict_decision(candidate.email)
                    self._transition(FlowState.CONFLICT, classification)
                else:
                    self._transition(FlowState.FAILED, classification)
                logfire.warn(
                    "Credential link failed",
                    uid=identity.uid,
                    code=failure.code,
                    outcome=classification.outcome.value,
                )
                return self.status()
            except Exception as e:
                self._fail_unexpectedly(FlowState.FAILED, e)
                raise

            self._candidate = candidate.without_secret()
            self._transition(FlowState.LINKED, LINK_SUCCEEDED)
            logfire.info("Credential linked", uid=linked.uid)
            return self.status()

    async def resolve_override_sign_in(
        self, candidate: CredentialCandidate | None = None
    ) -> FlowStatus:
        """Abandon the transient identity and sign in to the conflicting account.

        Only valid from CONFLICT. On success the provider replaces the
        session identity; the anonymous one is gone for good.

        Args:
            candidate: Replacement candidate (e.g. retyped password). Must use
                the conflicting email. Defaults to the stored candidate.

        Returns:
            Flow status after the attempt

        Raises:
            FlowBusyError: If another attempt is submitting
        """
        self._ensure_not_submitting("sign in")

        if (
            self._state not in ALLOWED_FROM["resolve_override_sign_in"]
            or self._conflict is None
        ):
            logfire.debug("Override ignored - no open conflict", state=self._state.value)
            return self.status()

        working = candidate if candidate is not None else self._candidate
        if working is None or not working.is_complete:
            logfire.debug("Override ignored - incomplete candidate")
            return self.status()
        if working.email != self._conflict.email:
            logfire.debug("Override ignored - email differs from conflict")
            return self.status()

        self._candidate = working
        self._transition(FlowState.SUBMITTING, OVERRIDE_IN_PROGRESS)

        with logfire.span("upgrade_flow.override_sign_in"):
            try:
                identity = await self.provider.sign_in(
                    working.email, working.password.get_secret_value()
                )
            except ProviderFailure as failure:
                classification = classify_failure(
                    failure.code, failure.message, ProviderOperation.SIGN_IN
                )
                if classification.outcome == FlowOutcome.SIGN_IN_WRONG_SECRET:
                    self._transition(FlowState.RESET_OFFERED, classification)
                else:
                    self._transition(FlowState.OVERRIDE_FAILED, classification)
                logfire.warn(
                    "Override sign-in failed",
                    code=failure.code,
                    outcome=classification.outcome.value,
                )
                return self.status()
            except Exception as e:
                self._fail_unexpectedly(FlowState.OVERRIDE_FAILED, e)
                raise

            self._conflict = None
            self._candidate = working.without_secret()
            self._transition(FlowState.OVERRIDE_SIGNED_IN, SIGN_IN_SUCCEEDED)
            logfire.info("Override sign-in succeeded", uid=identity.uid)
            return self.status()

    async def request_reset(self, email: str) -> ResetReport:
        """Dispatch a password-reset email.

        Independent of the main state: neither success nor failure changes
        the flow's state, outcome or conflict decision.

        Args:
            email: Account email

        Returns:
            Report of the dispatch
        """
        if not email:
            return ResetReport(
                email=email, sent=False, message="An email address is required."
            )

        with logfire.span("upgrade_flow.request_reset"):
            try:
                await self.provider.send_password_reset(email)
            except ProviderFailure as failure:
                logfire.warn("Password reset dispatch failed", code=failure.code)
                return ResetReport(
                    email=email,
                    sent=False,
                    message=f"Could not send the recovery email: {failure.message or failure.code}",
                    provider_code=failure.code,
                )

            logfire.info("Password reset dispatched")
            return ResetReport(
                email=email,
                sent=True,
                message=f"A recovery email was sent to {email}.",
            )

    def cancel(self) -> FlowStatus:
        """Return to IDLE, dropping the conflict decision and the password.

        The email is kept so the user doesn't have to retype it.

        Raises:
            FlowBusyError: If an attempt is submitting
        """
        self._ensure_not_submitting("cancel")

        self._conflict = None
        if self._candidate is not None:
            self._candidate = self._candidate.without_secret()
        self._state = FlowState.IDLE
        self._classification = None
        logfire.info("Upgrade flow cancelled")
        return self.status()

    def _ensure_not_submitting(self, operation: str) -> None:
        if self._state == FlowState.SUBMITTING:
            raise FlowBusyError(operation)

    def _transition(self, state: FlowState, classification: Classification) -> None:
        self._state = state
        self._classification = classification

    def _fail_unexpectedly(self, state: FlowState, error: Exception) -> None:
        # Never leave the flow stuck in SUBMITTING; the caller still sees the error
        logfire.error(
            "Unexpected error during upgrade attempt",
            error=str(error),
            error_type=type(error).__name__,
        )
        self._transition(
            state,
            classify_failure(type(error).__name__, str(error)),
        )
