"""Provider failure classification.

Maps an opaque provider code to a flow outcome. Rules are checked in order
and the first match wins; anything unmatched becomes ``OTHER_FAILURE`` with
the provider's message passed through untouched.
"""

from dataclasses import dataclass

from authlab.domain.value.types import Classification, FlowOutcome, ProviderOperation

CREDENTIAL_IN_USE_CODES = frozenset(
    {"auth/credential-already-in-use", "auth/email-already-in-use"}
)
PROVIDER_DISABLED_CODES = frozenset({"auth/operation-not-allowed"})
NETWORK_FAILURE_CODES = frozenset({"auth/network-request-failed"})
WEAK_CREDENTIAL_CODES = frozenset({"auth/weak-password"})
INVALID_FORMAT_CODES = frozenset({"auth/invalid-email"})
WRONG_SECRET_CODES = frozenset(
    {"auth/wrong-password", "auth/invalid-login-credentials"}
)

OTHER_FAILURE_FALLBACK = "The identity provider rejected the request."


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the classification table."""

    codes: frozenset[str]
    outcome: FlowOutcome
    message: str
    remediation: str | None = None
    retryable: bool = False
    operations: frozenset[ProviderOperation] = frozenset(ProviderOperation)


RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        codes=CREDENTIAL_IN_USE_CODES,
        outcome=FlowOutcome.CONFLICT_CREDENTIAL_IN_USE,
        message="This email account is already associated with another user.",
    ),
    ClassificationRule(
        codes=PROVIDER_DISABLED_CODES,
        outcome=FlowOutcome.PROVIDER_DISABLED,
        message="The Email/Password sign-in provider is not enabled.",
        remediation=(
            "Open the provider console > Authentication > Sign-in method "
            'and enable "Email/Password".'
        ),
    ),
    ClassificationRule(
        codes=NETWORK_FAILURE_CODES,
        outcome=FlowOutcome.NETWORK_FAILURE,
        message="Could not reach the identity provider.",
        remediation=(
            "Check your internet connection or network configuration. "
            "If it keeps happening it may be a CORS or firewall block."
        ),
        retryable=True,
    ),
    ClassificationRule(
        codes=WEAK_CREDENTIAL_CODES,
        outcome=FlowOutcome.WEAK_CREDENTIAL,
        message="The password is too weak. Use at least 6 characters.",
    ),
    ClassificationRule(
        codes=INVALID_FORMAT_CODES,
        outcome=FlowOutcome.INVALID_FORMAT,
        message="The email address is not valid.",
    ),
    ClassificationRule(
        codes=WRONG_SECRET_CODES,
        outcome=FlowOutcome.SIGN_IN_WRONG_SECRET,
        message="Incorrect password.",
        operations=frozenset({ProviderOperation.SIGN_IN}),
    ),
)


def classify_failure(
    code: str,
    message: str,
    operation: ProviderOperation = ProviderOperation.LINK,
) -> Classification:
    """Classify a provider failure.

    Args:
        code: Provider classification code (e.g. ``auth/weak-password``)
        message: Provider's human-readable message
        operation: Which provider call failed

    Returns:
        Classification with the outcome and user-facing text
    """
    for rule in RULES:
        if operation in rule.operations and code in rule.codes:
            return Classification(
                outcome=rule.outcome,
                message=rule.message,
                remediation=rule.remediation,
                retryable=rule.retryable,
                provider_code=code,
            )

    return Classification(
        outcome=FlowOutcome.OTHER_FAILURE,
        message=message or OTHER_FAILURE_FALLBACK,
        provider_code=code,
    )
