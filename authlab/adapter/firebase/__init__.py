"""Firebase Authentication adapter."""

from .client import FirebaseIdentityProvider, failure_from_response

__all__ = ["FirebaseIdentityProvider", "failure_from_response"]
