"""Domain services."""

from .base import Service
from .classification import classify_failure
from .identity_observer import IdentityObserver
from .identity_provider import IdentityHandler, IdentityProvider, Unsubscribe
from .upgrade_flow import UpgradeFlow, build_conflict_decision

__all__ = [
    "IdentityHandler",
    "IdentityObserver",
    "IdentityProvider",
    "Service",
    "Unsubscribe",
    "UpgradeFlow",
    "build_conflict_decision",
    "classify_failure",
]
