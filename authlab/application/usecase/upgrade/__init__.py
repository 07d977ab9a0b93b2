"""Account upgrade use cases."""

from .cancel_upgrade import CancelUpgradeUseCase
from .get_upgrade_status import GetUpgradeStatusUseCase
from .link_account import LinkAccountUseCase
from .override_sign_in import OverrideSignInUseCase
from .request_reset import RequestPasswordResetUseCase
from .start_session import StartSessionUseCase

__all__ = [
    "CancelUpgradeUseCase",
    "GetUpgradeStatusUseCase",
    "LinkAccountUseCase",
    "OverrideSignInUseCase",
    "RequestPasswordResetUseCase",
    "StartSessionUseCase",
]
