"""Identity entity.

Identities are owned by the external identity provider. AuthLab only
observes them: a snapshot is replaced wholesale whenever the provider
reports a session change.
"""

from datetime import datetime
from typing import Optional

from pydantic import model_validator

from authlab.domain.model.common import DomainModel
from authlab.domain.value import IdentityId


class Identity(DomainModel):
    """Session identity reported by the provider.

    Transient (anonymous) identities have no durable credential attached
    and therefore no email.
    """

    uid: IdentityId
    email: Optional[str] = None
    is_anonymous: bool = False
    created_at: Optional[datetime] = None  # None when the provider doesn't say

    @model_validator(mode="after")
    def check_transient_has_no_email(self) -> "Identity":
        """Reject anonymous identities that carry an email."""
        if self.is_anonymous and self.email:
            raise ValueError("Anonymous identities cannot have an email")
        return self

    @property
    def is_transient(self) -> bool:
        """Whether this identity can be upgraded by linking a credential."""
        return self.is_anonymous
