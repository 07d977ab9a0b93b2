"""Credential candidate entity."""

from pydantic import SecretStr

from authlab.domain.model.common import DomainModel


class CredentialCandidate(DomainModel):
    """Email/password pair typed by the user.

    Lives only in the upgrade flow's working memory. The password is a
    ``SecretStr`` so it never shows up in reprs, logs or serialized output.
    """

    email: str = ""
    password: SecretStr = SecretStr("")

    @classmethod
    def of(cls, email: str, password: str) -> "CredentialCandidate":
        """Build a candidate from plain strings."""
        return cls(email=email, password=SecretStr(password))

    @property
    def is_complete(self) -> bool:
        """Whether both email and password are non-empty."""
        return bool(self.email) and bool(self.password.get_secret_value())

    @property
    def has_secret(self) -> bool:
        return bool(self.password.get_secret_value())

    def without_secret(self) -> "CredentialCandidate":
        """Return a copy with the password purged and the email kept."""
        return CredentialCandidate(email=self.email)
