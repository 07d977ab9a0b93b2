"""Firebase Authentication adapter.

Talks to the Identity Toolkit v1 REST API with httpx and keeps the
signed-in session (id and refresh tokens) in memory. REST error strings are translated
to the ``auth/*`` codes the web SDK reports, so the domain classifier sees
the same codes regardless of adapter.
"""

import re
import time
from datetime import datetime, timezone

import httpx
import logfire

from authlab.domain.error import ProviderFailure
from authlab.domain.model.identity import Identity
from authlab.domain.service.identity_provider import (
    IdentityHandler,
    IdentityProvider,
    Unsubscribe,
)
from authlab.domain.value import IdentityId

# Identity Toolkit error message -> web SDK error code
REST_ERROR_CODES: dict[str, str] = {
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "auth/requires-recent-login",
    "OPERATION_NOT_ALLOWED": "auth/operation-not-allowed",
    "PASSWORD_LOGIN_DISABLED": "auth/operation-not-allowed",
    "ADMIN_ONLY_OPERATION": "auth/admin-restricted-operation",
    "WEAK_PASSWORD": "auth/weak-password",
    "INVALID_EMAIL": "auth/invalid-email",
    "MISSING_EMAIL": "auth/missing-email",
    "MISSING_PASSWORD": "auth/missing-password",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-login-credentials",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "USER_NOT_FOUND": "auth/user-not-found",
    "USER_DISABLED": "auth/user-disabled",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "INVALID_ID_TOKEN": "auth/invalid-user-token",
    "TOKEN_EXPIRED": "auth/user-token-expired",
}

NETWORK_FAILURE_CODE = "auth/network-request-failed"
INTERNAL_ERROR_CODE = "auth/internal-error"

# Codes after which the id token is exchanged and the call retried once
EXPIRED_TOKEN_CODES = frozenset({"auth/user-token-expired", "auth/invalid-user-token"})

# Refresh proactively when the id token has less than this many seconds left
TOKEN_REFRESH_MARGIN = 300

_REST_KEY_PATTERN = re.compile(r"^[A-Z][A-Z_]*$")


def failure_from_response(response: httpx.Response) -> ProviderFailure:
    """Translate an Identity Toolkit error response.

    Error bodies look like ``{"error": {"message": "WEAK_PASSWORD : Password
    should be at least 6 characters"}}``; the part before `` : `` is the key.

    Args:
        response: Non-200 response

    Returns:
        Provider failure with an ``auth/*`` code
    """
    try:
        raw = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return ProviderFailure(
            INTERNAL_ERROR_CODE,
            f"Unexpected response from identity provider: {response.status_code}",
        )

    key, _, detail = str(raw).partition(" : ")
    key = key.strip()
    if key in REST_ERROR_CODES:
        return ProviderFailure(REST_ERROR_CODES[key], detail.strip() or key)
    if _REST_KEY_PATTERN.match(key):
        return ProviderFailure(
            "auth/" + key.lower().replace("_", "-"), detail.strip() or key
        )
    return ProviderFailure(INTERNAL_ERROR_CODE, str(raw))


def _parse_created_at(value: str | None) -> datetime | None:
    # lookup returns milliseconds since epoch as a string
    if not value:
        return None
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except ValueError:
        return None


class FirebaseIdentityProvider(IdentityProvider):
    """Firebase Authentication over the Identity Toolkit REST API.

    The session is the id token of the signed-in user plus its refresh
    token. Id tokens live for an hour; calls that need one exchange the
    refresh token at the Secure Token API when the id token is about to
    expire, or retry once after the provider reports it expired.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        secure_token_url: str = "https://securetoken.googleapis.com/v1",
    ) -> None:
        """Initialize Firebase client.

        Args:
            api_key: Web API key of the Firebase project
            base_url: Identity Toolkit base URL (emulator URL in development)
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (tests)
            secure_token_url: Secure Token API base URL, used to refresh id tokens
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.secure_token_url = secure_token_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

        self._id_token: str | None = None
        self._refresh_token: str | None = None
        self._expires_at: float | None = None  # time.monotonic() deadline
        self._current: Identity | None = None
        self._handlers: list[IdentityHandler] = []

    @property
    def current_user(self) -> Identity | None:
        return self._current

    async def sign_in_anonymously(self) -> Identity:
        """Start an anonymous session via ``accounts:signUp``."""
        data = await self._post("signUp", {"returnSecureToken": True})
        identity = Identity(
            uid=IdentityId(data["localId"]),
            is_anonymous=True,
            created_at=await self._lookup_created_at(data["idToken"]),
        )
        self._set_session(data, identity)
        logfire.info("Anonymous session started", uid=identity.uid)
        return identity

    async def link_credential(
        self, identity: Identity, email: str, password: str
    ) -> Identity:
        """Link email/password to the signed-in user via ``accounts:update``."""
        if (
            self._id_token is None
            or self._current is None
            or self._current.uid != identity.uid
        ):
            raise ProviderFailure(
                "auth/user-mismatch",
                "The supplied identity does not match the signed-in user.",
            )

        data = await self._post_with_session(
            "update",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        linked = Identity(
            uid=IdentityId(data["localId"]),
            email=data.get("email", email),
            is_anonymous=False,
            created_at=identity.created_at,
        )
        self._set_session(data, linked)
        logfire.info("Credential linked", uid=linked.uid)
        return linked

    async def sign_in(self, email: str, password: str) -> Identity:
        """Sign in via ``accounts:signInWithPassword``, replacing the session."""
        data = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        identity = Identity(
            uid=IdentityId(data["localId"]),
            email=data.get("email", email),
            is_anonymous=False,
            created_at=await self._lookup_created_at(data["idToken"]),
        )
        self._set_session(data, identity)
        logfire.info("Signed in with password", uid=identity.uid)
        return identity

    async def send_password_reset(self, email: str) -> None:
        """Dispatch a reset email via ``accounts:sendOobCode``."""
        await self._post("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
        logfire.info("Password reset email requested")

    async def subscribe_identity_changes(self, handler: IdentityHandler) -> Unsubscribe:
        self._handlers.append(handler)
        handler(self._current)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def _set_session(self, data: dict, identity: Identity) -> None:
        # accounts:update may omit tokens; keep the ones we have
        self._store_tokens(
            data.get("idToken"), data.get("refreshToken"), data.get("expiresIn")
        )
        self._current = identity
        for handler in list(self._handlers):
            handler(identity)

    def _store_tokens(
        self,
        id_token: str | None,
        refresh_token: str | None,
        expires_in: str | None,
    ) -> None:
        if id_token:
            self._id_token = id_token
            self._expires_at = (
                time.monotonic() + int(expires_in) if expires_in else None
            )
        if refresh_token:
            self._refresh_token = refresh_token

    def _token_expiring(self) -> bool:
        return (
            self._expires_at is not None
            and self._expires_at - time.monotonic() < TOKEN_REFRESH_MARGIN
        )

    async def _refresh_id_token(self) -> None:
        """Exchange the refresh token for a new id token.

        Raises:
            ProviderFailure: If there is no refresh token or the exchange fails
        """
        if self._refresh_token is None:
            raise ProviderFailure(
                "auth/user-token-expired",
                "The session has expired and cannot be refreshed.",
            )

        with logfire.span("firebase.refresh_id_token"):
            data = await self._send(
                f"{self.secure_token_url}/token",
                "token",
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": self._refresh_token,
                },
            )
        self._store_tokens(
            data.get("id_token"), data.get("refresh_token"), data.get("expires_in")
        )
        logfire.info("Id token refreshed")

    async def _post_with_session(self, method: str, payload: dict) -> dict:
        """POST to ``accounts:<method>`` with the session's id token.

        Refreshes the token first when it is about to expire, and retries
        once if the provider rejects it as expired.
        """
        if self._token_expiring():
            await self._refresh_id_token()

        try:
            return await self._post(method, {**payload, "idToken": self._id_token})
        except ProviderFailure as e:
            if e.code not in EXPIRED_TOKEN_CODES or self._refresh_token is None:
                raise
            logfire.info("Id token rejected, refreshing", method=method, code=e.code)

        await self._refresh_id_token()
        return await self._post(method, {**payload, "idToken": self._id_token})

    async def _lookup_created_at(self, id_token: str) -> datetime | None:
        try:
            data = await self._post("lookup", {"idToken": id_token})
        except ProviderFailure as e:
            logfire.warn("Account lookup failed", code=e.code)
            return None
        users = data.get("users") or [{}]
        return _parse_created_at(users[0].get("createdAt"))

    async def _post(self, method: str, payload: dict) -> dict:
        """POST JSON to ``accounts:<method>``."""
        return await self._send(f"{self.base_url}/accounts:{method}", method, json=payload)

    async def _send(self, url: str, method: str, **body) -> dict:
        """POST to an identity endpoint.

        Args:
            url: Endpoint URL
            method: Short name for logs
            **body: ``json=`` or ``data=`` for httpx

        Raises:
            ProviderFailure: On transport errors or non-200 responses
        """
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.post(url, params={"key": self.api_key}, **body)
        except httpx.HTTPError as e:
            logfire.error("Identity Toolkit HTTP error", method=method, error=str(e))
            raise ProviderFailure(NETWORK_FAILURE_CODE, str(e)) from e

        if response.status_code != 200:
            failure = failure_from_response(response)
            logfire.warn(
                "Identity Toolkit request failed",
                method=method,
                status_code=response.status_code,
                code=failure.code,
            )
            raise failure

        return response.json()
