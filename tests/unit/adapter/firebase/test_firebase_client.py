"""Unit tests for the Firebase Identity Toolkit adapter."""

import json

import httpx
import pytest

from authlab.adapter.firebase import FirebaseIdentityProvider, failure_from_response
from authlab.domain.error import ProviderFailure
from authlab.domain.model import CredentialCandidate, Identity
from authlab.domain.service import UpgradeFlow
from authlab.domain.value import FlowOutcome, FlowState

BASE_URL = "https://identitytoolkit.test/v1"
SECURE_TOKEN_URL = "https://securetoken.test/v1"


def _error(message: str, status_code: int = 400) -> tuple[int, dict]:
    return status_code, {"error": {"code": status_code, "message": message}}


def _error_response(message: str) -> httpx.Response:
    status_code, body = _error(message)
    return httpx.Response(status_code, json=body)


class FakeIdentityToolkit:
    """Routes ``accounts:<method>`` requests to canned bodies."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, dict]] = []
        # A list of bodies is served in order, the last one repeating
        self.routes: dict[str, tuple[int, dict] | list[tuple[int, dict]]] = {
            "signUp": (
                200,
                {
                    "localId": "A1",
                    "idToken": "anon-token",
                    "refreshToken": "anon-refresh",
                    "expiresIn": "3600",
                },
            ),
            "token": (
                200,
                {
                    "id_token": "fresh-token",
                    "refresh_token": "fresh-refresh",
                    "expires_in": "3600",
                    "user_id": "A1",
                },
            ),
            "lookup": (
                200,
                {"users": [{"localId": "A1", "createdAt": "1700000000000"}]},
            ),
            "update": (
                200,
                {"localId": "A1", "email": "u@ex.com", "idToken": "linked-token"},
            ),
            "signInWithPassword": (
                200,
                {"localId": "B7", "email": "u@ex.com", "idToken": "user-token"},
            ),
            "sendOobCode": (200, {"email": "u@ex.com"}),
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        # .../accounts:update -> "update", .../token -> "token"
        method = request.url.path.rsplit("/", 1)[-1].split(":")[-1]
        if request.headers.get("content-type", "").startswith("application/json"):
            payload = json.loads(request.content)
        else:
            payload = dict(httpx.QueryParams(request.content.decode()))
        self.requests.append((method, payload))

        route = self.routes[method]
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        status_code, body = route
        return httpx.Response(status_code, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def toolkit() -> FakeIdentityToolkit:
    return FakeIdentityToolkit()


@pytest.fixture
def client(toolkit) -> FirebaseIdentityProvider:
    return FirebaseIdentityProvider(
        api_key="test-key",
        base_url=BASE_URL,
        transport=toolkit.transport(),
        secure_token_url=SECURE_TOKEN_URL,
    )


class TestFailureFromResponse:
    """Tests for REST error translation."""

    @pytest.mark.parametrize(
        ("message", "code"),
        [
            ("EMAIL_EXISTS", "auth/email-already-in-use"),
            ("OPERATION_NOT_ALLOWED", "auth/operation-not-allowed"),
            ("INVALID_EMAIL", "auth/invalid-email"),
            ("INVALID_PASSWORD", "auth/wrong-password"),
            ("INVALID_LOGIN_CREDENTIALS", "auth/invalid-login-credentials"),
            ("EMAIL_NOT_FOUND", "auth/user-not-found"),
        ],
    )
    def test_known_keys(self, message, code):
        assert failure_from_response(_error_response(message)).code == code

    def test_detail_after_separator_is_message(self):
        failure = failure_from_response(
            _error_response("WEAK_PASSWORD : Password should be at least 6 characters")
        )

        assert failure.code == "auth/weak-password"
        assert failure.message == "Password should be at least 6 characters"

    def test_unknown_key_becomes_kebab_code(self):
        failure = failure_from_response(_error_response("QUOTA_EXCEEDED : Try later"))

        assert failure.code == "auth/quota-exceeded"
        assert failure.message == "Try later"

    def test_unstructured_body(self):
        failure = failure_from_response(httpx.Response(502, text="Bad gateway"))

        assert failure.code == "auth/internal-error"
        assert "502" in failure.message


class TestFirebaseIdentityProvider:
    """Tests for FirebaseIdentityProvider."""

    @pytest.mark.asyncio
    async def test_sign_in_anonymously(self, client, toolkit):
        seen = []
        await client.subscribe_identity_changes(seen.append)

        identity = await client.sign_in_anonymously()

        assert identity.uid == "A1"
        assert identity.is_anonymous is True
        assert identity.created_at is not None
        assert seen == [None, identity]
        assert [method for method, _ in toolkit.requests] == ["signUp", "lookup"]

    @pytest.mark.asyncio
    async def test_link_credential_uses_session_token(self, client, toolkit):
        anonymous = await client.sign_in_anonymously()

        linked = await client.link_credential(anonymous, "u@ex.com", "Secret1!")

        method, payload = toolkit.requests[-1]
        assert method == "update"
        assert payload["idToken"] == "anon-token"
        assert payload["email"] == "u@ex.com"
        assert linked.uid == "A1"
        assert linked.is_anonymous is False
        assert client.current_user == linked

    @pytest.mark.asyncio
    async def test_link_without_session_is_mismatch(self, client, toolkit):
        with pytest.raises(ProviderFailure) as exc_info:
            await client.link_credential(
                Identity(uid="A1", is_anonymous=True), "u@ex.com", "Secret1!"
            )

        assert exc_info.value.code == "auth/user-mismatch"
        assert toolkit.requests == []

    @pytest.mark.asyncio
    async def test_link_conflict(self, client, toolkit):
        anonymous = await client.sign_in_anonymously()
        toolkit.routes["update"] = _error("EMAIL_EXISTS")

        with pytest.raises(ProviderFailure) as exc_info:
            await client.link_credential(anonymous, "u@ex.com", "Secret1!")

        assert exc_info.value.code == "auth/email-already-in-use"
        assert client.current_user == anonymous

    @pytest.mark.asyncio
    async def test_sign_in_replaces_session(self, client):
        await client.sign_in_anonymously()

        identity = await client.sign_in("u@ex.com", "Secret1!")

        assert identity.uid == "B7"
        assert client.current_user == identity

    @pytest.mark.asyncio
    async def test_lookup_failure_is_tolerated(self, client, toolkit):
        toolkit.routes["lookup"] = _error("INVALID_ID_TOKEN")

        identity = await client.sign_in("u@ex.com", "Secret1!")

        assert identity.created_at is None

    @pytest.mark.asyncio
    async def test_send_password_reset(self, client, toolkit):
        await client.send_password_reset("u@ex.com")

        method, payload = toolkit.requests[-1]
        assert method == "sendOobCode"
        assert payload == {"requestType": "PASSWORD_RESET", "email": "u@ex.com"}

    @pytest.mark.asyncio
    async def test_transport_error_is_network_failure(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = FirebaseIdentityProvider(
            api_key="test-key", base_url=BASE_URL, transport=httpx.MockTransport(refuse)
        )

        with pytest.raises(ProviderFailure) as exc_info:
            await client.sign_in("u@ex.com", "Secret1!")

        assert exc_info.value.code == "auth/network-request-failed"

    @pytest.mark.asyncio
    async def test_unsubscribe(self, client):
        seen = []
        unsubscribe = await client.subscribe_identity_changes(seen.append)
        unsubscribe()

        await client.sign_in_anonymously()

        assert seen == [None]


class TestIdTokenRefresh:
    """Id tokens expire after an hour; the session must survive that."""

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_and_link_retried(self, client, toolkit):
        # Arrange
        anonymous = await client.sign_in_anonymously()
        toolkit.routes["update"] = [
            _error("TOKEN_EXPIRED"),
            (200, {"localId": "A1", "email": "u@ex.com", "idToken": "linked-token"}),
        ]

        # Act
        linked = await client.link_credential(anonymous, "u@ex.com", "Secret1!")

        # Assert
        assert linked.uid == "A1"
        assert linked.is_anonymous is False
        assert [method for method, _ in toolkit.requests] == [
            "signUp",
            "lookup",
            "update",
            "token",
            "update",
        ]
        _, refresh = toolkit.requests[3]
        assert refresh == {"grant_type": "refresh_token", "refresh_token": "anon-refresh"}
        _, retried = toolkit.requests[4]
        assert retried["idToken"] == "fresh-token"

    @pytest.mark.asyncio
    async def test_invalid_id_token_is_refreshed(self, client, toolkit):
        anonymous = await client.sign_in_anonymously()
        toolkit.routes["update"] = [
            _error("INVALID_ID_TOKEN"),
            (200, {"localId": "A1", "email": "u@ex.com", "idToken": "linked-token"}),
        ]

        linked = await client.link_credential(anonymous, "u@ex.com", "Secret1!")

        assert linked.email == "u@ex.com"

    @pytest.mark.asyncio
    async def test_token_near_expiry_is_refreshed_first(self, client, toolkit):
        toolkit.routes["signUp"] = (
            200,
            {
                "localId": "A1",
                "idToken": "anon-token",
                "refreshToken": "anon-refresh",
                "expiresIn": "60",
            },
        )
        anonymous = await client.sign_in_anonymously()

        await client.link_credential(anonymous, "u@ex.com", "Secret1!")

        assert [method for method, _ in toolkit.requests][-2:] == ["token", "update"]
        _, payload = toolkit.requests[-1]
        assert payload["idToken"] == "fresh-token"

    @pytest.mark.asyncio
    async def test_retry_happens_only_once(self, client, toolkit):
        anonymous = await client.sign_in_anonymously()
        toolkit.routes["update"] = _error("TOKEN_EXPIRED")

        with pytest.raises(ProviderFailure) as exc_info:
            await client.link_credential(anonymous, "u@ex.com", "Secret1!")

        assert exc_info.value.code == "auth/user-token-expired"
        methods = [method for method, _ in toolkit.requests]
        assert methods.count("token") == 1
        assert methods.count("update") == 2

    @pytest.mark.asyncio
    async def test_failed_refresh_surfaces_provider_code(self, client, toolkit):
        anonymous = await client.sign_in_anonymously()
        toolkit.routes["update"] = _error("TOKEN_EXPIRED")
        toolkit.routes["token"] = _error("INVALID_REFRESH_TOKEN")

        with pytest.raises(ProviderFailure) as exc_info:
            await client.link_credential(anonymous, "u@ex.com", "Secret1!")

        assert exc_info.value.code == "auth/invalid-refresh-token"

    @pytest.mark.asyncio
    async def test_other_failures_are_not_retried(self, client, toolkit):
        anonymous = await client.sign_in_anonymously()
        toolkit.routes["update"] = _error("EMAIL_EXISTS")

        with pytest.raises(ProviderFailure):
            await client.link_credential(anonymous, "u@ex.com", "Secret1!")

        assert "token" not in [method for method, _ in toolkit.requests]

    @pytest.mark.asyncio
    async def test_upgrade_flow_links_after_token_expiry(self, client, toolkit):
        """An hour-old anonymous session can still be upgraded in place."""
        await client.sign_in_anonymously()
        toolkit.routes["update"] = [
            _error("TOKEN_EXPIRED"),
            (200, {"localId": "A1", "email": "u@ex.com", "idToken": "linked-token"}),
        ]
        flow = UpgradeFlow(client)

        status = await flow.attempt_link(
            client.current_user, CredentialCandidate.of("u@ex.com", "Secret1!")
        )

        assert status.state == FlowState.LINKED
        assert status.outcome == FlowOutcome.LINK_SUCCEEDED
        assert client.current_user.uid == "A1"
