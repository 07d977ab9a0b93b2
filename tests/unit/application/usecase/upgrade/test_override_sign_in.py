"""Tests for OverrideSignInUseCase and RequestPasswordResetUseCase."""

import pytest
from pydantic import SecretStr

from authlab.application.usecase.upgrade import (
    LinkAccountUseCase,
    OverrideSignInUseCase,
    RequestPasswordResetUseCase,
)
from authlab.application.usecase.upgrade.link_account import LinkAccountRequest
from authlab.application.usecase.upgrade.override_sign_in import (
    OverrideSignInRequest,
)
from authlab.application.usecase.upgrade.request_reset import (
    RequestPasswordResetRequest,
)
from authlab.domain.service import IdentityObserver, IdentityProvider
from authlab.domain.value import FlowOutcome, FlowState
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def _open_conflict(env, existing_password: str):
    provider = await env.get(IdentityProvider)
    await env.get(IdentityObserver)
    provider.start_anonymous_session("A1")
    provider.register_account("u@ex.com", existing_password)

    link = await env.get(LinkAccountUseCase)
    response = await link.execute(
        LinkAccountRequest(email="u@ex.com", password=SecretStr("Secret1!"))
    )
    assert response.state == FlowState.CONFLICT
    return provider


class TestOverrideSignInUseCase:
    """Test override sign-in use case."""

    @pytest.mark.asyncio
    async def test_override_switches_identity(self, unit_env):
        """A matching password switches the session to the existing account."""
        await _open_conflict(unit_env, "Secret1!")
        use_case = await unit_env.get(OverrideSignInUseCase)

        response = await use_case.execute(OverrideSignInRequest())

        assert response.state == FlowState.OVERRIDE_SIGNED_IN
        assert response.outcome == FlowOutcome.SIGN_IN_SUCCEEDED
        assert response.identity.uid != "A1"
        assert response.identity.email == "u@ex.com"
        assert response.conflict is None

    @pytest.mark.asyncio
    async def test_wrong_password_offers_reset(self, unit_env):
        await _open_conflict(unit_env, "Other123")
        use_case = await unit_env.get(OverrideSignInUseCase)

        response = await use_case.execute(OverrideSignInRequest())

        assert response.state == FlowState.RESET_OFFERED
        assert response.outcome == FlowOutcome.SIGN_IN_WRONG_SECRET
        assert response.reset_available is True
        assert response.identity.uid == "A1"

    @pytest.mark.asyncio
    async def test_retyped_password_uses_conflict_email(self, unit_env):
        await _open_conflict(unit_env, "Other123")
        use_case = await unit_env.get(OverrideSignInUseCase)

        response = await use_case.execute(
            OverrideSignInRequest(password=SecretStr("Other123"))
        )

        assert response.state == FlowState.OVERRIDE_SIGNED_IN
        assert response.identity.email == "u@ex.com"


class TestRequestPasswordResetUseCase:
    """Test request password reset use case."""

    @pytest.mark.asyncio
    async def test_reset_defaults_to_candidate_email(self, unit_env):
        """After a wrong password the reset goes to the conflicting email."""
        provider = await _open_conflict(unit_env, "Other123")
        override = await unit_env.get(OverrideSignInUseCase)
        await override.execute(OverrideSignInRequest())
        use_case = await unit_env.get(RequestPasswordResetUseCase)

        response = await use_case.execute(RequestPasswordResetRequest())

        assert response.sent is True
        assert response.email == "u@ex.com"
        assert provider.sent_resets == ["u@ex.com"]

    @pytest.mark.asyncio
    async def test_reset_without_any_email(self, unit_env):
        use_case = await unit_env.get(RequestPasswordResetUseCase)

        response = await use_case.execute(RequestPasswordResetRequest())

        assert response.sent is False
        assert response.email == ""
