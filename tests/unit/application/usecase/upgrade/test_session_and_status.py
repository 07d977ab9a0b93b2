"""Tests for session start, status and cancel use cases."""

import pytest
from pydantic import SecretStr

from authlab.application.usecase.upgrade import (
    CancelUpgradeUseCase,
    GetUpgradeStatusUseCase,
    LinkAccountUseCase,
    StartSessionUseCase,
)
from authlab.application.usecase.upgrade.cancel_upgrade import CancelUpgradeRequest
from authlab.application.usecase.upgrade.get_upgrade_status import (
    GetUpgradeStatusRequest,
)
from authlab.application.usecase.upgrade.link_account import LinkAccountRequest
from authlab.application.usecase.upgrade.start_session import StartSessionRequest
from authlab.domain.error import ProviderFailure
from authlab.domain.service import IdentityProvider
from authlab.domain.value import FlowOutcome, FlowState
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestStartSessionUseCase:
    """Test start session use case."""

    @pytest.mark.asyncio
    async def test_start_session(self, unit_env):
        use_case = await unit_env.get(StartSessionUseCase)

        response = await use_case.execute(StartSessionRequest())

        assert response.identity is not None
        assert response.identity.is_anonymous is True
        assert response.can_upgrade is True
        assert response.state == FlowState.IDLE

    @pytest.mark.asyncio
    async def test_new_session_rearms_flow(self, unit_env):
        """Outcomes of the previous session don't leak into the new one."""
        start = await unit_env.get(StartSessionUseCase)
        link = await unit_env.get(LinkAccountUseCase)
        await start.execute(StartSessionRequest())
        await link.execute(
            LinkAccountRequest(email="u@ex.com", password=SecretStr("123"))
        )

        response = await start.execute(StartSessionRequest())

        assert response.state == FlowState.IDLE
        assert response.outcome == FlowOutcome.IDLE

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, unit_env):
        provider = await unit_env.get(IdentityProvider)
        provider.online = False
        use_case = await unit_env.get(StartSessionUseCase)

        with pytest.raises(ProviderFailure):
            await use_case.execute(StartSessionRequest())


class TestGetUpgradeStatusUseCase:
    """Test get upgrade status use case."""

    @pytest.mark.asyncio
    async def test_status_without_session(self, unit_env):
        use_case = await unit_env.get(GetUpgradeStatusUseCase)

        response = await use_case.execute(GetUpgradeStatusRequest())

        assert response.identity is None
        assert response.state == FlowState.IDLE
        assert response.outcome == FlowOutcome.IDLE
        assert response.message is None

    @pytest.mark.asyncio
    async def test_status_reflects_failed_attempt(self, unit_env):
        start = await unit_env.get(StartSessionUseCase)
        link = await unit_env.get(LinkAccountUseCase)
        await start.execute(StartSessionRequest())
        await link.execute(
            LinkAccountRequest(email="not-an-email", password=SecretStr("Secret1!"))
        )
        use_case = await unit_env.get(GetUpgradeStatusUseCase)

        response = await use_case.execute(GetUpgradeStatusRequest())

        assert response.state == FlowState.FAILED
        assert response.outcome == FlowOutcome.INVALID_FORMAT
        assert response.provider_code == "auth/invalid-email"
        assert response.candidate_email == "not-an-email"


class TestCancelUpgradeUseCase:
    """Test cancel upgrade use case."""

    @pytest.mark.asyncio
    async def test_cancel_keeps_email(self, unit_env):
        start = await unit_env.get(StartSessionUseCase)
        link = await unit_env.get(LinkAccountUseCase)
        await start.execute(StartSessionRequest())
        await link.execute(
            LinkAccountRequest(email="u@ex.com", password=SecretStr("123"))
        )
        use_case = await unit_env.get(CancelUpgradeUseCase)

        response = await use_case.execute(CancelUpgradeRequest())

        assert response.state == FlowState.IDLE
        assert response.message is None
        assert response.candidate_email == "u@ex.com"
        assert response.can_upgrade is True
