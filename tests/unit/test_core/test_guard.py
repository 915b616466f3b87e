"""
test_guard.py - 세션별 in-flight 요청 거절 테스트

- 같은 세션의 두 번째 요청은 기다리지 않고 즉시 거절
- 다른 세션은 서로 막지 않음
- 실패해도 점유 해제
"""

import asyncio

import pytest

from src.core.guard import RequestGuard
from src.domain.errors import ErrorCodes, PolicyRejectError


class TestRequestGuard:

    @pytest.mark.asyncio
    async def test_second_request_rejected(self):
        guard = RequestGuard()

        async with guard.hold("SES-1", "generate"):
            assert guard.is_busy("SES-1")
            with pytest.raises(PolicyRejectError) as exc_info:
                async with guard.hold("SES-1", "refine"):
                    pass

        error = exc_info.value
        assert error.code == ErrorCodes.REQUEST_IN_FLIGHT
        assert error.context == {"key": "SES-1", "running": "generate", "action": "refine"}

    @pytest.mark.asyncio
    async def test_released_after_completion(self):
        guard = RequestGuard()

        async with guard.hold("SES-1", "generate"):
            pass

        assert not guard.is_busy("SES-1")
        async with guard.hold("SES-1", "refine"):
            assert guard.is_busy("SES-1")

    @pytest.mark.asyncio
    async def test_released_after_failure(self):
        guard = RequestGuard()

        with pytest.raises(RuntimeError):
            async with guard.hold("SES-1", "generate"):
                raise RuntimeError("provider down")

        assert not guard.is_busy("SES-1")

    @pytest.mark.asyncio
    async def test_other_sessions_independent(self):
        guard = RequestGuard()

        async with guard.hold("SES-1", "generate"):
            async with guard.hold("SES-2", "generate"):
                assert guard.is_busy("SES-1")
                assert guard.is_busy("SES-2")

    @pytest.mark.asyncio
    async def test_concurrent_tasks(self):
        """동시에 시작된 두 작업 중 하나만 통과."""
        guard = RequestGuard()
        started = asyncio.Event()
        release = asyncio.Event()

        async def first():
            async with guard.hold("SES-1", "generate"):
                started.set()
                await release.wait()
                return "done"

        task = asyncio.create_task(first())
        await started.wait()

        with pytest.raises(PolicyRejectError):
            async with guard.hold("SES-1", "generate"):
                pass

        release.set()
        assert await task == "done"
        assert not guard.is_busy("SES-1")
