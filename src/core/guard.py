"""
In-flight guard: 세션당 동시에 하나의 생성/수정 요청만.

이전 요청이 끝나기 전에 같은 세션으로 들어온 요청은 기다리지 않고
즉시 REQUEST_IN_FLIGHT로 거절한다. 단일 이벤트 루프 기준.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.domain.errors import ErrorCodes, PolicyRejectError

logger = logging.getLogger(__name__)


class RequestGuard:
    """
    세션별 진행 중 요청 표시.

    Usage:
        async with guard.hold(session_id, "refine"):
            ...
    """

    def __init__(self):
        self._in_flight: dict[str, str] = {}

    def is_busy(self, key: str) -> bool:
        return key in self._in_flight

    @asynccontextmanager
    async def hold(self, key: str, action: str) -> AsyncGenerator[None, None]:
        """
        요청 점유.

        Args:
            key: 세션 ID (첫 생성은 폼 토큰)
            action: "generate" | "refine"

        Raises:
            PolicyRejectError: REQUEST_IN_FLIGHT
        """
        # 검사와 등록 사이에 await가 없으므로 이벤트 루프 안에서 원자적
        running = self._in_flight.get(key)
        if running is not None:
            logger.info(f"Rejected {action} for {key}: {running} in flight")
            raise PolicyRejectError(
                ErrorCodes.REQUEST_IN_FLIGHT,
                key=key,
                running=running,
                action=action,
            )

        self._in_flight[key] = action
        try:
            yield
        finally:
            self._in_flight.pop(key, None)
