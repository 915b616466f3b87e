"""
보고서 생성 API 재시도.

Claude 호출처럼 일시적 실패(속도 제한, 연결 끊김, 서버 오류)가 잦은 호출에
지수 백오프를 적용한다. Gemini는 재시도 대신 fallback 모델을 쓰므로 사용하지 않음.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    재시도 설정.

    max_retries=2 → 최초 1회 + 재시도 2회 (대기 1.0s, 2.0s)
    """
    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0

    @property
    def attempts(self) -> int:
        return self.max_retries + 1

    def delays(self) -> Iterator[float]:
        """재시도 전 대기 시간 (max_retries개)."""
        delay = self.initial_delay
        for _ in range(self.max_retries):
            yield delay
            delay = min(delay * self.exponential_base, self.max_delay)


async def retry_with_exponential_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    label: str = "api call",
) -> T:
    """
    지수 백오프 재시도.

    Args:
        func: 재시도할 비동기 함수 (인자 없음)
        max_retries: 최대 재시도 횟수
        initial_delay: 첫 대기 시간(초)
        max_delay: 최대 대기 시간(초)
        exponential_base: 대기 시간 배수
        exceptions: 재시도할 예외 타입 (그 외는 즉시 전파)
        label: 로그에 표시할 호출 이름 (예: "claude-sonnet-4-5")

    Returns:
        func의 반환값

    Raises:
        마지막 시도의 예외
    """
    policy = RetryPolicy(
        max_retries=max_retries,
        initial_delay=initial_delay,
        max_delay=max_delay,
        exponential_base=exponential_base,
    )
    delays = policy.delays()

    for attempt in range(1, policy.attempts + 1):
        try:
            result = await func()
        except exceptions as e:
            delay = next(delays, None)
            if delay is None:
                logger.error(f"[{label}] all {policy.attempts} attempts failed: {e}")
                raise
            logger.warning(
                f"[{label}] attempt {attempt}/{policy.attempts} failed: {e}. "
                f"Retrying in {delay:.1f}s"
            )
            await asyncio.sleep(delay)
            continue

        if attempt > 1:
            logger.info(f"[{label}] succeeded on attempt {attempt}/{policy.attempts}")
        return result

    raise RuntimeError(f"[{label}] retry loop exited without result")
