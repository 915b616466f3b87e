"""
Anthropic (Claude) 보고서 생성 Provider.

- ai.report.provider: anthropic 일 때 사용
- model_requested + model_used 필수 기록
- 일시적 오류(레이트리밋/연결/타임아웃/5xx)는 지수 백오프로 재시도
"""

import logging
import os
from datetime import UTC, datetime
from typing import Any

import anthropic

from src.utils.retry import retry_with_exponential_backoff

from .base import GenerationError, GenerationResult, ReportPrompt, ReportProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5"

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.APITimeoutError,
    anthropic.InternalServerError,
)


class ClaudeReportProvider(ReportProvider):
    """
    Claude API Provider.

    Usage:
        provider = ClaudeReportProvider(model="claude-sonnet-4-5")
        result = await provider.generate(prompt)
    """

    name = "anthropic"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        max_tokens: int = 4096,
        temperature: float | None = None,
        max_retries: int = 3,
    ):
        """
        Args:
            model: 모델 ID (config에서 주입)
            api_key: API 키 (환경변수 MY_ANTHROPIC_KEY 또는 ANTHROPIC_API_KEY 사용 가능)
            max_tokens: 최대 토큰 수
            temperature: 샘플링 온도 (None이면 API 기본값)
            max_retries: 일시적 오류 재시도 횟수

        Raises:
            GenerationError: API 키가 없을 때 (fail-fast)
        """
        self.model = model
        # API 키 결정: 인자 > MY_ANTHROPIC_KEY > ANTHROPIC_API_KEY
        self.api_key = (
            api_key
            or os.environ.get("MY_ANTHROPIC_KEY")
            or os.environ.get("ANTHROPIC_API_KEY")
        )

        if not self.api_key:
            raise GenerationError(
                "ANTHROPIC_KEY_MISSING",
                "Anthropic API 키가 없습니다. "
                "MY_ANTHROPIC_KEY 또는 ANTHROPIC_API_KEY 환경변수를 설정하세요.",
            )

        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_retries = max_retries
        self._client: Any = None

    def _get_client(self) -> Any:
        """Anthropic 클라이언트 (lazy init)."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def generate(self, prompt: ReportPrompt) -> GenerationResult:
        """
        보고서 텍스트 생성.

        자동 재시도:
        - RateLimitError, APIConnectionError, APITimeoutError, InternalServerError
        - 지수 백오프

        Raises:
            GenerationError: API 실패 또는 빈 응답
        """
        try:
            response = await self._call_api_with_retry(prompt)
        except Exception as e:
            logger.error(f"Report generation failed: {e}", exc_info=True)
            raise GenerationError(
                "GENERATION_FAILED",
                self._get_user_friendly_error_message(e),
                model=self.model,
            ) from e

        text = "".join(
            getattr(block, "text", "") for block in (response.content or [])
        )
        model_used = getattr(response, "model", None) or self.model

        if not text.strip():
            raise GenerationError(
                "EMPTY_RESPONSE",
                "AI가 빈 보고서를 반환했습니다. 잠시 후 다시 시도해주세요.",
                model=model_used,
            )

        return GenerationResult(
            text=text,
            provider=self.name,
            model_requested=self.model,
            model_used=model_used,
            prompt_hash=prompt.prompt_hash,
            request_id=getattr(response, "id", None),
            generated_at=datetime.now(UTC).isoformat(),
        )

    async def _call_api_with_retry(self, prompt: ReportPrompt) -> Any:
        """재시도 로직이 적용된 API 호출."""

        async def _api_call() -> Any:
            client = self._get_client()
            api_kwargs: dict[str, Any] = {
                "model": self.model,
                "max_tokens": self.max_tokens,
                "system": prompt.system_instruction,
                "messages": [{"role": "user", "content": prompt.user_prompt}],
            }
            if self.temperature is not None:
                api_kwargs["temperature"] = self.temperature

            return await client.messages.create(**api_kwargs)

        return await retry_with_exponential_backoff(
            _api_call,
            max_retries=self.max_retries,
            initial_delay=1.0,
            max_delay=30.0,
            exceptions=RETRYABLE_EXCEPTIONS,
            label=self.model,
        )

    def _get_user_friendly_error_message(self, error: Exception) -> str:
        """사용자 친화적인 에러 메시지 생성."""
        if isinstance(error, anthropic.APITimeoutError):
            return (
                "API 응답 시간이 초과되었습니다. "
                "네트워크 상태를 확인하거나 잠시 후 다시 시도해주세요."
            )
        elif isinstance(error, anthropic.APIConnectionError):
            return (
                "인터넷 연결을 확인해주세요. "
                "Anthropic API 서버에 연결할 수 없습니다."
            )
        elif isinstance(error, anthropic.RateLimitError):
            return "API 사용량 한도를 초과했습니다. 잠시 후 다시 시도해주세요."
        elif isinstance(error, anthropic.AuthenticationError):
            return "API 인증에 실패했습니다. MY_ANTHROPIC_KEY 환경변수를 확인해주세요."
        elif isinstance(error, anthropic.PermissionDeniedError):
            return "이 작업을 수행할 권한이 없습니다. API 키의 권한을 확인해주세요."
        elif isinstance(error, anthropic.BadRequestError):
            return "요청 형식이 올바르지 않습니다. 입력 데이터를 확인해주세요."

        error_str = str(error)
        if "api_key" in error_str.lower():
            return "API 키 설정을 확인해주세요."
        elif "timeout" in error_str.lower():
            return "요청 시간이 초과되었습니다. 다시 시도해주세요."
        elif "connection" in error_str.lower():
            return "네트워크 연결 오류가 발생했습니다."

        return f"보고서 생성 중 오류가 발생했습니다: {error_str}"
