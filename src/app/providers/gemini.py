"""
Google Gemini Provider (텍스트 추출 + 보고서 생성).

Fallback 예외 정책:
- FALLBACK_ERRORS: NotFound, ServiceUnavailable, ResourceExhausted → fallback
- REJECT_IMMEDIATELY: InvalidArgument, PermissionDenied, Unauthenticated → 즉시 reject
"""

import logging
import os
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from google.api_core.exceptions import (
    InvalidArgument,
    NotFound,
    PermissionDenied,
    ResourceExhausted,
    ServiceUnavailable,
    Unauthenticated,
)

from src.domain.constants import EXTRACTION_ALLOWED_MEDIA_TYPES

from .base import (
    GenerationError,
    GenerationResult,
    OCRError,
    OCRProvider,
    OCRResult,
    ProviderError,
    ReportPrompt,
    ReportProvider,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MODEL = "gemini-2.5-flash"

# =============================================================================
# Exception Mapping
# =============================================================================

# Fallback 타는 예외
FALLBACK_ERRORS: tuple[type[Exception], ...] = (
    NotFound,            # 모델명 오류/미지원
    ServiceUnavailable,  # 5xx
    ResourceExhausted,   # 429 쿼터/레이트리밋
)

# 즉시 reject하는 예외
REJECT_IMMEDIATELY: tuple[type[Exception], ...] = (
    InvalidArgument,     # 입력 오류
    PermissionDenied,    # 인증 오류
    Unauthenticated,     # API 키 오류
)

EXTRACTION_PROMPT = (
    "Extract all text from this file. It could be a handwritten note, "
    "a typed document, or a PDF. Return only the transcribed text, nothing else."
)


def get_user_friendly_error_message(error: Exception, task: str = "요청") -> str:
    """사용자 친화적인 에러 메시지 생성."""
    if isinstance(error, Unauthenticated):
        return (
            "Google API 인증에 실패했습니다. "
            "GOOGLE_API_KEY 환경변수를 확인해주세요."
        )
    elif isinstance(error, PermissionDenied):
        return (
            "이 작업을 수행할 권한이 없습니다. "
            "API 키의 권한을 확인해주세요."
        )
    elif isinstance(error, ResourceExhausted):
        return (
            "API 사용량 한도를 초과했습니다. "
            "잠시 후 다시 시도하거나 할당량을 확인해주세요."
        )
    elif isinstance(error, ServiceUnavailable):
        return (
            "Google API 서비스를 일시적으로 사용할 수 없습니다. "
            "잠시 후 다시 시도해주세요."
        )
    elif isinstance(error, InvalidArgument):
        return (
            "요청 형식이 올바르지 않습니다. "
            "입력 파일의 형식과 크기를 확인해주세요."
        )

    error_str = str(error)
    lowered = error_str.lower()
    if "api_key" in lowered or "api key" in lowered:
        return "API 키 설정을 확인해주세요."
    elif "quota" in lowered or "limit" in lowered:
        return "API 사용량 한도를 초과했습니다. 잠시 후 다시 시도해주세요."
    elif "connection" in lowered:
        return "네트워크 연결 오류가 발생했습니다."
    elif "timeout" in lowered:
        return "요청 시간이 초과되었습니다. 다시 시도해주세요."

    return f"{task} 처리 중 오류가 발생했습니다: {error_str}"


def _response_text(response: Any) -> str:
    """응답 텍스트 (차단 등으로 후보가 없으면 빈 문자열)."""
    try:
        return response.text or ""
    except ValueError:
        # 안전 필터 차단 시 response.text가 ValueError
        return ""


class _GeminiBase:
    """Gemini 공통: lazy 클라이언트 + fallback 정책."""

    error_cls: type[ProviderError] = ProviderError
    task_label = "요청"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        fallback: str | None = None,
        api_key: str | None = None,
    ):
        """
        Args:
            model: 기본 모델 ID (config에서 주입)
            fallback: Fallback 모델 (None이면 재시도 없이 실패)
            api_key: API 키 (환경변수 GOOGLE_API_KEY 사용 가능)
        """
        self.model = model
        self.fallback = fallback
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        self._client: Any = None

    def _get_client(self) -> Any:
        """Gemini 클라이언트 (lazy init)."""
        if self._client is None:
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._client = genai
        return self._client

    async def _with_fallback(
        self,
        call: Callable[[str], Awaitable[T]],
    ) -> tuple[T, str, bool]:
        """
        기본 모델 → (FALLBACK_ERRORS 시) fallback 모델.

        Returns:
            (결과, 실제 사용 모델, fallback 여부)
        """
        try:
            return await call(self.model), self.model, False

        except FALLBACK_ERRORS as e:
            logger.warning(
                f"Primary model ({self.model}) failed with fallback error: {e}. "
                f"Attempting fallback..."
            )

            if self.fallback is None:
                raise self.error_cls(
                    "NO_FALLBACK",
                    get_user_friendly_error_message(e, self.task_label),
                    model=self.model,
                ) from e

            try:
                logger.info(f"Trying fallback model: {self.fallback}")
                result = await call(self.fallback)
                logger.info("Fallback model succeeded")
                return result, self.fallback, True
            except ProviderError:
                raise
            except Exception as fallback_error:
                logger.error(f"Fallback model also failed: {fallback_error}")
                raise self.error_cls(
                    "FALLBACK_FAILED",
                    f"{get_user_friendly_error_message(fallback_error, self.task_label)} "
                    f"기본 모델과 대체 모델 모두 실패했습니다.",
                    primary_model=self.model,
                    fallback_model=self.fallback,
                ) from fallback_error

        except REJECT_IMMEDIATELY as e:
            logger.error(f"Authentication or input error: {e}", exc_info=True)
            raise self.error_cls(
                "AUTH_OR_INPUT_ERROR",
                get_user_friendly_error_message(e, self.task_label),
                model=self.model,
            ) from e

        except ProviderError:
            raise

        except Exception as e:
            logger.error(f"{self.task_label} failed with unexpected error: {e}", exc_info=True)
            raise self.error_cls(
                "PROVIDER_FAILED",
                get_user_friendly_error_message(e, self.task_label),
                model=self.model,
            ) from e


# =============================================================================
# Text Extraction
# =============================================================================

class GeminiOCRProvider(_GeminiBase, OCRProvider):
    """
    Gemini 텍스트 추출 Provider.

    Usage:
        provider = GeminiOCRProvider(model="gemini-2.5-flash")
        result = await provider.extract_text(image_bytes, "image/jpeg")
    """

    error_cls = OCRError
    task_label = "텍스트 추출"

    async def extract_text(
        self,
        file_bytes: bytes,
        file_type: str,
    ) -> OCRResult:
        """
        이미지/PDF에서 텍스트 추출.

        Raises:
            OCRError: 허용되지 않는 형식, API 실패
        """
        mime_type = self._normalize_mime_type(file_type)
        if mime_type not in EXTRACTION_ALLOWED_MEDIA_TYPES:
            raise OCRError(
                "UNSUPPORTED_MEDIA_TYPE",
                "지원하지 않는 파일 형식입니다. JPG, PNG, WEBP 이미지 또는 PDF 파일을 사용해주세요.",
                media_type=mime_type,
            )

        async def _call(model: str) -> OCRResult:
            return await self._call_api(model, file_bytes, mime_type)

        result, model_used, fallback_triggered = await self._with_fallback(_call)
        result.model_requested = self.model
        result.model_used = model_used
        result.fallback_triggered = fallback_triggered
        return result

    async def _call_api(
        self,
        model: str,
        file_bytes: bytes,
        mime_type: str,
    ) -> OCRResult:
        """실제 Gemini API 호출."""
        genai = self._get_client()
        model_instance = genai.GenerativeModel(model)

        file_part = {
            "mime_type": mime_type,
            "data": file_bytes,
        }

        response = await model_instance.generate_content_async([file_part, EXTRACTION_PROMPT])
        text = _response_text(response)

        return OCRResult(
            success=bool(text.strip()),
            text=text,
            confidence=self._estimate_confidence(text),
            processed_at=datetime.now(UTC).isoformat(),
        )

    def _normalize_mime_type(self, file_type: str) -> str:
        """파일 타입을 MIME 타입으로 정규화."""
        mime_map = {
            ".jpg": "image/jpeg",
            ".jpeg": "image/jpeg",
            ".png": "image/png",
            ".webp": "image/webp",
            ".pdf": "application/pdf",
            "jpg": "image/jpeg",
            "jpeg": "image/jpeg",
            "png": "image/png",
            "webp": "image/webp",
            "pdf": "application/pdf",
        }

        file_type_lower = file_type.lower().split(";")[0].strip()

        if "/" in file_type_lower:
            return file_type_lower

        return mime_map.get(file_type_lower, "application/octet-stream")

    def _estimate_confidence(self, text: str) -> float:
        """
        추출 결과 신뢰도 추정.

        - 텍스트가 비어있으면 0.0
        - 짧거나 깨진 문자가 많으면 낮게
        """
        if not text or len(text.strip()) == 0:
            return 0.0

        text = text.strip()

        if len(text) < 10:
            return 0.3

        weird_chars = sum(1 for c in text if ord(c) > 0xFFFF or c in "�□")
        if weird_chars / len(text) > 0.1:
            return 0.5

        return 0.9


# =============================================================================
# Report Generation
# =============================================================================

class GeminiReportProvider(_GeminiBase, ReportProvider):
    """
    Gemini 보고서 생성 Provider.

    Usage:
        provider = GeminiReportProvider(model="gemini-2.5-flash")
        result = await provider.generate(prompt)
    """

    name = "gemini"
    error_cls = GenerationError
    task_label = "보고서 생성"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        fallback: str | None = None,
        api_key: str | None = None,
        max_tokens: int | None = None,
    ):
        super().__init__(model=model, fallback=fallback, api_key=api_key)
        self.max_tokens = max_tokens

    async def generate(self, prompt: ReportPrompt) -> GenerationResult:
        """
        Raises:
            GenerationError: API 실패 또는 빈 응답
        """

        async def _call(model: str) -> str:
            return await self._call_api(model, prompt)

        text, model_used, fallback_triggered = await self._with_fallback(_call)

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
            fallback_triggered=fallback_triggered,
            prompt_hash=prompt.prompt_hash,
            generated_at=datetime.now(UTC).isoformat(),
        )

    async def _call_api(self, model: str, prompt: ReportPrompt) -> str:
        """실제 Gemini API 호출."""
        genai = self._get_client()
        model_instance = genai.GenerativeModel(
            model,
            system_instruction=prompt.system_instruction,
        )

        generation_config: dict[str, Any] = {}
        if self.max_tokens is not None:
            generation_config["max_output_tokens"] = self.max_tokens

        response = await model_instance.generate_content_async(
            prompt.user_prompt,
            generation_config=generation_config or None,
        )
        return _response_text(response)
