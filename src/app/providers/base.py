"""
AI Provider 추상 인터페이스.

- Provider 추상화로 모델 교체 가능 (Gemini / Claude)
- model_requested + model_used 필수 기록
- 실패는 ProviderError 하위 예외로, 사용자용 한국어 메시지 포함
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


def compute_hash(content: str) -> str:
    """SHA-256 해시 계산."""
    return f"sha256:{hashlib.sha256(content.encode()).hexdigest()[:16]}"


# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class OCRResult:
    """
    텍스트 추출 결과.

    - model_requested: config에 설정된 모델
    - model_used: 실제 호출된 모델 (fallback 시 다를 수 있음)
    - fallback_triggered: fallback 발생 여부
    """
    success: bool
    text: str | None = None
    confidence: float | None = None

    model_requested: str | None = None
    model_used: str | None = None
    fallback_triggered: bool = False

    processed_at: str | None = None
    error_message: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "text": self.text,
            "confidence": self.confidence,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "fallback_triggered": self.fallback_triggered,
            "processed_at": self.processed_at,
            "error_message": self.error_message,
            "error_code": self.error_code,
        }


@dataclass
class GenerationResult:
    """
    보고서 생성 결과 (마크다운 방언 텍스트 한 덩어리).

    text는 파서에 그대로 전달된다. 구조 검증은 파서가 담당.
    """
    text: str
    provider: str | None = None
    model_requested: str | None = None
    model_used: str | None = None
    fallback_triggered: bool = False
    prompt_hash: str | None = None
    request_id: str | None = None
    generated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "provider": self.provider,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "fallback_triggered": self.fallback_triggered,
            "prompt_hash": self.prompt_hash,
            "request_id": self.request_id,
            "generated_at": self.generated_at,
            "text_length": len(self.text),
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass(frozen=True)
class ReportPrompt:
    """생성 요청 1회분 프롬프트 (시스템 지시 + 사용자 프롬프트)."""
    system_instruction: str
    user_prompt: str

    @property
    def prompt_hash(self) -> str:
        return compute_hash(f"{self.system_instruction}\n{self.user_prompt}")


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider 관련 에러. message는 화면에 그대로 표시 가능한 한국어."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class OCRError(ProviderError):
    """텍스트 추출 관련 에러."""
    pass


class GenerationError(ProviderError):
    """보고서 생성 관련 에러."""
    pass


# =============================================================================
# Abstract Providers
# =============================================================================

class ReportProvider(ABC):
    """
    보고서 생성 Provider 추상 인터페이스.

    역할: 원본 내용 + 작성 정보 → 마크다운 방언 보고서 텍스트
    """

    name: str = ""

    @abstractmethod
    async def generate(self, prompt: ReportPrompt) -> GenerationResult:
        """
        보고서 텍스트 생성.

        Args:
            prompt: 시스템 지시와 사용자 프롬프트

        Returns:
            GenerationResult

        Raises:
            GenerationError: 호출 실패 또는 빈 응답
        """
        ...


class OCRProvider(ABC):
    """
    OCR Provider 추상 인터페이스.

    역할: 이미지/PDF → 텍스트 추출
    """

    @abstractmethod
    async def extract_text(
        self,
        file_bytes: bytes,
        file_type: str,
    ) -> OCRResult:
        """
        파일에서 텍스트 추출.

        Args:
            file_bytes: 파일 바이트
            file_type: MIME 타입 또는 확장자

        Returns:
            OCRResult

        Fallback 정책:
        - FALLBACK_ERRORS → fallback 모델로 재시도
        - REJECT_IMMEDIATELY → 즉시 에러
        """
        ...
