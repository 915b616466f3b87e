"""
AI Provider Abstraction.

모델명과 제공자는 config(ai.ocr, ai.report)에서만 지정.
"""

from typing import Any

from .anthropic import ClaudeReportProvider
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
from .gemini import GeminiOCRProvider, GeminiReportProvider

REPORT_PROVIDERS = ("gemini", "anthropic")


def get_ocr_provider(config: dict[str, Any]) -> OCRProvider:
    """ai.ocr 설정으로 텍스트 추출 Provider 생성."""
    ocr_config = config.get("ai", {}).get("ocr", {}) or {}
    return GeminiOCRProvider(
        model=ocr_config.get("model", "gemini-2.5-flash"),
        fallback=ocr_config.get("fallback"),
    )


def get_report_provider(config: dict[str, Any]) -> ReportProvider:
    """
    ai.report 설정으로 보고서 생성 Provider 생성.

    Raises:
        GenerationError: 알 수 없는 provider, API 키 없음
    """
    report_config = config.get("ai", {}).get("report", {}) or {}
    provider = report_config.get("provider", "gemini")
    max_tokens = report_config.get("max_tokens")

    if provider == "gemini":
        return GeminiReportProvider(
            model=report_config.get("model", "gemini-2.5-flash"),
            fallback=report_config.get("fallback"),
            max_tokens=max_tokens,
        )
    if provider == "anthropic":
        return ClaudeReportProvider(
            model=report_config.get("model", "claude-sonnet-4-5"),
            max_tokens=max_tokens or 4096,
        )

    raise GenerationError(
        "UNKNOWN_PROVIDER",
        f"지원하지 않는 보고서 생성 모델 제공자입니다: {provider}",
        allowed=list(REPORT_PROVIDERS),
    )


__all__ = [
    "OCRProvider",
    "ReportProvider",
    "OCRResult",
    "GenerationResult",
    "ReportPrompt",
    "ProviderError",
    "OCRError",
    "GenerationError",
    "GeminiOCRProvider",
    "GeminiReportProvider",
    "ClaudeReportProvider",
    "get_ocr_provider",
    "get_report_provider",
]
