"""
test_base.py - Provider 공용 타입 / 팩토리 테스트
"""

import pytest

from src.app.providers import (
    ClaudeReportProvider,
    GeminiOCRProvider,
    GeminiReportProvider,
    get_ocr_provider,
    get_report_provider,
)
from src.app.providers.base import (
    GenerationError,
    GenerationResult,
    OCRError,
    ProviderError,
    ReportPrompt,
    compute_hash,
)


class TestComputeHash:

    def test_format(self):
        value = compute_hash("본문")

        assert value.startswith("sha256:")
        assert len(value) == len("sha256:") + 16

    def test_deterministic(self):
        assert compute_hash("a") == compute_hash("a")
        assert compute_hash("a") != compute_hash("b")


class TestReportPrompt:

    def test_hash_covers_both_parts(self):
        base = ReportPrompt("system", "user")

        assert base.prompt_hash == ReportPrompt("system", "user").prompt_hash
        assert base.prompt_hash != ReportPrompt("system2", "user").prompt_hash
        assert base.prompt_hash != ReportPrompt("system", "user2").prompt_hash


class TestGenerationResult:

    def test_to_dict_omits_none_and_text(self):
        result = GenerationResult(text="본문입니다", provider="gemini", model_used="m")

        data = result.to_dict()

        assert data == {
            "provider": "gemini",
            "model_used": "m",
            "fallback_triggered": False,
            "text_length": 5,
        }


class TestProviderError:

    def test_hierarchy(self):
        assert issubclass(OCRError, ProviderError)
        assert issubclass(GenerationError, ProviderError)

    def test_fields(self):
        error = GenerationError("EMPTY_RESPONSE", "빈 응답", model="m")

        assert error.code == "EMPTY_RESPONSE"
        assert error.message == "빈 응답"
        assert error.context == {"model": "m"}
        assert str(error) == "[EMPTY_RESPONSE] 빈 응답"


class TestFactories:
    """config 기반 Provider 생성."""

    def test_default_report_provider_is_gemini(self):
        provider = get_report_provider({})

        assert isinstance(provider, GeminiReportProvider)
        assert provider.model == "gemini-2.5-flash"

    def test_gemini_report_from_config(self, default_config):
        provider = get_report_provider(default_config)

        assert isinstance(provider, GeminiReportProvider)
        assert provider.model == default_config["ai"]["report"]["model"]
        assert provider.fallback == default_config["ai"]["report"]["fallback"]
        assert provider.max_tokens == default_config["ai"]["report"]["max_tokens"]

    def test_anthropic_report_provider(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")

        provider = get_report_provider(
            {"ai": {"report": {"provider": "anthropic", "model": "claude-x", "max_tokens": 1000}}}
        )

        assert isinstance(provider, ClaudeReportProvider)
        assert provider.model == "claude-x"
        assert provider.max_tokens == 1000

    def test_unknown_provider(self):
        with pytest.raises(GenerationError) as exc_info:
            get_report_provider({"ai": {"report": {"provider": "openai"}}})

        assert exc_info.value.code == "UNKNOWN_PROVIDER"
        assert exc_info.value.context["allowed"] == ["gemini", "anthropic"]

    def test_ocr_provider(self, default_config):
        provider = get_ocr_provider(default_config)

        assert isinstance(provider, GeminiOCRProvider)
        assert provider.model == default_config["ai"]["ocr"]["model"]
