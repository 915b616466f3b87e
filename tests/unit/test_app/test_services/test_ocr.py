"""
test_ocr.py - OCR 서비스 테스트

- 허용 형식 외 업로드는 Provider 호출 전에 거절
- 빈 추출 결과는 EMPTY_SOURCE_TEXT
- Provider 에러는 사용자 메시지를 유지한 EXTRACTION_FAILED
"""

from unittest.mock import AsyncMock, patch

import pytest

from src.app.providers.base import OCRError, OCRResult
from src.app.providers.gemini import GeminiOCRProvider
from src.app.services.ocr import OCRService
from src.domain.errors import ErrorCodes, PolicyRejectError


class TestValidateUpload:

    @pytest.mark.parametrize("media_type", ["image/jpeg", "image/png", "image/webp", "application/pdf", "IMAGE/PNG"])
    def test_allowed(self, media_type):
        assert OCRService.validate_upload(b"data", media_type) == media_type.lower()

    @pytest.mark.parametrize("media_type", ["image/gif", "text/plain", "", "application/msword"])
    def test_rejected(self, media_type):
        with pytest.raises(PolicyRejectError) as exc_info:
            OCRService.validate_upload(b"data", media_type)

        assert exc_info.value.code == ErrorCodes.UNSUPPORTED_MEDIA_TYPE

    def test_too_large(self, monkeypatch):
        monkeypatch.setattr("src.app.services.ocr.UPLOAD_MAX_SIZE_MB", 0)

        with pytest.raises(PolicyRejectError) as exc_info:
            OCRService.validate_upload(b"x", "image/png")

        assert exc_info.value.context["size"] == 1
        assert "MB" in exc_info.value.user_message


class TestExtractFromBytes:

    def test_default_provider_from_config(self, test_config):
        service = OCRService(test_config)

        assert isinstance(service.provider, GeminiOCRProvider)
        assert service.provider.model == "gemini-test"

    def test_default_provider_uses_factory(self, test_config, fake_ocr_provider):
        """Provider 생성은 get_ocr_provider 한 곳에서."""
        with patch("src.app.services.ocr.get_ocr_provider", return_value=fake_ocr_provider) as factory:
            service = OCRService(test_config)

        factory.assert_called_once_with(test_config)
        assert service.provider is fake_ocr_provider

    @pytest.mark.asyncio
    async def test_success(self, test_config, fake_ocr_provider):
        service = OCRService(test_config, provider=fake_ocr_provider)

        result = await service.extract_from_bytes(b"image", "image/jpeg")

        assert result.text == "회의 메모: 민원 처리 기간 단축"
        assert fake_ocr_provider.calls == 1

    @pytest.mark.asyncio
    async def test_unsupported_not_sent(self, test_config, fake_ocr_provider):
        service = OCRService(test_config, provider=fake_ocr_provider)

        with pytest.raises(PolicyRejectError):
            await service.extract_from_bytes(b"gif", "image/gif")

        assert fake_ocr_provider.calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n  ", None])
    async def test_empty_result_rejected(self, test_config, text):
        provider = AsyncMock()
        provider.extract_text.return_value = OCRResult(success=False, text=text, model_used="m")
        service = OCRService(test_config, provider=provider)

        with pytest.raises(PolicyRejectError) as exc_info:
            await service.extract_from_bytes(b"image", "image/png")

        assert exc_info.value.code == ErrorCodes.EMPTY_SOURCE_TEXT

    @pytest.mark.asyncio
    async def test_provider_error(self, test_config):
        provider = AsyncMock()
        provider.extract_text.side_effect = OCRError("NO_FALLBACK", "API 사용량 한도를 초과했습니다.")
        service = OCRService(test_config, provider=provider)

        with pytest.raises(PolicyRejectError) as exc_info:
            await service.extract_from_bytes(b"image", "image/png")

        assert exc_info.value.code == ErrorCodes.EXTRACTION_FAILED
        assert exc_info.value.context["provider_code"] == "NO_FALLBACK"
        assert exc_info.value.user_message == "API 사용량 한도를 초과했습니다."
