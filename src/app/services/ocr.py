"""
OCR Service: 이미지/PDF → 원본 텍스트.

- 허용 형식: JPG, PNG, WEBP, PDF (그 외는 호출 전에 거절)
- 빈 결과는 실패로 취급 (생성 단계로 넘기지 않음)
- Provider 에러는 사용자 메시지를 유지한 PolicyRejectError로 변환
"""

import logging

from src.app.providers import get_ocr_provider
from src.app.providers.base import OCRError, OCRProvider, OCRResult
from src.domain.constants import EXTRACTION_ALLOWED_MEDIA_TYPES, UPLOAD_MAX_SIZE_MB
from src.domain.errors import ErrorCodes, PolicyRejectError

logger = logging.getLogger(__name__)


class OCRService:
    """
    OCR 서비스.

    이미지/PDF에서 보고서 원본 텍스트 추출.
    """

    def __init__(
        self,
        config: dict,
        provider: OCRProvider | None = None,
    ):
        """
        Args:
            config: 설정 (ai.ocr 포함)
            provider: OCR Provider (None이면 config 기반 생성)
        """
        self.config = config
        self.provider = provider if provider is not None else get_ocr_provider(config)

    @staticmethod
    def validate_upload(file_bytes: bytes, media_type: str) -> str:
        """
        업로드 검사.

        Returns:
            정규화된 MIME 타입

        Raises:
            PolicyRejectError: UNSUPPORTED_MEDIA_TYPE
        """
        normalized = (media_type or "").split(";")[0].strip().lower()
        if normalized not in EXTRACTION_ALLOWED_MEDIA_TYPES:
            raise PolicyRejectError(
                ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                media_type=normalized,
                allowed=list(EXTRACTION_ALLOWED_MEDIA_TYPES),
            )

        max_bytes = UPLOAD_MAX_SIZE_MB * 1024 * 1024
        if len(file_bytes) > max_bytes:
            raise PolicyRejectError(
                ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                media_type=normalized,
                size=len(file_bytes),
                message=f"파일 크기는 {UPLOAD_MAX_SIZE_MB}MB 이하여야 합니다.",
            )
        return normalized

    async def extract_from_bytes(
        self,
        file_bytes: bytes,
        media_type: str,
    ) -> OCRResult:
        """
        바이트에서 텍스트 추출.

        Returns:
            OCRResult (text는 비어 있지 않음)

        Raises:
            PolicyRejectError: UNSUPPORTED_MEDIA_TYPE, EXTRACTION_FAILED, EMPTY_SOURCE_TEXT
        """
        normalized = self.validate_upload(file_bytes, media_type)

        try:
            result = await self.provider.extract_text(file_bytes, normalized)
        except OCRError as e:
            logger.warning(f"Text extraction failed: {e.code}")
            raise PolicyRejectError(
                ErrorCodes.EXTRACTION_FAILED,
                provider_code=e.code,
                message=e.message,
            ) from e

        if not result.text or not result.text.strip():
            logger.info(f"Extraction returned empty text (model={result.model_used})")
            raise PolicyRejectError(
                ErrorCodes.EMPTY_SOURCE_TEXT,
                media_type=normalized,
                model_used=result.model_used,
            )

        logger.info(
            f"Extracted {len(result.text)} chars "
            f"(model={result.model_used}, fallback={result.fallback_triggered})"
        )
        return result
