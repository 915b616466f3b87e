"""
Error definitions for the report pipeline.

규칙:
- 조용한 실패 금지 → PolicyRejectError로 명시적 실패
- AI 출력 형식 오류는 에러가 아님 → 파서가 평문으로 강등 (parse note)
- 사용자에게는 USER_MESSAGES의 한국어 메시지만 노출
"""

from typing import Any


class PolicyRejectError(Exception):
    """
    파이프라인 정책 위반 시 발생하는 에러.

    즉시 중단이 필요한 경우에만 사용:
    - 필수 입력 누락 / 원본 텍스트 없음
    - 지원하지 않는 파일 형식
    - 동일 세션에서 요청 중복 (in-flight)
    - 내보내기 대상 보고서 없음

    Usage:
        raise PolicyRejectError("MISSING_REQUIRED_FIELD", fields=["author"])
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    @property
    def user_message(self) -> str:
        """화면에 표시할 한국어 메시지."""
        detail = self.context.get("message")
        if detail:
            return str(detail)
        return USER_MESSAGES.get(self.code, DEFAULT_USER_MESSAGE)

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 새 코드 추가 시 USER_MESSAGES에도 메시지 추가."""

    # === Input validation (입력 단계로 복귀) ===
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    EMPTY_SOURCE_TEXT = "EMPTY_SOURCE_TEXT"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    TEMPLATE_UNSUPPORTED = "TEMPLATE_UNSUPPORTED"
    REFINEMENT_EMPTY = "REFINEMENT_EMPTY"

    # === Collaborators ===
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    GENERATION_FAILED = "GENERATION_FAILED"

    # === Session ===
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    REQUEST_IN_FLIGHT = "REQUEST_IN_FLIGHT"

    # === Export ===
    REPORT_NOT_FOUND = "REPORT_NOT_FOUND"
    EXPORT_FAILED = "EXPORT_FAILED"
    UNKNOWN_EXPORT_KIND = "UNKNOWN_EXPORT_KIND"

    # === Parse notes (warning, not reject) ===
    MALFORMED_TABLE_DEGRADED = "MALFORMED_TABLE_DEGRADED"


DEFAULT_USER_MESSAGE = "알 수 없는 오류가 발생했습니다. 다시 시도해주세요."

USER_MESSAGES: dict[str, str] = {
    ErrorCodes.MISSING_REQUIRED_FIELD: "보고서 생성을 위한 모든 필수 항목을 입력해주세요.",
    ErrorCodes.EMPTY_SOURCE_TEXT: (
        "원본 내용에서 텍스트를 찾을 수 없습니다. 다른 파일이나 텍스트를 사용해보세요."
    ),
    ErrorCodes.UNSUPPORTED_MEDIA_TYPE: (
        "지원하지 않는 파일 형식입니다. JPG, PNG, WEBP, PDF 파일만 업로드할 수 있습니다."
    ),
    ErrorCodes.TEMPLATE_UNSUPPORTED: (
        "서식 파일은 DOCX, TXT, MD 형식만 사용할 수 있습니다."
    ),
    ErrorCodes.REFINEMENT_EMPTY: "수정 지시사항을 입력해주세요.",
    ErrorCodes.EXTRACTION_FAILED: "파일에서 텍스트를 추출하지 못했습니다.",
    ErrorCodes.GENERATION_FAILED: "보고서 생성 중 오류가 발생했습니다.",
    ErrorCodes.SESSION_NOT_FOUND: "세션이 만료되었습니다. 처음부터 다시 시도해주세요.",
    ErrorCodes.REQUEST_IN_FLIGHT: (
        "이전 요청을 처리하고 있습니다. 완료된 후 다시 시도해주세요."
    ),
    ErrorCodes.REPORT_NOT_FOUND: "내보낼 보고서를 찾을 수 없습니다.",
    ErrorCodes.EXPORT_FAILED: "보고서 파일을 만드는 중 오류가 발생했습니다.",
    ErrorCodes.UNKNOWN_EXPORT_KIND: "지원하지 않는 내보내기 형식입니다.",
}
