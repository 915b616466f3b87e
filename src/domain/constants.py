"""
Domain Constants: 파이프라인 전역 상수.

파일명 정책, 허용 MIME 타입, 보고서 서식 상수 등
시스템 전반에서 사용되는 값들.
"""

import os

# =============================================================================
# Output Filenames (출력 파일명 정책)
# =============================================================================
# 화면/인쇄/다운로드 모두 동일한 렌더링 스냅샷에서 만들어짐.
# - ai-report.doc: Word 호환 HTML 문서 (기본)
# - ai-report.docx: 네이티브 DOCX (export.word_format=docx)
# - ai-report.pdf: A4 PDF
# - ai-report.html: 인쇄 전용 페이지

OUTPUT_BASENAME = "ai-report"
OUTPUT_WORD_FILENAME = f"{OUTPUT_BASENAME}.doc"
OUTPUT_DOCX_FILENAME = f"{OUTPUT_BASENAME}.docx"
OUTPUT_PDF_FILENAME = f"{OUTPUT_BASENAME}.pdf"
OUTPUT_PRINT_FILENAME = f"{OUTPUT_BASENAME}.html"

REPORT_PAGE_TITLE = "AI 분석 보고서"

# =============================================================================
# Upload Policy (텍스트 추출 허용 형식)
# =============================================================================

EXTRACTION_ALLOWED_MEDIA_TYPES = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/pdf",
)

TEMPLATE_ALLOWED_EXTENSIONS = (".docx", ".txt", ".md")

UPLOAD_MAX_SIZE_MB = 20

# =============================================================================
# Report Format (보고서 서식)
# =============================================================================

# 생성 프롬프트가 문서 최상단 제목으로 쓰도록 지시하는 고정 문구
DEFAULT_TITLE_MARKER = "보 고 서"

# 개요 단계별 들여쓰기 (em)
OUTLINE_INDENT_EM = 1.5

# 보고서 일시 표기: "2024. 01. 15."
REPORT_DATE_FORMAT = "%Y. %m. %d."

# =============================================================================
# MIME Types
# =============================================================================

MIME_TYPES = {
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".pdf": "application/pdf",
    ".html": "text/html; charset=utf-8",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".json": "application/json",
    ".txt": "text/plain",
    ".md": "text/markdown",
}


def get_mime_type(filename: str) -> str:
    """
    파일명에서 MIME 타입 추출.

    Args:
        filename: 파일명 (확장자 포함)

    Returns:
        MIME 타입 문자열 (알 수 없으면 octet-stream)
    """
    ext = os.path.splitext(filename)[1].lower()
    return MIME_TYPES.get(ext, "application/octet-stream")
