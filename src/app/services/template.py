"""
Template Service: 참고 서식 파일 → 텍스트.

서식은 프롬프트에 참고용으로만 들어간다 (구조 강제 없음).
- .docx: python-docx로 문단/표 텍스트
- .txt / .md: UTF-8 (BOM 허용), 실패 시 CP949
"""

import io
import logging
from pathlib import PurePath

from docx import Document as DocxDocument

from src.domain.constants import TEMPLATE_ALLOWED_EXTENSIONS
from src.domain.errors import ErrorCodes, PolicyRejectError

logger = logging.getLogger(__name__)


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("cp949", errors="replace")


def _docx_text(data: bytes) -> str:
    """DOCX 본문 문단 + 표 셀 텍스트 (표는 '|' 행으로)."""
    doc = DocxDocument(io.BytesIO(data))
    lines = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            lines.append("| " + " | ".join(cell.text.strip() for cell in row.cells) + " |")
    return "\n".join(lines)


def extract_template_text(filename: str, data: bytes) -> str | None:
    """
    서식 파일 텍스트 추출.

    Args:
        filename: 업로드 파일명 (확장자로 형식 판단)
        data: 파일 바이트

    Returns:
        텍스트 (내용이 없으면 None)

    Raises:
        PolicyRejectError: TEMPLATE_UNSUPPORTED
    """
    ext = PurePath(filename or "").suffix.lower()
    if ext not in TEMPLATE_ALLOWED_EXTENSIONS:
        raise PolicyRejectError(
            ErrorCodes.TEMPLATE_UNSUPPORTED,
            filename=filename,
            allowed=list(TEMPLATE_ALLOWED_EXTENSIONS),
        )

    try:
        text = _docx_text(data) if ext == ".docx" else _decode_text(data)
    except Exception as e:
        raise PolicyRejectError(
            ErrorCodes.TEMPLATE_UNSUPPORTED,
            filename=filename,
            error=str(e),
            message="서식 파일을 읽을 수 없습니다. 파일이 손상되지 않았는지 확인해주세요.",
        ) from e

    text = text.strip()
    logger.info(f"Template text loaded: {filename} ({len(text)} chars)")
    return text or None
