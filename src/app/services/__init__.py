"""
Application Services.

역할:
- ocr: 원본 이미지/PDF 텍스트 추출
- template: 참고 서식 파일 텍스트
- prompt: 생성/수정 프롬프트
- session: 메모리 세션 저장소
- generate: 생성/수정/내보내기 흐름
"""

from .generate import ReportService, SourceUpload
from .ocr import OCRService
from .prompt import build_prompt
from .session import ReportSession, SessionStore
from .template import extract_template_text

__all__ = [
    "ReportService",
    "SourceUpload",
    "OCRService",
    "ReportSession",
    "SessionStore",
    "build_prompt",
    "extract_template_text",
]
