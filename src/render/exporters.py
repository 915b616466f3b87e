"""
Exporters: RenderedReport → 다운로드 가능한 파일.

모든 내보내기는 세션에 저장된 렌더링 스냅샷만 읽는다.
원본 텍스트를 다시 파싱하지 않고, Document도 수정하지 않는다.

설정 (default.yaml):
    export:
      word_format: html        # html (.doc) | docx
      print_strategy: print_page   # print_page | pdf
      print_close_fallback_ms: 1000
      pdf_font_path: null
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from src.domain.constants import (
    OUTPUT_DOCX_FILENAME,
    OUTPUT_PDF_FILENAME,
    OUTPUT_PRINT_FILENAME,
    OUTPUT_WORD_FILENAME,
    get_mime_type,
)
from src.domain.document import RenderedReport
from src.domain.errors import ErrorCodes, PolicyRejectError
from src.render.pdf import PdfRenderer
from src.render.print_page import DEFAULT_CLOSE_FALLBACK_MS, build_print_page
from src.render.word import DocxRenderer, wrap_word_document

EXPORT_KINDS = ("word", "pdf", "print")


@dataclass(frozen=True)
class ExportArtifact:
    """내보내기 결과 (메모리 버퍼)."""
    filename: str
    media_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class Exporter(ABC):
    """내보내기 전략 인터페이스."""

    kind: str = ""

    @abstractmethod
    def export(self, report: RenderedReport) -> ExportArtifact:
        """렌더링 스냅샷 → 파일."""
        pass


class WordHtmlExporter(Exporter):
    """Word 호환 HTML (.doc). 렌더링된 조각을 그대로 감쌈."""

    kind = "word"

    def export(self, report: RenderedReport) -> ExportArtifact:
        return ExportArtifact(
            filename=OUTPUT_WORD_FILENAME,
            media_type=get_mime_type(OUTPUT_WORD_FILENAME),
            content=wrap_word_document(report.html),
        )


class DocxExporter(Exporter):
    """네이티브 DOCX (python-docx)."""

    kind = "word"

    def export(self, report: RenderedReport) -> ExportArtifact:
        return ExportArtifact(
            filename=OUTPUT_DOCX_FILENAME,
            media_type=get_mime_type(OUTPUT_DOCX_FILENAME),
            content=DocxRenderer().render(report.document),
        )


class PdfExporter(Exporter):
    """A4 PDF (reportlab)."""

    kind = "pdf"

    def __init__(self, font_path: str | None = None):
        self.font_path = font_path

    def export(self, report: RenderedReport) -> ExportArtifact:
        return ExportArtifact(
            filename=OUTPUT_PDF_FILENAME,
            media_type=get_mime_type(OUTPUT_PDF_FILENAME),
            content=PdfRenderer(self.font_path).render(report.document),
        )


class PrintPageExporter(Exporter):
    """인쇄 전용 HTML 페이지 (브라우저에서 PDF로 저장)."""

    kind = "print"

    def __init__(self, close_fallback_ms: int = DEFAULT_CLOSE_FALLBACK_MS):
        self.close_fallback_ms = close_fallback_ms

    def export(self, report: RenderedReport) -> ExportArtifact:
        page = build_print_page(report, close_fallback_ms=self.close_fallback_ms)
        return ExportArtifact(
            filename=OUTPUT_PRINT_FILENAME,
            media_type=get_mime_type(OUTPUT_PRINT_FILENAME),
            content=page.encode("utf-8"),
        )


def get_exporter(kind: str, config: dict[str, Any] | None = None) -> Exporter:
    """
    설정에 맞는 Exporter 생성.

    Args:
        kind: "word" | "pdf" | "print"
        config: 앱 설정 (app.state.config)

    Returns:
        Exporter 인스턴스

    Raises:
        PolicyRejectError: UNKNOWN_EXPORT_KIND
    """
    export_config = (config or {}).get("export", {}) or {}

    if kind == "word":
        if export_config.get("word_format", "html") == "docx":
            return DocxExporter()
        return WordHtmlExporter()

    if kind == "pdf":
        return PdfExporter(font_path=export_config.get("pdf_font_path"))

    if kind == "print":
        return PrintPageExporter(
            close_fallback_ms=export_config.get(
                "print_close_fallback_ms", DEFAULT_CLOSE_FALLBACK_MS
            )
        )

    raise PolicyRejectError(
        ErrorCodes.UNKNOWN_EXPORT_KIND,
        kind=kind,
        allowed=list(EXPORT_KINDS),
    )
