"""
Render layer: Document → 화면 HTML / Word / PDF / 인쇄 페이지.

역할:
- html: 단일 렌더링 (RenderedReport 스냅샷)
- word: Word 호환 HTML 봉투, python-docx 네이티브 DOCX
- pdf: reportlab A4 PDF
- print_page: 자동 인쇄 페이지
- exporters: 설정 기반 내보내기 전략 선택
"""

from .exporters import ExportArtifact, Exporter, get_exporter
from .html import HtmlRenderer, escape_html, render_html, render_report
from .pdf import PdfRenderer, render_pdf
from .print_page import build_print_page
from .word import DocxRenderer, render_docx, wrap_word_document

__all__ = [
    "render_report",
    "render_html",
    "render_docx",
    "render_pdf",
    "wrap_word_document",
    "build_print_page",
    "get_exporter",
    "escape_html",
    "HtmlRenderer",
    "DocxRenderer",
    "PdfRenderer",
    "Exporter",
    "ExportArtifact",
]
