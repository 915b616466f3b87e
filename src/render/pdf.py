"""
PDF 렌더러: reportlab 기반 A4 문서.

인쇄 페이지 대신 서버에서 직접 PDF를 만드는 전략.
- 화면 테마와 무관하게 항상 흰 배경/검은 글자
- 한글 글꼴: 설정된 TTF가 있으면 사용, 없으면 CID 글꼴
- 같은 Document를 BlockVisitor로 순회 (HTML을 다시 파싱하지 않음)
"""

import io
import logging
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import cm, mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate
from reportlab.platypus import Spacer as PdfSpacer
from reportlab.platypus import Table as PdfTable
from reportlab.platypus import TableStyle

from src.domain.constants import REPORT_PAGE_TITLE
from src.domain.document import (
    BlockVisitor,
    Cell,
    Document,
    OutlineLine,
    PlainText,
    Spacer,
    Table,
    TableKind,
    Title,
    TitleStyle,
)
from src.domain.errors import ErrorCodes, PolicyRejectError
from src.render.html import escape_html
from src.render.styles import (
    BASE_FONT_SIZE_PT,
    DOCUMENT_TITLE_SIZE_PT,
    LABEL_BACKGROUND,
    PAGE_MARGIN_CM,
    SIGNATURE_CELL_HEIGHT_MM,
    SIGNATURE_CELL_WIDTH_MM,
    SUBJECT_TITLE_SIZE_PT,
    indent_em,
)

logger = logging.getLogger(__name__)

CID_FONT_NAME = "HYGothic-Medium"
TTF_FONT_NAME = "ReportKorean"


def register_korean_font(font_path: str | None = None) -> str:
    """
    한글 글꼴 등록.

    Args:
        font_path: TTF 경로 (없거나 존재하지 않으면 CID 글꼴)

    Returns:
        reportlab 글꼴 이름
    """
    if font_path and Path(font_path).exists():
        if TTF_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(TTF_FONT_NAME, font_path))
            logger.info(f"Registered PDF font: {font_path}")
        return TTF_FONT_NAME

    if font_path:
        logger.warning(f"PDF font not found, using CID font: {font_path}")

    if CID_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(UnicodeCIDFont(CID_FONT_NAME))
    return CID_FONT_NAME


def _cell_markup(cell: Cell) -> str:
    if cell.is_blank:
        return ""
    return "<br/>".join(escape_html(line) for line in cell.lines)


class PdfRenderer(BlockVisitor):
    """
    Document → PDF 바이트.

    Usage:
        content = PdfRenderer(font_path).render(document)
    """

    def __init__(self, font_path: str | None = None):
        self.font_path = font_path
        self._story: list = []
        self._styles: dict[str, ParagraphStyle] = {}

    def _setup_styles(self, font_name: str) -> None:
        leading = BASE_FONT_SIZE_PT * 1.6
        self._styles = {
            "body": ParagraphStyle(
                name="ReportBody",
                fontName=font_name,
                fontSize=BASE_FONT_SIZE_PT,
                leading=leading,
                textColor=colors.black,
                alignment=TA_LEFT,
                spaceAfter=BASE_FONT_SIZE_PT * 0.4,
            ),
            "document_title": ParagraphStyle(
                name="ReportTitle",
                fontName=font_name,
                fontSize=DOCUMENT_TITLE_SIZE_PT,
                leading=DOCUMENT_TITLE_SIZE_PT * 1.4,
                alignment=TA_CENTER,
                spaceBefore=6 * mm,
                spaceAfter=10 * mm,
            ),
            "subject_title": ParagraphStyle(
                name="ReportSubject",
                fontName=font_name,
                fontSize=SUBJECT_TITLE_SIZE_PT,
                leading=SUBJECT_TITLE_SIZE_PT * 1.4,
                alignment=TA_CENTER,
                spaceAfter=6 * mm,
            ),
            "cell": ParagraphStyle(
                name="ReportCell",
                fontName=font_name,
                fontSize=BASE_FONT_SIZE_PT - 1,
                leading=(BASE_FONT_SIZE_PT - 1) * 1.4,
                alignment=TA_LEFT,
            ),
            "cell_center": ParagraphStyle(
                name="ReportCellCenter",
                fontName=font_name,
                fontSize=BASE_FONT_SIZE_PT - 1,
                leading=(BASE_FONT_SIZE_PT - 1) * 1.4,
                alignment=TA_CENTER,
            ),
        }
        self._font_name = font_name

    def render(self, document: Document) -> bytes:
        """
        Raises:
            PolicyRejectError: EXPORT_FAILED
        """
        buffer = io.BytesIO()
        try:
            self._setup_styles(register_korean_font(self.font_path))
            self._story = []
            for block in document.blocks:
                block.accept(self)

            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                leftMargin=PAGE_MARGIN_CM * cm,
                rightMargin=PAGE_MARGIN_CM * cm,
                topMargin=PAGE_MARGIN_CM * cm,
                bottomMargin=PAGE_MARGIN_CM * cm,
                title=REPORT_PAGE_TITLE,
            )
            # 빈 Document도 유효한 1페이지 PDF
            doc.build(self._story or [PdfSpacer(1, 1)])
            return buffer.getvalue()
        except PolicyRejectError:
            raise
        except Exception as e:
            raise PolicyRejectError(
                ErrorCodes.EXPORT_FAILED,
                export="pdf",
                error=str(e),
            ) from e
        finally:
            buffer.close()
            self._story = []

    # -------------------------------------------------------------------------
    # Visitor
    # -------------------------------------------------------------------------

    def visit_title(self, block: Title) -> None:
        key = "document_title" if block.style is TitleStyle.DOCUMENT else "subject_title"
        self._story.append(Paragraph(f"<b>{escape_html(block.text)}</b>", self._styles[key]))

    def visit_outline(self, block: OutlineLine) -> None:
        style = ParagraphStyle(
            name=f"ReportOutline{block.level}",
            parent=self._styles["body"],
            leftIndent=indent_em(block.level) * BASE_FONT_SIZE_PT,
        )
        self._story.append(Paragraph(escape_html(block.text), style))

    def visit_text(self, block: PlainText) -> None:
        self._story.append(Paragraph(escape_html(block.text), self._styles["body"]))

    def visit_spacer(self, block: Spacer) -> None:
        self._story.append(PdfSpacer(1, BASE_FONT_SIZE_PT))

    def visit_table(self, block: Table) -> None:
        width = block.column_count
        centered = block.table_kind is TableKind.APPROVAL
        cell_style = self._styles["cell_center" if centered else "cell"]
        header_style = self._styles["cell_center"]

        data = []
        if block.header is not None:
            header = block.header + (Cell(""),) * (width - len(block.header))
            data.append([Paragraph(_cell_markup(c), header_style) for c in header])
        header_rows = len(data)

        for row in block.padded_rows():
            cells = []
            for col, c in enumerate(row):
                if block.table_kind is TableKind.METADATA and col == 0:
                    cells.append(Paragraph(f"<b>{_cell_markup(c)}</b>", header_style))
                else:
                    cells.append(Paragraph(_cell_markup(c), cell_style))
            data.append(cells)

        commands = [
            ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("FONTNAME", (0, 0), (-1, -1), self._font_name),
        ]

        if block.table_kind is TableKind.APPROVAL:
            row_heights = [None] * header_rows + [SIGNATURE_CELL_HEIGHT_MM * mm] * len(block.rows)
            table = PdfTable(
                data,
                colWidths=[SIGNATURE_CELL_WIDTH_MM * mm] * width,
                rowHeights=row_heights,
                hAlign="RIGHT",
            )
        else:
            table = PdfTable(data, hAlign="LEFT")
            if block.table_kind is TableKind.METADATA and block.rows:
                commands.append(
                    ("BACKGROUND", (0, header_rows), (0, -1), colors.HexColor(LABEL_BACKGROUND))
                )

        table.setStyle(TableStyle(commands))
        self._story.append(table)
        self._story.append(PdfSpacer(1, 4 * mm))


def render_pdf(document: Document, font_path: str | None = None) -> bytes:
    """PDF 생성 (간편 함수)."""
    return PdfRenderer(font_path).render(document)
