"""
Word 렌더러.

두 가지 형식:
- Word 호환 HTML (.doc): 렌더링된 HTML 조각을 Office 네임스페이스 봉투로 감쌈
- 네이티브 DOCX (.docx): python-docx로 같은 Document를 직접 조립

두 경우 모두 Document/RenderedReport를 수정하지 않는다.
"""

import io

from docx import Document as DocxDocument
from docx.enum.table import WD_ROW_HEIGHT_RULE, WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Mm, Pt

from src.domain.constants import REPORT_PAGE_TITLE
from src.domain.document import (
    BlockVisitor,
    Cell,
    Document,
    OutlineLine,
    PlainText,
    RenderedReport,
    Spacer,
    Table,
    TableKind,
    Title,
    TitleStyle,
)
from src.domain.errors import ErrorCodes, PolicyRejectError
from src.render.styles import (
    BASE_FONT_SIZE_PT,
    DOCUMENT_TITLE_SIZE_PT,
    LABEL_BACKGROUND,
    PAGE_MARGIN_CM,
    REPORT_CSS,
    SIGNATURE_CELL_HEIGHT_MM,
    SIGNATURE_CELL_WIDTH_MM,
    SUBJECT_TITLE_SIZE_PT,
    indent_em,
)

WORD_FONT = "맑은 고딕"

# Word가 HTML을 문서로 열도록 하는 봉투
WORD_ENVELOPE = """<html xmlns:o="urn:schemas-microsoft-com:office:office" \
xmlns:w="urn:schemas-microsoft-com:office:word" \
xmlns="http://www.w3.org/TR/REC-html40">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
@page {{ size: 21cm 29.7cm; margin: {margin}cm; }}
{css}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def wrap_word_document(html: str, title: str = REPORT_PAGE_TITLE) -> bytes:
    """
    렌더링된 HTML 조각을 Word 호환 문서로 감쌈.

    조각 자체는 변환하지 않는다 (화면과 동일한 마크업).

    Args:
        html: RenderedReport.html
        title: 문서 제목

    Returns:
        UTF-8 인코딩된 문서 바이트
    """
    return WORD_ENVELOPE.format(
        title=title,
        margin=PAGE_MARGIN_CM,
        css=REPORT_CSS,
        body=html,
    ).encode("utf-8")


# =============================================================================
# python-docx helpers
# =============================================================================

def set_cell_background(cell, hex_color: str) -> None:
    """셀 배경색 (w:shd)."""
    tc_pr = cell._tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), hex_color.lstrip("#"))
    tc_pr.append(shd)


def set_table_borders(table, size: int = 4, color: str = "000000") -> None:
    """표 전체 실선 테두리 (w:tblBorders)."""
    tbl_pr = table._tbl.tblPr
    borders = OxmlElement("w:tblBorders")
    for edge in ("top", "left", "bottom", "right", "insideH", "insideV"):
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:val"), "single")
        element.set(qn("w:sz"), str(size))
        element.set(qn("w:space"), "0")
        element.set(qn("w:color"), color)
        borders.append(element)
    tbl_pr.append(borders)


def set_east_asian_font(run, font_name: str = WORD_FONT) -> None:
    """한글 글꼴 지정 (rFonts eastAsia)."""
    run.font.name = font_name
    r_pr = run._element.get_or_add_rPr()
    r_pr.get_or_add_rFonts().set(qn("w:eastAsia"), font_name)


def write_cell(cell, value: Cell, bold: bool = False, align=None) -> None:
    """셀 내용 쓰기. 줄바꿈 마커는 break로."""
    paragraph = cell.paragraphs[0]
    if align is not None:
        paragraph.alignment = align
    lines = [] if value.is_blank else value.lines
    for i, line in enumerate(lines):
        run = paragraph.add_run(line)
        run.bold = bold
        set_east_asian_font(run)
        if i < len(lines) - 1:
            run.add_break()


class DocxRenderer(BlockVisitor):
    """
    네이티브 DOCX 렌더러.

    Usage:
        content = DocxRenderer().render(document)
    """

    def __init__(self):
        self._doc = None

    def render(self, document: Document) -> bytes:
        """
        Document → DOCX 바이트.

        Raises:
            PolicyRejectError: EXPORT_FAILED
        """
        buffer = io.BytesIO()
        try:
            self._doc = DocxDocument()
            self._setup_page()
            for block in document.blocks:
                block.accept(self)
            self._doc.save(buffer)
            return buffer.getvalue()
        except PolicyRejectError:
            raise
        except Exception as e:
            raise PolicyRejectError(
                ErrorCodes.EXPORT_FAILED,
                export="docx",
                error=str(e),
            ) from e
        finally:
            buffer.close()
            self._doc = None

    def _setup_page(self) -> None:
        section = self._doc.sections[0]
        section.page_width = Mm(210)
        section.page_height = Mm(297)
        for side in ("left_margin", "right_margin", "top_margin", "bottom_margin"):
            setattr(section, side, Cm(PAGE_MARGIN_CM))

        normal = self._doc.styles["Normal"]
        normal.font.name = WORD_FONT
        normal.font.size = Pt(BASE_FONT_SIZE_PT)
        normal.element.get_or_add_rPr().get_or_add_rFonts().set(qn("w:eastAsia"), WORD_FONT)

    def _paragraph(self, text: str, size_pt: int | None = None, bold: bool = False):
        paragraph = self._doc.add_paragraph()
        run = paragraph.add_run(text)
        run.bold = bold
        if size_pt is not None:
            run.font.size = Pt(size_pt)
        set_east_asian_font(run)
        return paragraph

    # -------------------------------------------------------------------------
    # Visitor
    # -------------------------------------------------------------------------

    def visit_title(self, block: Title) -> None:
        if block.style is TitleStyle.DOCUMENT:
            paragraph = self._paragraph(block.text, DOCUMENT_TITLE_SIZE_PT, bold=True)
            # 자간 확대 (w:spacing, 1/20pt 단위)
            for run in paragraph.runs:
                spacing = OxmlElement("w:spacing")
                spacing.set(qn("w:val"), str(DOCUMENT_TITLE_SIZE_PT * 10))
                run._element.get_or_add_rPr().append(spacing)
        else:
            paragraph = self._paragraph(block.text, SUBJECT_TITLE_SIZE_PT, bold=True)
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def visit_outline(self, block: OutlineLine) -> None:
        paragraph = self._paragraph(block.text)
        # em → pt (본문 글자 크기 기준)
        paragraph.paragraph_format.left_indent = Pt(indent_em(block.level) * BASE_FONT_SIZE_PT)

    def visit_text(self, block: PlainText) -> None:
        self._paragraph(block.text)

    def visit_spacer(self, block: Spacer) -> None:
        self._doc.add_paragraph()

    def visit_table(self, block: Table) -> None:
        width = block.column_count
        header = None
        if block.header is not None:
            header = block.header + (Cell(""),) * (width - len(block.header))
        rows = block.padded_rows()

        table = self._doc.add_table(rows=0, cols=width)
        set_table_borders(table)

        if header is not None:
            cells = table.add_row().cells
            for cell, value in zip(cells, header):
                write_cell(cell, value, align=WD_ALIGN_PARAGRAPH.CENTER)

        for row in rows:
            row_obj = table.add_row()
            for col, (cell, value) in enumerate(zip(row_obj.cells, row)):
                if block.table_kind is TableKind.METADATA and col == 0:
                    write_cell(cell, value, bold=True, align=WD_ALIGN_PARAGRAPH.CENTER)
                    set_cell_background(cell, LABEL_BACKGROUND)
                elif block.table_kind is TableKind.APPROVAL:
                    write_cell(cell, value, align=WD_ALIGN_PARAGRAPH.CENTER)
                else:
                    write_cell(cell, value, align=WD_ALIGN_PARAGRAPH.LEFT)

            if block.table_kind is TableKind.APPROVAL:
                row_obj.height = Mm(SIGNATURE_CELL_HEIGHT_MM)
                row_obj.height_rule = WD_ROW_HEIGHT_RULE.AT_LEAST

        if block.table_kind is TableKind.APPROVAL:
            table.alignment = WD_TABLE_ALIGNMENT.RIGHT
            for column in table.columns:
                for cell in column.cells:
                    cell.width = Mm(SIGNATURE_CELL_WIDTH_MM)

        # 연속된 표가 Word에서 붙지 않도록
        self._doc.add_paragraph()


def render_docx(document: Document) -> bytes:
    """네이티브 DOCX 생성 (간편 함수)."""
    return DocxRenderer().render(document)


def render_word_html(report: RenderedReport) -> bytes:
    """Word 호환 HTML 문서 생성 (간편 함수)."""
    return wrap_word_document(report.html)
