"""
HTML 렌더러: Document → 보고서 HTML 조각.

화면에 표시되는 HTML이 곧 내보내기의 원본.
- 모든 텍스트는 escape (AI 출력은 신뢰하지 않음)
- 셀 안의 <br> 마커만 실제 줄바꿈으로
- 빈 결재 칸은 &nbsp; (빈 문자열은 셀이 접힘)
"""

import html

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
from src.render.styles import (
    BORDER_COLOR,
    DOCUMENT_TITLE_LETTER_SPACING_EM,
    LABEL_BACKGROUND,
    SIGNATURE_CELL_HEIGHT_MM,
    SIGNATURE_CELL_WIDTH_MM,
    indent_em,
)

NBSP_ENTITY = "&nbsp;"

_CELL_STYLE = f"border:1px solid {BORDER_COLOR};padding:0.25em 0.5em;"


def escape_html(text: str) -> str:
    """HTML 이스케이프."""
    return html.escape(text)


def render_cell_content(cell: Cell) -> str:
    """셀 내용: 줄바꿈 마커 → <br>, 나머지는 문자 그대로."""
    if cell.is_blank:
        return NBSP_ENTITY
    return "<br>".join(escape_html(line) for line in cell.lines)


class HtmlRenderer(BlockVisitor):
    """블록별 HTML 생성기."""

    def render(self, document: Document) -> str:
        parts = [block.accept(self) for block in document.blocks]
        body = "\n".join(parts)
        return f'<div class="report-document">\n{body}\n</div>'

    def visit_title(self, block: Title) -> str:
        text = escape_html(block.text)
        if block.style is TitleStyle.DOCUMENT:
            return (
                '<h1 class="report-title report-title-document" '
                f'style="text-align:center;letter-spacing:{DOCUMENT_TITLE_LETTER_SPACING_EM}em;">'
                f"{text}</h1>"
            )
        return (
            '<h2 class="report-title report-title-subject" '
            f'style="text-align:center;font-weight:bold;">{text}</h2>'
        )

    def visit_outline(self, block: OutlineLine) -> str:
        return (
            f'<p class="report-outline report-outline-{block.level}" '
            f'style="margin-left:{indent_em(block.level)}em;">'
            f"{escape_html(block.text)}</p>"
        )

    def visit_text(self, block: PlainText) -> str:
        return f'<p class="report-text">{escape_html(block.text)}</p>'

    def visit_spacer(self, block: Spacer) -> str:
        return f'<p class="report-spacer">{NBSP_ENTITY}</p>'

    def visit_table(self, block: Table) -> str:
        if block.table_kind is TableKind.APPROVAL:
            return self._approval_table(block)
        if block.table_kind is TableKind.METADATA:
            return self._metadata_table(block)
        return self._generic_table(block)

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def _header_row(self, block: Table, align: str) -> str:
        if block.header is None:
            return ""
        width = block.column_count
        header = block.header + (Cell(""),) * (width - len(block.header))
        cells = "".join(
            f'<th style="{_CELL_STYLE}text-align:{align};">{render_cell_content(c)}</th>'
            for c in header
        )
        return f"<thead><tr>{cells}</tr></thead>"

    def _approval_table(self, block: Table) -> str:
        cell_style = (
            f"{_CELL_STYLE}text-align:center;"
            f"width:{SIGNATURE_CELL_WIDTH_MM}mm;height:{SIGNATURE_CELL_HEIGHT_MM}mm;"
        )
        body = "".join(
            "<tr>"
            + "".join(
                f'<td class="signature-cell" style="{cell_style}">{render_cell_content(c)}</td>'
                for c in row
            )
            + "</tr>"
            for row in block.padded_rows()
        )
        return (
            '<table class="report-table report-table-approval" align="right" '
            'style="border-collapse:collapse;margin-left:auto;margin-right:0;">'
            f"{self._header_row(block, 'center')}<tbody>{body}</tbody></table>"
            '\n<div class="report-clear" style="clear:both;"></div>'
        )

    def _metadata_table(self, block: Table) -> str:
        label_style = (
            f"{_CELL_STYLE}text-align:center;font-weight:bold;background:{LABEL_BACKGROUND};"
        )
        value_style = f"{_CELL_STYLE}text-align:left;"
        rows = []
        for row in block.padded_rows():
            if not row:
                continue
            label, values = row[0], row[1:]
            cells = f'<th scope="row" class="meta-label" style="{label_style}">{render_cell_content(label)}</th>'
            cells += "".join(
                f'<td class="meta-value" style="{value_style}">{render_cell_content(c)}</td>'
                for c in values
            )
            rows.append(f"<tr>{cells}</tr>")
        return (
            '<table class="report-table report-table-metadata" '
            'style="border-collapse:collapse;">'
            f"{self._header_row(block, 'center')}<tbody>{''.join(rows)}</tbody></table>"
        )

    def _generic_table(self, block: Table) -> str:
        cell_style = f"{_CELL_STYLE}text-align:left;"
        body = "".join(
            "<tr>"
            + "".join(f'<td style="{cell_style}">{render_cell_content(c)}</td>' for c in row)
            + "</tr>"
            for row in block.padded_rows()
        )
        return (
            '<table class="report-table report-table-generic" '
            'style="border-collapse:collapse;">'
            f"{self._header_row(block, 'left')}<tbody>{body}</tbody></table>"
        )


def render_html(document: Document) -> str:
    """Document → HTML 조각."""
    return HtmlRenderer().render(document)


def render_report(document: Document) -> RenderedReport:
    """
    Document를 한 번 렌더링해 스냅샷으로 고정.

    이후 화면/내보내기는 이 RenderedReport만 사용.
    """
    return RenderedReport(document=document, html=render_html(document))
