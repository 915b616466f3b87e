"""
보고서 서식 상수와 공용 스타일시트.

화면/Word/인쇄/PDF가 같은 수치를 쓰도록 한 곳에 모음.
레이아웃을 결정하는 값(들여쓰기, 결재 칸 크기, 정렬)은 HTML 렌더러가
인라인 스타일로도 넣기 때문에 스타일시트가 없어도 모양이 유지된다.
"""

from src.domain.constants import OUTLINE_INDENT_EM

FONT_FAMILY = (
    "'Malgun Gothic', '맑은 고딕', 'Apple SD Gothic Neo', 'Nanum Gothic', dotum, sans-serif"
)
BASE_FONT_SIZE_PT = 11
DOCUMENT_TITLE_SIZE_PT = 20
SUBJECT_TITLE_SIZE_PT = 16
DOCUMENT_TITLE_LETTER_SPACING_EM = 0.5

# 결재란 서명 칸 (손 서명이 들어갈 크기)
SIGNATURE_CELL_WIDTH_MM = 24
SIGNATURE_CELL_HEIGHT_MM = 20

BORDER_COLOR = "#000000"
LABEL_BACKGROUND = "#f1f5f9"

# A4, 여백 2cm
PAGE_MARGIN_CM = 2


def indent_em(level: int) -> float:
    return level * OUTLINE_INDENT_EM


REPORT_CSS = f"""
.report-document {{
    font-family: {FONT_FAMILY};
    font-size: {BASE_FONT_SIZE_PT}pt;
    line-height: 1.6;
}}
.report-title-document {{
    font-size: {DOCUMENT_TITLE_SIZE_PT}pt;
    font-weight: bold;
    text-align: center;
    letter-spacing: {DOCUMENT_TITLE_LETTER_SPACING_EM}em;
    margin: 1.5rem 0 2rem 0;
}}
.report-title-subject {{
    font-size: {SUBJECT_TITLE_SIZE_PT}pt;
    font-weight: bold;
    text-align: center;
    margin: 1rem 0 1.5rem 0;
}}
.report-outline, .report-text {{
    margin: 0 0 0.4em 0;
}}
.report-spacer {{
    margin: 0;
    line-height: 1;
}}
.report-table {{
    border-collapse: collapse;
    margin-bottom: 1rem;
}}
.report-table th, .report-table td {{
    border: 1px solid {BORDER_COLOR};
    padding: 0.25em 0.5em;
}}
.report-table-approval {{
    margin-left: auto;
    margin-right: 0;
}}
.report-table-approval th {{
    font-weight: normal;
    text-align: center;
}}
.report-table-approval td {{
    width: {SIGNATURE_CELL_WIDTH_MM}mm;
    height: {SIGNATURE_CELL_HEIGHT_MM}mm;
}}
.report-table-metadata .meta-label {{
    font-weight: bold;
    background: {LABEL_BACKGROUND};
    text-align: center;
}}
.report-table-metadata td, .report-table-generic td, .report-table-generic th {{
    text-align: left;
}}
"""

# 인쇄 전용: 화면 테마와 무관하게 항상 밝은 색
PRINT_CSS = f"""
@page {{
    size: A4;
    margin: {PAGE_MARGIN_CM}cm;
}}
html, body {{
    background: #ffffff !important;
    color: #000000 !important;
    margin: 0;
}}
.report-document, .report-document * {{
    color: #000000 !important;
    border-color: {BORDER_COLOR} !important;
}}
.report-table-metadata .meta-label {{
    background: {LABEL_BACKGROUND} !important;
    -webkit-print-color-adjust: exact;
    print-color-adjust: exact;
}}
.report-table, .report-outline, .report-text {{
    page-break-inside: avoid;
}}
.report-title-document, .report-title-subject {{
    page-break-after: avoid;
}}
"""
