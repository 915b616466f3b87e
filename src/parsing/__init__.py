"""
Parsing layer: 제약된 마크다운 방언 → Document.

역할:
- segmenter: 표 줄 묶기
- tables: 위치 기반 표 분류 (결재란/보고서 정보/일반)
- outline: 공문서 항목 번호 단계 판정
- assembler: 전체를 한 번의 순회로 합침
"""

from .assembler import parse_report
from .outline import classify_line, outline_level
from .segmenter import RawTable, TextLine, segment_lines
from .tables import classify_table

__all__ = [
    "parse_report",
    "classify_line",
    "outline_level",
    "segment_lines",
    "classify_table",
    "RawTable",
    "TextLine",
]
