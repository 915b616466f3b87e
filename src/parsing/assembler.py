"""
Document Assembler: AI 생성 텍스트 → Document.

세그먼터, 표 분류기, 개요 분류기 결과를 원래 줄 순서대로 합친다.
- 표 ordinal은 이 함수 안의 지역 카운터 (Document마다 0부터)
- 유효하지 않은 표 조각은 줄마다 PlainText로 강등 + ParseNote 기록
- 입력 끝의 표도 반드시 flush (segment_lines가 보장)
"""

import logging

from src.domain.constants import DEFAULT_TITLE_MARKER
from src.domain.document import Block, Document, ParseNote, PlainText
from src.domain.errors import ErrorCodes
from src.parsing.outline import classify_line
from src.parsing.segmenter import RawTable, segment_lines
from src.parsing.tables import classify_table

logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    """줄바꿈 정규화 (\\r\\n, \\r → \\n) 후 분리."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_report(text: str, title_marker: str = DEFAULT_TITLE_MARKER) -> Document:
    """
    보고서 텍스트를 Document로 변환.

    AI 출력이 요청한 구조를 따르지 않아도 예외를 던지지 않는다.

    Args:
        text: 생성된 마크다운 방언 텍스트
        title_marker: 문서 제목으로 취급할 고정 문구

    Returns:
        Document (불변)
    """
    blocks: list[Block] = []
    notes: list[ParseNote] = []
    table_ordinal = 0

    for segment in segment_lines(split_lines(text)):
        if not isinstance(segment, RawTable):
            blocks.append(classify_line(segment.text, title_marker))
            continue

        if segment.is_valid:
            blocks.append(classify_table(segment, table_ordinal))
            table_ordinal += 1
            continue

        # 표 형식 오류 → 줄마다 평문으로 (데이터 손실 없음)
        for line_no, line in segment.lines:
            blocks.append(PlainText(text=line.strip()))
            notes.append(
                ParseNote(
                    code=ErrorCodes.MALFORMED_TABLE_DEGRADED,
                    line_no=line_no,
                    message="표 형식이 올바르지 않아 일반 문단으로 표시했습니다.",
                    original=line,
                )
            )

    if notes:
        logger.info(f"Degraded {len(notes)} malformed table line(s) to plain text")

    return Document(blocks=tuple(blocks), notes=tuple(notes))
