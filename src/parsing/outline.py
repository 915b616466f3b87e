"""
Outline Classifier: 공문서 항목 번호 → 개요 단계.

우선순위 (첫 번째 일치만 적용):
1. "1. "  → 0단계
2. "가. " → 1단계
3. "1) "  → 2단계
4. "가) " → 3단계

일치하지 않으면 들여쓰기 없는 일반 문단.
"""

import re

from src.domain.constants import DEFAULT_TITLE_MARKER
from src.domain.document import Block, OutlineLine, PlainText, Spacer, Title, TitleStyle

OUTLINE_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"^\d+\.\s"), 0),
    (re.compile(r"^[가-힣]\.\s"), 1),
    (re.compile(r"^\d+\)\s"), 2),
    (re.compile(r"^[가-힣]\)\s"), 3),
)

_SUBJECT_TITLE = re.compile(r"^\*\*(?P<text>.+?)\*\*$")


def outline_level(text: str) -> int | None:
    """
    개요 단계 판정.

    Args:
        text: 앞뒤 공백이 제거된 줄

    Returns:
        0~3 또는 None (번호 없음)
    """
    for pattern, level in OUTLINE_PATTERNS:
        if pattern.match(text):
            return level
    return None


def classify_line(line: str, title_marker: str = DEFAULT_TITLE_MARKER) -> Block:
    """
    표가 아닌 한 줄을 블록으로 변환.

    - 빈 줄 → Spacer
    - 제목 문구와 정확히 일치 → Title(DOCUMENT)
    - 줄 전체가 **…** → Title(SUBJECT)
    - 번호 패턴 → OutlineLine
    - 그 외 → PlainText
    """
    text = line.strip()
    if not text:
        return Spacer()

    if text == title_marker.strip():
        return Title(text=text, style=TitleStyle.DOCUMENT)

    subject = _SUBJECT_TITLE.match(text)
    if subject and subject.group("text").strip():
        return Title(text=subject.group("text").strip(), style=TitleStyle.SUBJECT)

    level = outline_level(text)
    if level is None:
        return PlainText(text=text)
    return OutlineLine(text=text, level=level)
