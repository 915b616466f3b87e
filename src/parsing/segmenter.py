"""
Table Segmenter: 줄 단위 입력 → 표 블록 / 일반 줄.

규칙:
- 앞뒤 공백 제거 후 '|'로 시작하고 끝나는 줄 = 표 줄
- 연속된 표 줄은 하나의 표 블록으로 누적
- 구분선 행(|---|:---:|)은 데이터 행에서 제외하지만 연속성은 유지
- 결재란 위치(아직 표가 없음)에서는 빈 서명 행 뒤의 첫 비어있지 않은 행이
  새 표를 시작 (결재란 바로 아래 붙어 나오는 보고서 정보 표 분리)
  단, 분리된 나머지가 표가 되지 못하면 결재란에 그대로 남김

유효하지 않은 블록(2줄 미만, 또는 데이터 행 없음)도 버리지 않고
RawTable로 내보낸다. 평문 강등은 assembler가 처리.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

_DIVIDER_CELL = re.compile(r"^:?-+:?$")


@dataclass
class RawTable:
    """
    연속된 표 줄 묶음.

    lines: (줄 번호, 원문 줄) - 평문 강등 시 원문 그대로 사용
    rows: 구분선을 제외한 데이터 행 (셀 문자열 목록)
    """
    lines: list[tuple[int, str]] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    divider_count: int = 0
    divider_after_first_row: bool = False

    @property
    def is_valid(self) -> bool:
        """머리행 + 구분선 이상, 데이터 행 1개 이상."""
        return len(self.lines) >= 2 and len(self.rows) >= 1

    def add(self, line_no: int, line: str) -> None:
        cells = split_cells(line)
        self.lines.append((line_no, line))
        if is_divider(cells):
            self.divider_count += 1
            if len(self.lines) == 2 and len(self.rows) == 1:
                self.divider_after_first_row = True
            return
        self.rows.append(cells)


@dataclass
class TextLine:
    """표가 아닌 줄."""
    line_no: int
    text: str


Segment = RawTable | TextLine


def is_table_line(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def split_cells(line: str) -> list[str]:
    """'| a | b |' → ['a', 'b']."""
    return [cell.strip() for cell in line.strip()[1:-1].split("|")]


def is_divider(cells: list[str]) -> bool:
    return bool(cells) and all(_DIVIDER_CELL.match(c) for c in cells)


def _is_blank_row(cells: list[str]) -> bool:
    return all(not c or c == "&nbsp;" for c in cells)


def _close_block(approval: RawTable | None, current: RawTable) -> list[RawTable]:
    """
    블록 종료.

    결재란에서 분리된 나머지가 표가 되지 못하면 결재란 행으로 되돌림
    (한 줄짜리 조각을 평문으로 강등하지 않음).
    """
    if approval is None:
        return [current]
    if not current.is_valid:
        for line_no, line in current.lines:
            approval.add(line_no, line)
        return [approval]
    return [approval, current]


def segment_lines(lines: list[str]) -> Iterator[Segment]:
    """
    줄 목록을 표 블록과 일반 줄로 분리.

    Args:
        lines: 줄바꿈이 정규화된 입력 줄

    Yields:
        RawTable 또는 TextLine (입력 순서 유지)
    """
    current: RawTable | None = None
    approval: RawTable | None = None  # 분리 후 나머지 확인 전까지 보류
    tables_emitted = 0
    signature_seen = False

    for line_no, line in enumerate(lines, start=1):
        if not is_table_line(line):
            if current is not None:
                for block in _close_block(approval, current):
                    yield block
                    tables_emitted += int(block.is_valid)
                current = None
                approval = None
            yield TextLine(line_no=line_no, text=line)
            continue

        cells = split_cells(line)

        if current is None:
            current = RawTable()
            signature_seen = False
        elif (
            tables_emitted == 0
            and approval is None
            and signature_seen
            and not is_divider(cells)
            and not _is_blank_row(cells)
        ):
            # 결재란 종료: 서명 빈 칸 다음 행부터 다음 표
            approval = current
            current = RawTable()
            signature_seen = False

        current.add(line_no, line)

        if len(current.rows) >= 2 and _is_blank_row(cells):
            signature_seen = True

    if current is not None:
        yield from _close_block(approval, current)
