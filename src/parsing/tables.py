"""
Table Classifier: RawTable + 위치(ordinal) → Table 블록.

표 종류는 내용이 아니라 문서 내 순서로 결정:
- 0: 결재란 (머리행 = 직위/이름, 본문 = 서명 칸)
- 1: 보고서 정보 (키/값 행, 머리행 없음)
- 2~: 일반 표 (머리행 + 본문)

ordinal은 호출자가 명시적으로 넘긴다 (모듈 상태 없음).
"""

from src.domain.document import Cell, Table, TableKind
from src.parsing.segmenter import RawTable


def _to_cells(row: list[str]) -> tuple[Cell, ...]:
    return tuple(Cell(raw) for raw in row)


def classify_table(raw: RawTable, ordinal: int) -> Table:
    """
    유효한 RawTable을 종류가 지정된 Table로 변환.

    Args:
        raw: 세그먼터가 만든 표 블록 (is_valid == True)
        ordinal: 현재 Document에서 이 표 앞에 나온 표의 수

    Returns:
        Table
    """
    kind = TableKind.for_ordinal(ordinal)
    rows = [_to_cells(r) for r in raw.rows]

    if raw.divider_after_first_row or kind is not TableKind.METADATA:
        header: tuple[Cell, ...] | None = rows[0]
        body = rows[1:]
    else:
        header = None
        body = rows

    return Table(table_kind=kind, header=header, rows=tuple(body))
