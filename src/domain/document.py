"""
Report document model: 구조화된 보고서 블록.

파서가 만든 Document 하나를 화면 렌더러와 모든 내보내기가 공유한다.
- Document는 불변 (수정 요청 → 새 Document 생성)
- Block은 tagged variant: Title / OutlineLine / Table / Spacer / PlainText
- 직렬화기는 BlockVisitor를 구현해 블록 종류별로 처리
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

# 셀 안에서 유일하게 해석되는 인라인 마크업: 줄바꿈
LINE_BREAK_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)


class TableKind(str, Enum):
    """
    표 종류 (문서 내 위치로 결정).

    0번째 표 = 결재란, 1번째 표 = 보고서 정보, 이후 = 일반 표
    """
    APPROVAL = "approval"
    METADATA = "metadata"
    GENERIC = "generic"

    @classmethod
    def for_ordinal(cls, ordinal: int) -> "TableKind":
        if ordinal == 0:
            return cls.APPROVAL
        if ordinal == 1:
            return cls.METADATA
        return cls.GENERIC


class TitleStyle(str, Enum):
    """제목 스타일."""
    DOCUMENT = "document"  # 고정 제목 문구 (가운데, 자간 확대)
    SUBJECT = "subject"    # **제목** 한 줄 (가운데, 굵게)


@dataclass(frozen=True)
class Cell:
    """표 셀. raw는 AI 출력 원문 그대로."""
    raw: str

    @property
    def lines(self) -> list[str]:
        """줄바꿈 마커 기준으로 나눈 표시용 줄 목록."""
        return [
            part.replace("&nbsp;", " ").strip()
            for part in LINE_BREAK_PATTERN.split(self.raw)
        ]

    @property
    def is_blank(self) -> bool:
        return not any(self.lines)


# =============================================================================
# Blocks
# =============================================================================

@dataclass(frozen=True)
class Title:
    text: str
    style: TitleStyle = TitleStyle.DOCUMENT

    kind = "title"

    def accept(self, visitor: "BlockVisitor") -> Any:
        return visitor.visit_title(self)


@dataclass(frozen=True)
class OutlineLine:
    text: str
    level: int

    kind = "outline"

    def accept(self, visitor: "BlockVisitor") -> Any:
        return visitor.visit_outline(self)


@dataclass(frozen=True)
class Table:
    """
    표 블록.

    header: 머리행 (보고서 정보 표처럼 머리행이 없으면 None)
    rows: 본문 행들 (구분선 행은 제외됨)
    """
    table_kind: TableKind
    header: tuple[Cell, ...] | None
    rows: tuple[tuple[Cell, ...], ...]

    kind = "table"

    def accept(self, visitor: "BlockVisitor") -> Any:
        return visitor.visit_table(self)

    @property
    def column_count(self) -> int:
        widths = [len(row) for row in self.rows]
        if self.header is not None:
            widths.append(len(self.header))
        return max(widths, default=0)

    def padded_rows(self) -> list[tuple[Cell, ...]]:
        """머리행보다 짧은 행을 빈 셀로 채운 본문 행."""
        width = self.column_count
        return [row + (Cell(""),) * (width - len(row)) for row in self.rows]


@dataclass(frozen=True)
class Spacer:
    kind = "spacer"

    def accept(self, visitor: "BlockVisitor") -> Any:
        return visitor.visit_spacer(self)


@dataclass(frozen=True)
class PlainText:
    text: str

    kind = "text"

    def accept(self, visitor: "BlockVisitor") -> Any:
        return visitor.visit_text(self)


Block = Title | OutlineLine | Table | Spacer | PlainText


class BlockVisitor(ABC):
    """블록 종류별 직렬화 인터페이스."""

    @abstractmethod
    def visit_title(self, block: Title) -> Any:
        pass

    @abstractmethod
    def visit_outline(self, block: OutlineLine) -> Any:
        pass

    @abstractmethod
    def visit_table(self, block: Table) -> Any:
        pass

    @abstractmethod
    def visit_spacer(self, block: Spacer) -> Any:
        pass

    @abstractmethod
    def visit_text(self, block: PlainText) -> Any:
        pass


# =============================================================================
# Document
# =============================================================================

@dataclass(frozen=True)
class ParseNote:
    """파싱 중 강등 처리 기록 (에러 아님, run log 경고로 남김)."""
    code: str
    line_no: int
    message: str
    original: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "line_no": self.line_no,
            "message": self.message,
            "original": self.original,
        }


@dataclass(frozen=True)
class Document:
    """보고서 문서. 생성/수정 응답마다 새로 만들어지고 수정되지 않는다."""
    blocks: tuple[Block, ...] = ()
    notes: tuple[ParseNote, ...] = ()

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def tables(self) -> list[Table]:
        return [b for b in self.blocks if isinstance(b, Table)]

    def to_dict(self) -> dict[str, Any]:
        """JSON API 응답용."""
        return {
            "blocks": [_block_to_dict(b) for b in self.blocks],
            "notes": [n.to_dict() for n in self.notes],
        }


def _block_to_dict(block: Block) -> dict[str, Any]:
    if isinstance(block, Title):
        return {"type": block.kind, "text": block.text, "style": block.style.value}
    if isinstance(block, OutlineLine):
        return {"type": block.kind, "text": block.text, "level": block.level}
    if isinstance(block, Table):
        return {
            "type": block.kind,
            "table_kind": block.table_kind.value,
            "header": [c.raw for c in block.header] if block.header else None,
            "rows": [[c.raw for c in row] for row in block.rows],
        }
    if isinstance(block, PlainText):
        return {"type": block.kind, "text": block.text}
    return {"type": block.kind}


@dataclass(frozen=True)
class RenderedReport:
    """
    Document의 단일 렌더링 결과.

    화면 표시와 Word/인쇄/PDF 내보내기는 모두 이 스냅샷에서 만들어짐.
    """
    document: Document
    html: str
    rendered_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
