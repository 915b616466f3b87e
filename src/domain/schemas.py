"""
Data schemas for the report pipeline.

규칙:
- 필드명 통일: 폼 필드 이름과 동일하게 사용 (team_name, report_date, ...)
- 보고서 일시 표기는 "YYYY. MM. DD."
- run log는 성공/실패 모두 기록
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from src.domain.constants import REPORT_DATE_FORMAT

# =============================================================================
# Report Request
# =============================================================================

@dataclass(frozen=True)
class ReportRequest:
    """
    보고서 생성 요청 정보.

    approval_line: 쉼표로 구분된 결재라인 (예: "팀장, 부장, 본부장")
    refinement: 수정 요청 시에만 설정
    template_text: 서식 파일에서 뽑은 텍스트 (선택)
    """
    author: str
    approval_line: str
    team_name: str
    report_date: str
    instructions: str = ""
    refinement: str | None = None
    template_text: str | None = None

    REQUIRED_FIELDS = ("team_name", "report_date", "author", "approval_line")

    def missing_fields(self) -> list[str]:
        """비어 있는 필수 항목 이름 목록."""
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name).strip()]

    @property
    def approvers(self) -> list[str]:
        """결재라인 (작성자 본인이 첫 번째)."""
        chain = [part.strip() for part in self.approval_line.split(",")]
        return [self.author.strip()] + [p for p in chain if p]

    def with_refinement(self, comment: str) -> "ReportRequest":
        """같은 원본/정보에 수정 요청만 붙인 새 요청."""
        return replace(self, refinement=comment)

    def to_dict(self) -> dict[str, Any]:
        return {
            "author": self.author,
            "approval_line": self.approval_line,
            "team_name": self.team_name,
            "report_date": self.report_date,
            "instructions": self.instructions,
            "refinement": self.refinement,
            "has_template": self.template_text is not None,
        }


_REPORT_DATE_PATTERN = re.compile(r"^\s*(\d{4})\s*[.\-/]\s*(\d{1,2})\s*[.\-/]\s*(\d{1,2})\.?\s*$")


def format_report_date(value: date) -> str:
    """date → "2024. 01. 15."."""
    return value.strftime(REPORT_DATE_FORMAT)


def parse_report_date(value: str) -> date | None:
    """
    "2024. 1. 15." 형식 파싱 (date 입력의 "2024-01-15"도 허용).

    2월 30일처럼 존재하지 않는 날짜는 None.
    """
    match = _REPORT_DATE_PATTERN.match(value or "")
    if not match:
        return None
    year, month, day = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


# =============================================================================
# Run Log Schemas
# =============================================================================

@dataclass
class WarningLog:
    """경고 로그."""
    level: str  # "warning"
    code: str
    action_id: str
    field_or_slot: str
    message: str
    original_value: str | None = None
    resolved_value: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "action_id": self.action_id,
            "field_or_slot": self.field_or_slot,
            "original_value": self.original_value,
            "resolved_value": self.resolved_value,
            "message": self.message,
        }


@dataclass
class RunLog:
    """
    보고서 생성/수정 1회 실행 기록.

    action: "generate" | "refine"
    result: "pending" | "success" | "failed"
    """
    run_id: str
    session_id: str
    action: str
    started_at: str
    finished_at: str | None = None
    result: str = "pending"

    # 모델 추적
    model_requested: str | None = None
    model_used: str | None = None
    prompt_hash: str | None = None

    warnings: list[WarningLog] = field(default_factory=list)

    # Error (if failed)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "session_id": self.session_id,
            "action": self.action,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "prompt_hash": self.prompt_hash,
            "warnings": [w.to_dict() for w in self.warnings],
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
