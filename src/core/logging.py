"""
Run logging: 생성/수정 실행 기록과 경고.

경고 필수 컨텍스트: level, code, action_id, field_or_slot,
                  original_value, resolved_value, message
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.core.files import atomic_write_json
from src.core.ids import generate_run_id
from src.domain.document import Document
from src.domain.schemas import RunLog, WarningLog

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(config: dict[str, Any]) -> None:
    """
    logging.level 설정 적용.

    Args:
        config: 앱 설정 (logging.level, 기본 INFO)
    """
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT)
    logging.getLogger("src").setLevel(level)


# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log(
    session_id: str,
    action: str,
    model_requested: str | None = None,
) -> RunLog:
    """
    새 RunLog 생성.

    Args:
        session_id: 보고서 세션 ID
        action: "generate" | "refine"
        model_requested: 설정에서 요청한 모델

    Returns:
        초기화된 RunLog
    """
    now = datetime.now(UTC).isoformat()

    return RunLog(
        run_id=generate_run_id(),
        session_id=session_id,
        action=action,
        started_at=now,
        result="pending",
        model_requested=model_requested,
    )


def emit_warning(
    run_log: RunLog,
    code: str,
    action_id: str,
    field_or_slot: str,
    message: str,
    original_value: str | None = None,
    resolved_value: str | None = None,
) -> None:
    """
    경고 이벤트 기록.

    Args:
        run_log: RunLog 인스턴스
        code: 경고 코드
        action_id: 액션 ID (예: parse_line_12)
        field_or_slot: 필드 이름 (예: report_text)
        message: 경고 메시지
        original_value: 원래 값
        resolved_value: 해결된 값
    """
    warning = WarningLog(
        level="warning",
        code=code,
        action_id=action_id,
        field_or_slot=field_or_slot,
        original_value=original_value,
        resolved_value=resolved_value,
        message=message,
    )
    run_log.warnings.append(warning)


def emit_parse_warnings(run_log: RunLog, document: Document) -> None:
    """파싱 강등 기록(ParseNote)을 경고로 옮김."""
    for note in document.notes:
        emit_warning(
            run_log,
            code=note.code,
            action_id=f"parse_line_{note.line_no}",
            field_or_slot="report_text",
            message=note.message,
            original_value=note.original,
            resolved_value=note.original.strip(),
        )


def complete_run_log(
    run_log: RunLog,
    success: bool,
    model_used: str | None = None,
    prompt_hash: str | None = None,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    RunLog 완료 처리.

    Args:
        run_log: RunLog 인스턴스
        success: 성공 여부
        model_used: 실제 응답한 모델 (fallback 포함)
        prompt_hash: 프롬프트 해시
        error_code: 에러 코드 (실패 시)
        error_context: 에러 컨텍스트 (실패 시)
    """
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = "success" if success else "failed"
    if model_used is not None:
        run_log.model_used = model_used
    if prompt_hash is not None:
        run_log.prompt_hash = prompt_hash

    if not success:
        run_log.error_code = error_code
        run_log.error_context = error_context


def save_run_log(run_log: RunLog, logs_dir: Path) -> Path:
    """
    RunLog를 파일로 저장.

    Args:
        run_log: RunLog 인스턴스
        logs_dir: 로그 디렉터리 경로 (logging.run_log_dir)

    Returns:
        저장된 파일 경로
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"run_{run_log.run_id}.json"
    atomic_write_json(log_path, run_log.to_dict())
    return log_path


def load_run_log(log_path: Path) -> dict[str, Any]:
    """RunLog 파일 로드."""
    data: dict[str, Any] = json.loads(log_path.read_text(encoding="utf-8"))
    return data
