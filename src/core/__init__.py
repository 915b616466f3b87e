"""
Core layer: 실행 기록과 요청 보호.

역할:
- ids: session_id, run_id 발급
- logging: RunLog 생성/경고/완료/저장
- guard: 세션별 진행 중 요청 거절
- files: 원자적 JSON 쓰기
"""

from .files import atomic_write_json
from .guard import RequestGuard
from .ids import generate_run_id, generate_session_id, is_valid_session_id
from .logging import (
    complete_run_log,
    configure_logging,
    create_run_log,
    emit_parse_warnings,
    emit_warning,
    save_run_log,
)

__all__ = [
    # files
    "atomic_write_json",
    # guard
    "RequestGuard",
    # ids
    "generate_session_id",
    "generate_run_id",
    "is_valid_session_id",
    # logging
    "configure_logging",
    "create_run_log",
    "emit_warning",
    "emit_parse_warnings",
    "complete_run_log",
    "save_run_log",
]
