"""
test_run_logging.py - RunLog 관리 테스트

- 생성/완료 상태 전이
- 파싱 강등 → 경고 이벤트
- 원자적 저장 / 로드
"""

import json
import logging
from pathlib import Path

from src.core.files import atomic_write_json
from src.core.logging import (
    complete_run_log,
    configure_logging,
    create_run_log,
    emit_parse_warnings,
    emit_warning,
    load_run_log,
    save_run_log,
)
from src.parsing import parse_report

# =============================================================================
# create / complete
# =============================================================================


class TestRunLogLifecycle:
    """RunLog 상태 전이."""

    def test_create(self):
        run_log = create_run_log("SES-0123456789abcdef", "generate", "gemini-2.5-flash")

        assert run_log.run_id.startswith("RUN-")
        assert run_log.session_id == "SES-0123456789abcdef"
        assert run_log.action == "generate"
        assert run_log.result == "pending"
        assert run_log.model_requested == "gemini-2.5-flash"
        assert run_log.finished_at is None

    def test_complete_success(self):
        run_log = create_run_log("SES-1", "refine")

        complete_run_log(run_log, success=True, model_used="fallback-model", prompt_hash="sha256:ab")

        assert run_log.result == "success"
        assert run_log.finished_at is not None
        assert run_log.model_used == "fallback-model"
        assert run_log.prompt_hash == "sha256:ab"
        assert run_log.error_code is None

    def test_complete_failure(self):
        run_log = create_run_log("SES-1", "generate")

        complete_run_log(
            run_log,
            success=False,
            error_code="GENERATION_FAILED",
            error_context={"code": "GENERATION_FAILED"},
        )

        assert run_log.result == "failed"
        assert run_log.error_code == "GENERATION_FAILED"
        assert run_log.error_context == {"code": "GENERATION_FAILED"}


# =============================================================================
# Warnings
# =============================================================================


class TestWarnings:
    """경고 이벤트."""

    def test_emit_warning(self):
        run_log = create_run_log("SES-1", "generate")

        emit_warning(run_log, "CODE", "action_1", "report_text", "메시지", original_value="a")

        [warning] = run_log.warnings
        assert warning.level == "warning"
        assert warning.original_value == "a"
        assert warning.resolved_value is None

    def test_parse_notes_become_warnings(self):
        run_log = create_run_log("SES-1", "generate")
        document = parse_report("본문\n  | 혼자 |  ")

        emit_parse_warnings(run_log, document)

        [warning] = run_log.warnings
        assert warning.code == "MALFORMED_TABLE_DEGRADED"
        assert warning.action_id == "parse_line_2"
        assert warning.field_or_slot == "report_text"
        assert warning.original_value == "  | 혼자 |  "
        assert warning.resolved_value == "| 혼자 |"

    def test_clean_document_no_warnings(self, sample_report_text):
        run_log = create_run_log("SES-1", "generate")

        emit_parse_warnings(run_log, parse_report(sample_report_text))

        assert run_log.warnings == []


# =============================================================================
# Save / Load
# =============================================================================


class TestSaveLoad:
    """파일 저장."""

    def test_save_and_load(self, tmp_path: Path):
        run_log = create_run_log("SES-1", "generate")
        complete_run_log(run_log, success=True, model_used="m")

        path = save_run_log(run_log, tmp_path / "logs")

        assert path.name == f"run_{run_log.run_id}.json"
        data = load_run_log(path)
        assert data["run_id"] == run_log.run_id
        assert data["result"] == "success"

    def test_atomic_write_keeps_korean(self, tmp_path: Path):
        path = tmp_path / "out.json"

        atomic_write_json(path, {"message": "한글"})

        assert "한글" in path.read_text(encoding="utf-8")
        assert json.loads(path.read_text(encoding="utf-8")) == {"message": "한글"}
        assert list(tmp_path.glob("*.tmp")) == []

    def test_atomic_write_failure_keeps_existing(self, tmp_path: Path):
        path = tmp_path / "out.json"
        atomic_write_json(path, {"v": 1})

        try:
            atomic_write_json(path, {"v": object()})
        except TypeError:
            pass

        assert json.loads(path.read_text(encoding="utf-8")) == {"v": 1}
        assert list(tmp_path.glob("*.tmp")) == []


class TestConfigureLogging:
    """logging.level 적용."""

    def test_level_applied(self):
        configure_logging({"logging": {"level": "debug"}})

        assert logging.getLogger("src").level == logging.DEBUG

    def test_unknown_level_defaults_to_info(self):
        configure_logging({"logging": {"level": "loud"}})

        assert logging.getLogger("src").level == logging.INFO
