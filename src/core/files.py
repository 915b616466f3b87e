"""
파일 쓰기 유틸리티: run log JSON 원자적 저장.

- 중간 상태 없음: temp → rename
- fsync 실패는 경고만 남기고 계속
- 실패 시 temp 파일 정리, 기존 파일은 그대로
"""

import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def _fsync_dir(dir_path: Path) -> None:
    """디렉토리 fsync (rename 엔트리 내구성, 지원되는 환경에서만)."""
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        logger.warning(f"Directory fsync failed for {dir_path}: {e}")


def atomic_write_json(path: Path, data: dict) -> None:
    """
    원자적 JSON 쓰기.

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터 (한글은 그대로 저장)
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError as cleanup_error:
                logger.warning(f"Temp file cleanup failed: {temp_path}: {cleanup_error}")
        raise
