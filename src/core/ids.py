"""
ID 생성: session_id, run_id

- session_id: 보고서 세션 (메모리 저장소 키, URL에 노출)
- run_id: 생성/수정 1회 실행
"""

import secrets
import uuid
from datetime import UTC, datetime


def generate_session_id() -> str:
    """
    Session ID 생성.

    추측 불가: secrets 기반
    포맷: SES-{token[:16]}

    Returns:
        session_id 문자열 (URL 안전)
    """
    return f"SES-{secrets.token_hex(8)}"


def generate_run_id() -> str:
    """
    Run ID 생성.

    고유성 보장: UUID v4
    포맷: RUN-{timestamp}-{uuid[:8]}

    Returns:
        run_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"RUN-{timestamp}-{unique}"


def is_valid_session_id(value: str) -> bool:
    """URL 경로에서 받은 session_id 형식 검사."""
    prefix = "SES-"
    if not value.startswith(prefix):
        return False
    token = value[len(prefix):]
    return len(token) == 16 and all(c in "0123456789abcdef" for c in token)
