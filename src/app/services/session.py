"""
Report Session: 서버 메모리의 보고서 작업 상태.

- 첫 생성 성공 시 만들어지고, 수정 성공 시 보고서만 교체, 초기화 시 삭제
- 디스크에 저장하지 않음 (프로세스 재시작 시 사라짐)
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from src.domain.document import RenderedReport
from src.domain.errors import ErrorCodes, PolicyRejectError
from src.domain.schemas import ReportRequest, RunLog

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(UTC).isoformat()


@dataclass
class ReportSession:
    """
    보고서 세션.

    report: 현재 표시 중인 렌더링 스냅샷 (화면/내보내기 공용)
    raw_text: report를 만든 AI 원문
    history: 생성/수정 실행 기록 (실패 포함)
    """
    session_id: str
    request: ReportRequest
    source_text: str
    report: RenderedReport
    raw_text: str
    history: list[RunLog] = field(default_factory=list)
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def replace_report(self, request: ReportRequest, report: RenderedReport, raw_text: str) -> None:
        """수정 성공 시 보고서 교체 (이전 Document는 그대로 버려짐)."""
        self.request = request
        self.report = report
        self.raw_text = raw_text
        self.updated_at = _now()


class SessionStore:
    """
    메모리 세션 저장소.

    max_sessions를 넘으면 가장 오래 갱신되지 않은 세션부터 삭제.
    """

    def __init__(self, max_sessions: int = 100):
        self.max_sessions = max_sessions
        self._sessions: dict[str, ReportSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def put(self, session: ReportSession) -> None:
        self._sessions[session.session_id] = session
        while len(self._sessions) > self.max_sessions:
            oldest = min(self._sessions.values(), key=lambda s: s.updated_at)
            logger.info(f"Evicting session {oldest.session_id}")
            del self._sessions[oldest.session_id]

    def find(self, session_id: str) -> ReportSession | None:
        return self._sessions.get(session_id)

    def get(self, session_id: str) -> ReportSession:
        """
        Raises:
            PolicyRejectError: SESSION_NOT_FOUND
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise PolicyRejectError(ErrorCodes.SESSION_NOT_FOUND, session_id=session_id)
        return session

    def drop(self, session_id: str) -> bool:
        """세션 삭제. 없으면 False."""
        return self._sessions.pop(session_id, None) is not None
