"""
Report Service: 보고서 생성/수정/내보내기 흐름.

생성:
    입력 검사 → (파일이면) 텍스트 추출 → 빈 원본 거절 → AI 생성
    → 파싱 → 1회 렌더링 → 세션 저장
수정:
    수정 요청 검사 → AI 재생성 → 파싱 → 렌더링 → 세션의 보고서 교체
    (실패하면 기존 보고서 유지)
내보내기:
    세션의 렌더링 스냅샷 → Exporter

같은 세션에서 요청이 겹치면 RequestGuard가 REQUEST_IN_FLIGHT로 거절.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from src.app.providers import get_report_provider
from src.app.providers.base import GenerationError, GenerationResult, ReportProvider
from src.app.services.ocr import OCRService
from src.app.services.prompt import build_prompt
from src.app.services.session import ReportSession, SessionStore
from src.core.guard import RequestGuard
from src.core.ids import generate_session_id, is_valid_session_id
from src.core.logging import (
    complete_run_log,
    create_run_log,
    emit_parse_warnings,
    save_run_log,
)
from src.domain.constants import DEFAULT_TITLE_MARKER
from src.domain.document import RenderedReport
from src.domain.errors import ErrorCodes, PolicyRejectError
from src.domain.schemas import (
    ReportRequest,
    RunLog,
    format_report_date,
    parse_report_date,
)
from src.parsing import parse_report
from src.render import ExportArtifact, get_exporter, render_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceUpload:
    """업로드된 원본 파일 (메모리)."""
    data: bytes
    media_type: str
    filename: str = ""


class ReportService:
    """
    보고서 서비스.

    Usage:
        service = ReportService(config, store, guard)
        session = await service.generate(request, source_text="...")
        session = await service.refine(session.session_id, "표를 추가해주세요")
        artifact = service.export(session.session_id, "word")
    """

    def __init__(
        self,
        config: dict[str, Any],
        store: SessionStore,
        guard: RequestGuard,
        ocr_service: OCRService | None = None,
        report_provider: ReportProvider | None = None,
    ):
        self.config = config
        self.store = store
        self.guard = guard
        self._ocr_service = ocr_service
        self._report_provider = report_provider

    # -------------------------------------------------------------------------
    # Config
    # -------------------------------------------------------------------------

    @property
    def title_marker(self) -> str:
        return self.config.get("report", {}).get("title_marker") or DEFAULT_TITLE_MARKER

    @property
    def model_requested(self) -> str | None:
        return self.config.get("ai", {}).get("report", {}).get("model")

    @property
    def run_log_dir(self) -> Path | None:
        value = self.config.get("logging", {}).get("run_log_dir")
        return Path(value) if value else None

    def _get_ocr_service(self) -> OCRService:
        if self._ocr_service is None:
            self._ocr_service = OCRService(self.config)
        return self._ocr_service

    def _get_report_provider(self) -> ReportProvider:
        if self._report_provider is None:
            try:
                self._report_provider = get_report_provider(self.config)
            except GenerationError as e:
                raise PolicyRejectError(
                    ErrorCodes.GENERATION_FAILED,
                    provider_code=e.code,
                    message=e.message,
                ) from e
        return self._report_provider

    # -------------------------------------------------------------------------
    # Generate / Refine
    # -------------------------------------------------------------------------

    async def generate(
        self,
        request: ReportRequest,
        source_text: str | None = None,
        upload: SourceUpload | None = None,
        session_id: str | None = None,
    ) -> ReportSession:
        """
        첫 보고서 생성.

        Args:
            request: 작성 정보
            source_text: 직접 입력한 원본 (upload가 있으면 무시)
            upload: 원본 이미지/PDF
            session_id: 페이지가 발급받은 세션 ID (없으면 새로 발급)

        Returns:
            새로 저장된 ReportSession

        Raises:
            PolicyRejectError: MISSING_REQUIRED_FIELD, EMPTY_SOURCE_TEXT,
                UNSUPPORTED_MEDIA_TYPE, EXTRACTION_FAILED, GENERATION_FAILED,
                REQUEST_IN_FLIGHT
        """
        missing = request.missing_fields()
        if missing:
            raise PolicyRejectError(ErrorCodes.MISSING_REQUIRED_FIELD, fields=missing)

        parsed_date = parse_report_date(request.report_date)
        if parsed_date is None:
            raise PolicyRejectError(
                ErrorCodes.MISSING_REQUIRED_FIELD,
                fields=["report_date"],
                message="보고서 일시를 'YYYY. MM. DD.' 형식의 올바른 날짜로 입력해주세요.",
            )
        request = replace(request, report_date=format_report_date(parsed_date))

        if upload is None and not (source_text or "").strip():
            raise PolicyRejectError(ErrorCodes.EMPTY_SOURCE_TEXT, source="text")

        if not session_id or not is_valid_session_id(session_id):
            session_id = generate_session_id()

        async with self.guard.hold(session_id, "generate"):
            run_log = create_run_log(session_id, "generate", self.model_requested)
            try:
                if upload is not None:
                    ocr_result = await self._get_ocr_service().extract_from_bytes(
                        upload.data, upload.media_type
                    )
                    source_text = ocr_result.text or ""

                source_text = (source_text or "").strip()
                if not source_text:
                    raise PolicyRejectError(ErrorCodes.EMPTY_SOURCE_TEXT, source="file")

                generation = await self._call_provider(request, source_text)
                report = self._render(generation.text, run_log)
            except PolicyRejectError as e:
                self._finish(run_log, None, error=e)
                raise

            session = ReportSession(
                session_id=session_id,
                request=request,
                source_text=source_text,
                report=report,
                raw_text=generation.text,
            )
            self._finish(run_log, session, generation=generation)
            self.store.put(session)

        logger.info(
            f"Report generated: session={session_id}, blocks={len(report.document)}, "
            f"notes={len(report.document.notes)}"
        )
        return session

    async def refine(self, session_id: str, comment: str) -> ReportSession:
        """
        수정 요청 반영.

        실패해도 세션의 기존 보고서는 그대로 남는다.

        Raises:
            PolicyRejectError: REFINEMENT_EMPTY, SESSION_NOT_FOUND,
                GENERATION_FAILED, REQUEST_IN_FLIGHT
        """
        if not (comment or "").strip():
            raise PolicyRejectError(ErrorCodes.REFINEMENT_EMPTY, session_id=session_id)

        session = self.store.get(session_id)

        async with self.guard.hold(session_id, "refine"):
            run_log = create_run_log(session_id, "refine", self.model_requested)
            request = session.request.with_refinement(comment.strip())
            try:
                generation = await self._call_provider(request, session.source_text)
                report = self._render(generation.text, run_log)
            except PolicyRejectError as e:
                self._finish(run_log, session, error=e)
                raise

            session.replace_report(request, report, generation.text)
            self._finish(run_log, session, generation=generation)

        logger.info(f"Report refined: session={session_id}, blocks={len(report.document)}")
        return session

    def reset(self, session_id: str | None) -> bool:
        """세션 삭제 (새로운 노트 분석하기)."""
        if not session_id:
            return False
        dropped = self.store.drop(session_id)
        if dropped:
            logger.info(f"Session reset: {session_id}")
        return dropped

    # -------------------------------------------------------------------------
    # Report / Export
    # -------------------------------------------------------------------------

    def get_report(self, session_id: str) -> RenderedReport:
        """
        Raises:
            PolicyRejectError: REPORT_NOT_FOUND
        """
        session = self.store.find(session_id)
        if session is None:
            raise PolicyRejectError(ErrorCodes.REPORT_NOT_FOUND, session_id=session_id)
        return session.report

    def export(self, session_id: str, kind: str) -> ExportArtifact:
        """
        저장된 렌더링 스냅샷으로 내보내기.

        Raises:
            PolicyRejectError: REPORT_NOT_FOUND, UNKNOWN_EXPORT_KIND, EXPORT_FAILED
        """
        report = self.get_report(session_id)
        exporter = get_exporter(kind, self.config)
        artifact = exporter.export(report)
        logger.info(
            f"Exported {artifact.filename} ({artifact.size} bytes) for session={session_id}"
        )
        return artifact

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    async def _call_provider(self, request: ReportRequest, source_text: str) -> GenerationResult:
        provider = self._get_report_provider()
        prompt = build_prompt(request, source_text, self.title_marker)
        try:
            return await provider.generate(prompt)
        except GenerationError as e:
            logger.warning(f"Report generation failed: {e.code}")
            raise PolicyRejectError(
                ErrorCodes.GENERATION_FAILED,
                provider_code=e.code,
                message=e.message,
            ) from e

    def _render(self, text: str, run_log: RunLog) -> RenderedReport:
        document = parse_report(text, title_marker=self.title_marker)
        emit_parse_warnings(run_log, document)
        return render_report(document)

    def _finish(
        self,
        run_log: RunLog,
        session: ReportSession | None,
        generation: GenerationResult | None = None,
        error: PolicyRejectError | None = None,
    ) -> None:
        if error is None:
            complete_run_log(
                run_log,
                success=True,
                model_used=generation.model_used if generation else None,
                prompt_hash=generation.prompt_hash if generation else None,
            )
        else:
            complete_run_log(
                run_log,
                success=False,
                error_code=error.code,
                error_context=error.to_dict(),
            )

        if session is not None:
            session.history.append(run_log)

        if self.run_log_dir is not None:
            try:
                save_run_log(run_log, self.run_log_dir)
            except OSError as e:
                logger.warning(f"Run log save failed ({run_log.run_id}): {e}")
