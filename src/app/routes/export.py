"""
Export Routes: 저장된 렌더링 스냅샷 다운로드.

- GET /api/export/{session_id}/word → ai-report.doc (또는 .docx)
- GET /api/export/{session_id}/pdf  → ai-report.pdf

에러는 HTTP 상태 + 한국어 메시지 (클라이언트가 alert로 표시).
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from src.app.routes.report import get_report_service
from src.domain.errors import ErrorCodes, PolicyRejectError
from src.render import ExportArtifact

logger = logging.getLogger(__name__)

api_router = APIRouter()

_STATUS_BY_CODE = {
    ErrorCodes.REPORT_NOT_FOUND: 404,
    ErrorCodes.UNKNOWN_EXPORT_KIND: 400,
}


def _download(artifact: ExportArtifact) -> Response:
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


def _export(request: Request, session_id: str, kind: str) -> Response:
    service = get_report_service(request)
    try:
        artifact = service.export(session_id, kind)
    except PolicyRejectError as e:
        status = _STATUS_BY_CODE.get(e.code, 500)
        if status == 500:
            logger.error(f"Export failed: {e}")
        raise HTTPException(status_code=status, detail=e.user_message) from e
    return _download(artifact)


@api_router.get("/{session_id}/word")
async def export_word(request: Request, session_id: str) -> Response:
    """Word 다운로드."""
    return _export(request, session_id, "word")


@api_router.get("/{session_id}/pdf")
async def export_pdf(request: Request, session_id: str) -> Response:
    """PDF 다운로드 (reportlab)."""
    return _export(request, session_id, "pdf")
