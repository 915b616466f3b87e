"""
Report Routes: 입력 → 보고서 → 수정 (메인 기능).

- GET /                       → 입력 화면
- GET /print/{session_id}     → 인쇄 전용 페이지 (자동 print)
- POST /api/report/generate   → 생성 (HTML 조각)
- POST /api/report/refine     → 수정 (실패 시 기존 보고서 유지)
- POST /api/report/reset      → 세션 삭제, 입력 화면
- GET /api/report/{session_id} → 현재 Document JSON

HTMX 응답 규칙:
- 입력 검사 실패: 입력 화면 + 항목 아래 인라인 메시지
- AI 호출 실패: 배너 (첫 생성은 입력 화면, 수정은 보고서 화면)
- 요청 중복: 409 + 배너만 교체 (HX-Retarget)
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from src.app.services.generate import ReportService, SourceUpload
from src.app.services.session import ReportSession
from src.app.services.template import extract_template_text
from src.core.ids import generate_session_id
from src.domain.constants import (
    EXTRACTION_ALLOWED_MEDIA_TYPES,
    REPORT_PAGE_TITLE,
    TEMPLATE_ALLOWED_EXTENSIONS,
)
from src.domain.errors import ErrorCodes, PolicyRejectError
from src.domain.schemas import ReportRequest, format_report_date
from src.render.styles import REPORT_CSS

logger = logging.getLogger(__name__)

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = Jinja2Templates(directory=_templates_dir)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints

# 입력 화면으로 돌아가 항목 아래에 표시하는 에러
INLINE_ERROR_CODES = frozenset({
    ErrorCodes.MISSING_REQUIRED_FIELD,
    ErrorCodes.EMPTY_SOURCE_TEXT,
    ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
    ErrorCodes.TEMPLATE_UNSUPPORTED,
    ErrorCodes.REFINEMENT_EMPTY,
})


def get_report_service(request: Request) -> ReportService:
    service: ReportService = request.app.state.report_service
    return service


def _export_config(request: Request) -> dict[str, Any]:
    config: dict[str, Any] = request.app.state.config
    return config.get("export", {}) or {}


def _default_values() -> dict[str, str]:
    return {
        "team_name": "",
        "report_date": format_report_date(date.today()),
        "author": "",
        "approval_line": "",
        "instructions": "",
        "source_text": "",
    }


# =============================================================================
# View Builders
# =============================================================================


def render_input_view(
    request: Request,
    session_id: str,
    values: dict[str, str] | None = None,
    error: PolicyRejectError | None = None,
    full_page: bool = False,
) -> HTMLResponse:
    """입력 화면 (처음, 초기화, 생성 실패)."""
    context = {
        "page_title": REPORT_PAGE_TITLE,
        "session_id": session_id,
        "values": values or _default_values(),
        "error": error,
        "inline_error": error is not None and error.code in INLINE_ERROR_CODES,
        "error_fields": (error.context.get("fields") or []) if error else [],
        "accept_source": ",".join(EXTRACTION_ALLOWED_MEDIA_TYPES),
        "accept_template": ",".join(TEMPLATE_ALLOWED_EXTENSIONS),
        "view": "input",
        "report_css": REPORT_CSS,
    }
    name = "index.html" if full_page else "partials/input_view.html"
    return jinja_templates.TemplateResponse(request, name, context)


def render_report_view(
    request: Request,
    session: ReportSession,
    error: PolicyRejectError | None = None,
) -> HTMLResponse:
    """보고서 화면 (생성 성공, 수정 성공/실패)."""
    export_config = _export_config(request)
    context = {
        "session": session,
        "report": session.report,
        "notes": session.report.document.notes,
        "error": error,
        "inline_error": error is not None and error.code in INLINE_ERROR_CODES,
        "print_strategy": export_config.get("print_strategy", "print_page"),
        "view": "report",
    }
    return jinja_templates.TemplateResponse(request, "partials/report_view.html", context)


def render_banner(
    request: Request,
    error: PolicyRejectError,
    status_code: int = 200,
) -> HTMLResponse:
    """배너만 교체 (HX-Retarget)."""
    response = jinja_templates.TemplateResponse(
        request,
        "partials/error_banner.html",
        {"error": error},
        status_code=status_code,
    )
    response.headers["HX-Retarget"] = "#error-banner"
    response.headers["HX-Reswap"] = "innerHTML"
    return response


async def _read_upload(upload: UploadFile | None) -> tuple[str, bytes] | None:
    """비어 있는 파일 입력은 None."""
    if upload is None or not upload.filename:
        return None
    try:
        data = await upload.read()
    finally:
        await upload.close()
    if not data:
        return None
    return upload.filename, data


# =============================================================================
# Page Routes
# =============================================================================


@router.get("/", response_class=HTMLResponse)
async def index_page(request: Request) -> HTMLResponse:
    """
    입력 화면.

    세션 ID는 페이지마다 새로 발급 (첫 생성 요청의 중복 방지 키).
    """
    return render_input_view(request, generate_session_id(), full_page=True)


@router.get("/print/{session_id}", response_class=HTMLResponse)
async def print_page(request: Request, session_id: str) -> HTMLResponse:
    """인쇄 전용 페이지 (렌더링 스냅샷 그대로)."""
    service = get_report_service(request)
    try:
        artifact = service.export(session_id, "print")
    except PolicyRejectError as e:
        status = 404 if e.code == ErrorCodes.REPORT_NOT_FOUND else 500
        return jinja_templates.TemplateResponse(
            request,
            "partials/error_banner.html",
            {"error": e},
            status_code=status,
        )
    return HTMLResponse(content=artifact.content.decode("utf-8"))


# =============================================================================
# API Routes
# =============================================================================


@api_router.post("/generate", response_class=HTMLResponse)
async def generate_report(
    request: Request,
    session_id: str = Form(""),
    team_name: str = Form(""),
    report_date: str = Form(""),
    author: str = Form(""),
    approval_line: str = Form(""),
    instructions: str = Form(""),
    source_text: str = Form(""),
    source_file: UploadFile | None = File(None),
    template_file: UploadFile | None = File(None),
) -> HTMLResponse:
    """
    보고서 생성.

    원본 파일이 있으면 텍스트 추출 후 사용, 없으면 source_text 사용.
    """
    service = get_report_service(request)
    values = {
        "team_name": team_name,
        "report_date": report_date,
        "author": author,
        "approval_line": approval_line,
        "instructions": instructions,
        "source_text": source_text,
    }
    session_id = session_id or generate_session_id()

    try:
        template_text = None
        template_upload = await _read_upload(template_file)
        if template_upload is not None:
            template_text = extract_template_text(*template_upload)

        upload = None
        source_upload = await _read_upload(source_file)
        if source_upload is not None:
            upload = SourceUpload(
                data=source_upload[1],
                media_type=source_file.content_type or "",
                filename=source_upload[0],
            )

        report_request = ReportRequest(
            author=author,
            approval_line=approval_line,
            team_name=team_name,
            report_date=report_date,
            instructions=instructions,
            template_text=template_text,
        )
        session = await service.generate(
            report_request,
            source_text=source_text,
            upload=upload,
            session_id=session_id,
        )

    except PolicyRejectError as e:
        if e.code == ErrorCodes.REQUEST_IN_FLIGHT:
            return render_banner(request, e, status_code=409)
        logger.info(f"Generate rejected: {e}")
        return render_input_view(request, session_id, values=values, error=e)

    return render_report_view(request, session)


@api_router.post("/refine", response_class=HTMLResponse)
async def refine_report(
    request: Request,
    session_id: str = Form(...),
    refinement: str = Form(""),
) -> HTMLResponse:
    """수정 요청. 실패해도 기존 보고서를 다시 보여줌."""
    service = get_report_service(request)

    try:
        session = await service.refine(session_id, refinement)
    except PolicyRejectError as e:
        if e.code == ErrorCodes.REQUEST_IN_FLIGHT:
            return render_banner(request, e, status_code=409)

        current = service.store.find(session_id)
        if current is None:
            logger.info(f"Refine for unknown session: {session_id}")
            return render_input_view(request, generate_session_id(), error=e)

        logger.info(f"Refine rejected: {e}")
        return render_report_view(request, current, error=e)

    return render_report_view(request, session)


@api_router.post("/reset", response_class=HTMLResponse)
async def reset_report(
    request: Request,
    session_id: str = Form(""),
) -> HTMLResponse:
    """새로운 노트 분석하기: 세션 삭제 후 빈 입력 화면."""
    get_report_service(request).reset(session_id)
    return render_input_view(request, generate_session_id())


@api_router.get("/{session_id}")
async def get_report(request: Request, session_id: str) -> JSONResponse:
    """현재 보고서 구조 (JSON)."""
    service = get_report_service(request)
    session = service.store.find(session_id)
    if session is None:
        error = PolicyRejectError(ErrorCodes.REPORT_NOT_FOUND, session_id=session_id)
        return JSONResponse(
            status_code=404,
            content={"code": error.code, "message": error.user_message},
        )

    return JSONResponse(
        content={
            "session_id": session.session_id,
            "rendered_at": session.report.rendered_at,
            "request": session.request.to_dict(),
            "document": session.report.document.to_dict(),
            "history": [run.to_dict() for run in session.history],
        }
    )
