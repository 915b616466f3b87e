"""
test_report_routes.py - Report / Export Routes 유닛 테스트

검증 포인트:
1. 입력 화면: 페이지마다 세션 ID 발급
2. 생성: 성공 → 보고서 화면, 입력 오류 → 인라인 메시지, AI 실패 → 배너
3. 요청 중복: 409 + HX-Retarget (배너만 교체)
4. 수정 실패: 기존 보고서 + 배너
5. 내보내기: 첨부 파일 응답, 에러는 한국어 detail
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.routes import export, report
from src.app.services.generate import ReportService
from src.app.services.ocr import OCRService
from src.app.services.session import SessionStore
from src.core.guard import RequestGuard
from src.core.ids import generate_session_id

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def service(test_config, fake_report_provider, fake_ocr_provider) -> ReportService:
    return ReportService(
        config=test_config,
        store=SessionStore(),
        guard=RequestGuard(),
        ocr_service=OCRService(test_config, provider=fake_ocr_provider),
        report_provider=fake_report_provider,
    )


@pytest.fixture
def app(test_config, service) -> FastAPI:
    """테스트용 FastAPI 앱 (lifespan 없이 state 직접 설정)."""
    app = FastAPI()
    app.include_router(report.router)
    app.include_router(report.api_router, prefix="/api/report")
    app.include_router(export.api_router, prefix="/api/export")

    app.state.config = test_config
    app.state.report_service = service
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """테스트 클라이언트."""
    return TestClient(app)


def form_data(**overrides) -> dict:
    data = {
        "session_id": generate_session_id(),
        "team_name": "디지털혁신팀",
        "report_date": "2024. 1. 15.",
        "author": "주무관 홍길동",
        "approval_line": "팀장, 과장",
        "instructions": "",
        "source_text": "회의 메모: 민원 처리 기간 단축",
    }
    data.update(overrides)
    return data


@pytest.fixture
def session_id(client, service) -> str:
    """생성이 끝난 세션."""
    data = form_data()
    response = client.post("/api/report/generate", data=data)
    assert response.status_code == 200
    assert service.store.find(data["session_id"]) is not None
    return data["session_id"]


# =============================================================================
# Input Page
# =============================================================================


class TestIndexPage:

    def test_renders_form_with_session_id(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert 'id="report-form"' in response.text
        assert 'name="session_id" value="SES-' in response.text
        assert 'id="error-banner"' in response.text

    def test_new_session_id_each_load(self, client):
        first = client.get("/").text.split('name="session_id" value="', 1)[1][:20]
        second = client.get("/").text.split('name="session_id" value="', 1)[1][:20]

        assert first != second

    def test_default_date(self, client):
        from datetime import date

        from src.domain.schemas import format_report_date

        assert format_report_date(date.today()) in client.get("/").text


# =============================================================================
# Generate
# =============================================================================


class TestGenerate:

    def test_success_shows_report(self, client, service):
        data = form_data()

        response = client.post("/api/report/generate", data=data)

        assert response.status_code == 200
        assert 'id="report-content"' in response.text
        assert "report-table-approval" in response.text
        assert f'data-export-url="/api/export/{data["session_id"]}/word"' in response.text
        assert f'data-print-url="/print/{data["session_id"]}"' in response.text
        assert "회의 메모: 민원 처리 기간 단축" in response.text

    def test_pdf_strategy_button(self, client, test_config):
        test_config["export"]["print_strategy"] = "pdf"
        data = form_data()

        response = client.post("/api/report/generate", data=data)

        assert f'data-export-url="/api/export/{data["session_id"]}/pdf"' in response.text
        assert "data-print-url" not in response.text

    def test_missing_fields_inline(self, client, fake_report_provider):
        response = client.post("/api/report/generate", data=form_data(team_name="", author=""))

        assert response.status_code == 200
        assert 'class="inline-error"' in response.text
        assert "모든 필수 항목을 입력해주세요" in response.text
        assert response.text.count('class="field-error"') == 2
        assert 'value="팀장, 과장"' in response.text
        assert fake_report_provider.calls == 0

    def test_empty_source_inline(self, client, fake_report_provider):
        response = client.post("/api/report/generate", data=form_data(source_text="  "))

        assert "원본 내용에서 텍스트를 찾을 수 없습니다" in response.text
        assert 'class="inline-error"' in response.text
        assert fake_report_provider.calls == 0

    def test_generation_failure_banner(self, client, fake_report_provider):
        fake_report_provider.fail = True

        response = client.post("/api/report/generate", data=form_data())

        assert response.status_code == 200
        assert 'class="banner banner-error"' in response.text
        assert "보고서 생성 서비스에 연결할 수 없습니다." in response.text
        assert 'class="banner-close"' in response.text
        assert 'id="report-form"' in response.text

    def test_in_flight_409(self, client, service):
        data = form_data()
        service.guard._in_flight[data["session_id"]] = "generate"

        response = client.post("/api/report/generate", data=data)

        assert response.status_code == 409
        assert response.headers["HX-Retarget"] == "#error-banner"
        assert response.headers["HX-Reswap"] == "innerHTML"
        assert "이전 요청을 처리하고 있습니다" in response.text
        assert "data-dismiss-banner" in response.text
        assert 'id="report-form"' not in response.text

    def test_source_file_upload(self, client, fake_ocr_provider, fake_report_provider):
        response = client.post(
            "/api/report/generate",
            data=form_data(source_text=""),
            files={"source_file": ("memo.png", b"fake png", "image/png")},
        )

        assert response.status_code == 200
        assert fake_ocr_provider.calls == 1
        assert 'id="report-content"' in response.text

    def test_unsupported_source_file(self, client, fake_ocr_provider):
        response = client.post(
            "/api/report/generate",
            data=form_data(),
            files={"source_file": ("memo.gif", b"GIF89a", "image/gif")},
        )

        assert "지원하지 않는 파일 형식입니다" in response.text
        assert fake_ocr_provider.calls == 0

    def test_template_file(self, client, fake_report_provider):
        client.post(
            "/api/report/generate",
            data=form_data(),
            files={"template_file": ("form.txt", "1. 개요\n2. 현황".encode(), "text/plain")},
        )

        assert "## 참고 서식" in fake_report_provider.prompts[0].user_prompt

    def test_unsupported_template(self, client, fake_report_provider):
        response = client.post(
            "/api/report/generate",
            data=form_data(),
            files={"template_file": ("form.hwp", b"hwp", "application/octet-stream")},
        )

        assert "DOCX, TXT, MD" in response.text
        assert fake_report_provider.calls == 0


# =============================================================================
# Refine / Reset
# =============================================================================


class TestRefine:

    def test_success(self, client, session_id, fake_report_provider):
        fake_report_provider.texts = [fake_report_provider.texts[0], "보 고 서\n\n1. 수정된 본문"]

        response = client.post(
            "/api/report/refine",
            data={"session_id": session_id, "refinement": "본문을 줄여주세요"},
        )

        assert response.status_code == 200
        assert "1. 수정된 본문" in response.text

    def test_failure_keeps_report(self, client, session_id, service, fake_report_provider):
        html_before = service.store.get(session_id).report.html
        fake_report_provider.fail = True

        response = client.post(
            "/api/report/refine",
            data={"session_id": session_id, "refinement": "표 추가"},
        )

        assert response.status_code == 200
        assert 'class="banner banner-error"' in response.text
        assert html_before in response.text
        assert service.store.get(session_id).report.html == html_before

    def test_empty_refinement_inline(self, client, session_id):
        response = client.post("/api/report/refine", data={"session_id": session_id, "refinement": " "})

        assert 'class="inline-error"' in response.text
        assert "수정 지시사항을 입력해주세요." in response.text
        assert 'id="report-content"' in response.text

    def test_unknown_session(self, client):
        response = client.post(
            "/api/report/refine",
            data={"session_id": "SES-0000000000000000", "refinement": "수정"},
        )

        assert "세션이 만료되었습니다" in response.text
        assert 'id="report-form"' in response.text

    def test_in_flight_409(self, client, session_id, service):
        service.guard._in_flight[session_id] = "refine"

        response = client.post("/api/report/refine", data={"session_id": session_id, "refinement": "수정"})

        assert response.status_code == 409
        assert response.headers["HX-Retarget"] == "#error-banner"

    def test_reset(self, client, session_id, service):
        response = client.post("/api/report/reset", data={"session_id": session_id})

        assert response.status_code == 200
        assert 'id="report-form"' in response.text
        assert service.store.find(session_id) is None
        assert f'value="{session_id}"' not in response.text


# =============================================================================
# JSON / Print / Export
# =============================================================================


class TestReportJson:

    def test_document(self, client, session_id):
        response = client.get(f"/api/report/{session_id}")

        data = response.json()
        assert data["session_id"] == session_id
        assert data["request"]["report_date"] == "2024. 01. 15."
        assert data["document"]["blocks"][0] == {"type": "title", "text": "보 고 서", "style": "document"}
        assert data["history"][0]["result"] == "success"

    def test_not_found(self, client):
        response = client.get("/api/report/SES-0000000000000000")

        assert response.status_code == 404
        assert response.json()["code"] == "REPORT_NOT_FOUND"


class TestPrintPage:

    def test_print_page(self, client, session_id, service):
        response = client.get(f"/print/{session_id}")

        assert response.status_code == 200
        assert "window.print();" in response.text
        assert service.store.get(session_id).report.html in response.text

    def test_not_found(self, client):
        response = client.get("/print/SES-0000000000000000")

        assert response.status_code == 404
        assert "내보낼 보고서를 찾을 수 없습니다." in response.text


class TestExport:

    def test_word(self, client, session_id, service):
        response = client.get(f"/api/export/{session_id}/word")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/msword")
        assert response.headers["content-disposition"] == 'attachment; filename="ai-report.doc"'
        assert service.store.get(session_id).report.html.encode("utf-8") in response.content

    def test_word_docx_format(self, client, session_id, test_config):
        test_config["export"]["word_format"] = "docx"

        response = client.get(f"/api/export/{session_id}/word")

        assert response.headers["content-disposition"] == 'attachment; filename="ai-report.docx"'
        assert response.content[:2] == b"PK"

    def test_pdf(self, client, session_id):
        response = client.get(f"/api/export/{session_id}/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    def test_not_found(self, client):
        response = client.get("/api/export/SES-0000000000000000/word")

        assert response.status_code == 404
        assert response.json() == {"detail": "내보낼 보고서를 찾을 수 없습니다."}

    def test_export_failure(self, client, session_id, monkeypatch):
        from src.domain.errors import ErrorCodes, PolicyRejectError

        def broken(self, report):
            raise PolicyRejectError(ErrorCodes.EXPORT_FAILED, export="pdf")

        monkeypatch.setattr("src.render.exporters.PdfExporter.export", broken)

        response = client.get(f"/api/export/{session_id}/pdf")

        assert response.status_code == 500
        assert response.json() == {"detail": "보고서 파일을 만드는 중 오류가 발생했습니다."}
