"""
Pytest fixtures for the report generator tests.

- 보고서 텍스트 샘플 (결재란 + 보고서 정보 + 본문)
- 가짜 Provider (네트워크 호출 없음)
- 테스트용 설정
"""

import asyncio
from pathlib import Path

import pytest
import yaml

from src.app.providers.base import (
    GenerationError,
    GenerationResult,
    OCRProvider,
    OCRResult,
    ReportPrompt,
    ReportProvider,
)
from src.domain.schemas import ReportRequest

# =============================================================================
# Sample Report Text
# =============================================================================

SAMPLE_REPORT = """보 고 서

| 주무관 홍길동 | 팀장 | 과장 |
|---|---|---|
| &nbsp; | &nbsp; | &nbsp; |

| 팀명 | 디지털혁신팀 |
| 일시 | 2024. 01. 15. |
| 작성자 | 주무관 홍길동 |

**민원 처리 기간 단축 방안 보고**

1. 추진 배경
가. 민원 처리 평균 기간 증가
1) 전년 대비 12% 증가
가) 담당 인력 부족

| 구분 | 현재 | 목표 |
|---|---|---|
| 처리 기간 | 7일 | 5일<br>(2월부터) |
"""


# =============================================================================
# Path / Config Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """default.yaml 로드."""
    with open(project_root / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정 (run log 저장 없음)."""
    return {
        "ai": {
            "ocr": {"model": "gemini-test", "fallback": None},
            "report": {"provider": "gemini", "model": "gemini-test", "fallback": None},
        },
        "report": {"title_marker": "보 고 서"},
        "export": {
            "print_strategy": "print_page",
            "word_format": "html",
            "print_close_fallback_ms": 1000,
            "pdf_font_path": None,
        },
        "logging": {"level": "INFO", "run_log_dir": None},
        "session": {"max_sessions": 100},
    }


# =============================================================================
# Request Fixtures
# =============================================================================

@pytest.fixture
def sample_report_text() -> str:
    """정상 구조의 AI 출력."""
    return SAMPLE_REPORT


@pytest.fixture
def sample_request() -> ReportRequest:
    """필수 항목이 모두 채워진 요청."""
    return ReportRequest(
        author="주무관 홍길동",
        approval_line="팀장, 과장",
        team_name="디지털혁신팀",
        report_date="2024. 1. 15.",
        instructions="간결하게 작성",
    )


# =============================================================================
# Fake Providers
# =============================================================================

class FakeReportProvider(ReportProvider):
    """
    고정 텍스트를 돌려주는 보고서 Provider.

    texts: 호출 순서대로 반환할 텍스트 (마지막 값 반복)
    fail: True면 GenerationError
    gate: 설정되면 이 Event가 set될 때까지 응답 대기
    """

    name = "fake"

    def __init__(self, texts: list[str] | None = None, fail: bool = False):
        self.texts = texts or [SAMPLE_REPORT]
        self.fail = fail
        self.gate: asyncio.Event | None = None
        self.prompts: list[ReportPrompt] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: ReportPrompt) -> GenerationResult:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise GenerationError("PROVIDER_FAILED", "보고서 생성 서비스에 연결할 수 없습니다.")
        text = self.texts[min(len(self.prompts), len(self.texts)) - 1]
        return GenerationResult(
            text=text,
            provider=self.name,
            model_requested="fake-model",
            model_used="fake-model",
            prompt_hash=prompt.prompt_hash,
        )


class FakeOCRProvider(OCRProvider):
    """고정 텍스트를 돌려주는 OCR Provider."""

    def __init__(self, text: str = "회의 메모: 민원 처리 기간 단축"):
        self.text = text
        self.calls = 0

    async def extract_text(self, file_bytes: bytes, file_type: str) -> OCRResult:
        self.calls += 1
        return OCRResult(
            success=bool(self.text.strip()),
            text=self.text,
            model_used="fake-ocr",
        )


@pytest.fixture
def fake_report_provider() -> FakeReportProvider:
    return FakeReportProvider()


@pytest.fixture
def fake_ocr_provider() -> FakeOCRProvider:
    return FakeOCRProvider()
