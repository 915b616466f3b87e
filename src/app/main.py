"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uvicorn src.app.main:app --reload
- 프로덕션: uvicorn src.app.main:app
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.app.routes import export, report
from src.app.services.generate import ReportService
from src.app.services.session import SessionStore
from src.core.guard import RequestGuard
from src.core.logging import configure_logging

PROJECT_ROOT = Path(__file__).parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def create_report_service(config: dict) -> ReportService:
    """설정 기반 ReportService (Provider는 첫 요청 때 생성)."""
    max_sessions = config.get("session", {}).get("max_sessions", 100)
    return ReportService(
        config=config,
        store=SessionStore(max_sessions=max_sessions),
        guard=RequestGuard(),
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 로깅 설정, 세션 저장소 생성
    종료 시: 메모리 세션 폐기
    """
    # Startup
    app.state.config = load_config()
    configure_logging(app.state.config)
    app.state.report_service = create_report_service(app.state.config)

    yield

    # Shutdown
    app.state.report_service = None


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Official Report Generator",
    description="메모/문서 → 공문서 형식 보고서 생성 및 Word/PDF 내보내기",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS, JS)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(report.router, prefix="", tags=["Report"])

# API 라우트
app.include_router(report.api_router, prefix="/api/report", tags=["Report API"])
app.include_router(export.api_router, prefix="/api/export", tags=["Export API"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
