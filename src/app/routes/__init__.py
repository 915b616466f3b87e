"""
FastAPI Routes.

페이지 라우트 (HTML) + API 라우트 (HTMX 조각, JSON, 다운로드)
"""

from . import export, report

__all__ = ["export", "report"]
