"""
인쇄 페이지: 렌더링된 보고서만 담은 독립 HTML 페이지.

브라우저 인쇄 대화상자로 PDF를 저장하는 전략.
- 인쇄 전용 스타일시트 (A4, 여백 2cm, 항상 밝은 색)
- 로드 후 자동 print(), afterprint에서 창 닫기
- afterprint가 오지 않는 브라우저(취소 포함)를 위한 대체 타이머
"""

from src.domain.constants import REPORT_PAGE_TITLE
from src.domain.document import RenderedReport
from src.render.styles import PRINT_CSS, REPORT_CSS

DEFAULT_CLOSE_FALLBACK_MS = 1000

PRINT_PAGE = """<!DOCTYPE html>
<html lang="ko">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
{report_css}
{print_css}
</style>
</head>
<body>
{body}
<script>
(function () {{
  var closed = false;
  function closeOnce() {{
    if (closed) return;
    closed = true;
    window.close();
  }}
  window.addEventListener("afterprint", closeOnce);
  window.addEventListener("load", function () {{
    window.focus();
    window.print();
    setTimeout(closeOnce, {fallback_ms});
  }});
}})();
</script>
</body>
</html>
"""


def build_print_page(
    report: RenderedReport,
    close_fallback_ms: int = DEFAULT_CLOSE_FALLBACK_MS,
    title: str = REPORT_PAGE_TITLE,
) -> str:
    """
    인쇄용 HTML 페이지 생성.

    Args:
        report: 렌더링 스냅샷 (HTML 조각을 그대로 사용)
        close_fallback_ms: afterprint 미발생 시 창을 닫기까지의 대기 시간
        title: 페이지 제목

    Returns:
        완전한 HTML 문서 문자열
    """
    return PRINT_PAGE.format(
        title=title,
        report_css=REPORT_CSS,
        print_css=PRINT_CSS,
        body=report.html,
        fallback_ms=int(close_fallback_ms),
    )
