"""
App layer: UI 서버 (FastAPI + HTMX).

역할:
- 입력 폼, 원본 파일 업로드, 세션 관리
- 텍스트 추출/보고서 생성 호출
- 보고서 화면과 Word/PDF/인쇄 내보내기

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML (HTMX)
- src/app/static/ → CSS/JS (테마, 미리보기, 인쇄 연동)
"""
