#!/usr/bin/env python3
"""
render_report.py - 생성된 보고서 텍스트를 오프라인으로 렌더링/내보내기

AI 호출 없이 이미 받은 마크다운 방언 텍스트(.md/.txt)를
화면용 HTML, Word(.doc/.docx), PDF, 인쇄 페이지로 변환한다.
파서 결과를 확인하거나 서식 문제를 재현할 때 사용.

사용법:
    # Word 호환 HTML (.doc)
    python scripts/render_report.py report.md

    # 여러 형식 한 번에
    python scripts/render_report.py report.md --format word --format pdf --out out/

    # 네이티브 DOCX
    python scripts/render_report.py report.md --format docx

    # 파싱 결과(JSON)만 출력
    python scripts/render_report.py report.md --dump
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.app.main import load_config  # noqa: E402
from src.domain.errors import PolicyRejectError  # noqa: E402
from src.parsing import parse_report  # noqa: E402
from src.render import get_exporter, render_report  # noqa: E402

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# --format 값 → (exporter kind, export 설정 덮어쓰기)
FORMATS = {
    "word": ("word", {"word_format": "html"}),
    "docx": ("word", {"word_format": "docx"}),
    "pdf": ("pdf", {}),
    "print": ("print", {}),
}


def main() -> int:
    parser = argparse.ArgumentParser(
        description="보고서 텍스트 오프라인 렌더링",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("input", type=str, help="보고서 텍스트 파일 (.md/.txt)")
    parser.add_argument(
        "--format",
        action="append",
        choices=sorted(FORMATS),
        help="출력 형식 (여러 번 지정 가능, 기본: word)",
    )
    parser.add_argument("--out", type=str, default=".", help="출력 디렉터리 (기본: 현재 디렉터리)")
    parser.add_argument("--config", type=str, default=None, help="설정 파일 (기본: default.yaml)")
    parser.add_argument("--dump", action="store_true", help="파싱 결과 JSON만 출력")

    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"입력 파일 없음: {input_path}")
        return 1

    config = load_config(Path(args.config) if args.config else None)
    title_marker = config.get("report", {}).get("title_marker")

    text = input_path.read_text(encoding="utf-8")
    document = parse_report(text, title_marker=title_marker) if title_marker else parse_report(text)

    for note in document.notes:
        logger.warning(f"line {note.line_no}: {note.message} ({note.original.strip()})")

    if args.dump:
        print(json.dumps(document.to_dict(), ensure_ascii=False, indent=2))
        return 0

    report = render_report(document)
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    for name in args.format or ["word"]:
        kind, overrides = FORMATS[name]
        export_config = {**config.get("export", {}), **overrides}
        try:
            artifact = get_exporter(kind, {**config, "export": export_config}).export(report)
        except PolicyRejectError as e:
            logger.error(f"{name} 내보내기 실패: {e}")
            return 1

        output_path = out_dir / artifact.filename
        output_path.write_bytes(artifact.content)
        logger.info(f"저장: {output_path} ({artifact.size} bytes)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
