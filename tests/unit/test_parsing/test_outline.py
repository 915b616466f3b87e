"""
test_outline.py - 개요 단계 / 줄 분류 테스트

우선순위: "1. " → "가. " → "1) " → "가) " (첫 일치만)
"""

import pytest

from src.domain.document import OutlineLine, PlainText, Spacer, Title, TitleStyle
from src.parsing.outline import classify_line, outline_level


class TestOutlineLevel:
    """번호 패턴 → 단계."""

    @pytest.mark.parametrize(
        ("text", "level"),
        [
            ("1. 추진 배경", 0),
            ("12. 열두번째 항목", 0),
            ("가. 세부 내용 설명", 1),
            ("하. 마지막", 1),
            ("1) 세부 항목", 2),
            ("가) 하위 항목", 3),
        ],
    )
    def test_levels(self, text, level):
        assert outline_level(text) == level

    def test_digit_dot_wins_over_later_patterns(self):
        """여러 패턴이 섞여도 첫 번째 우선순위만."""
        assert outline_level("1. 가. 혼합 번호") == 0
        assert outline_level("가. 1) 혼합 번호") == 1

    @pytest.mark.parametrize(
        "text",
        ["1.5배 증가", "가나다. 문장", "1)붙은번호", "(1) 괄호 번호", "- 글머리표", "본문 문장"],
    )
    def test_no_level(self, text):
        """공백 없는 번호, 다른 기호는 일반 문단."""
        assert outline_level(text) is None


class TestClassifyLine:
    """표가 아닌 줄 → 블록."""

    def test_blank_is_spacer(self):
        assert classify_line("   ") == Spacer()

    def test_title_marker(self):
        """제목 문구와 정확히 일치."""
        assert classify_line("  보 고 서 ") == Title("보 고 서", TitleStyle.DOCUMENT)

    def test_title_marker_must_match_exactly(self):
        """띄어쓰기가 다르면 일반 문단."""
        assert classify_line("보고서") == PlainText("보고서")

    def test_custom_title_marker(self):
        assert classify_line("업무 보고", title_marker="업무 보고").style is TitleStyle.DOCUMENT

    def test_subject_title(self):
        """줄 전체가 **…**."""
        assert classify_line("**민원 처리 개선 보고**") == Title(
            "민원 처리 개선 보고", TitleStyle.SUBJECT
        )

    def test_partial_bold_is_plain_text(self):
        """일부만 굵게 표시된 줄은 그대로 평문."""
        assert classify_line("**중요** 사항입니다") == PlainText("**중요** 사항입니다")

    def test_empty_bold_is_plain_text(self):
        assert classify_line("** **") == PlainText("** **")

    def test_outline_keeps_number_text(self):
        """번호 포함 원문 유지, 앞뒤 공백만 제거."""
        assert classify_line("  가. 세부 내용 설명") == OutlineLine("가. 세부 내용 설명", 1)
