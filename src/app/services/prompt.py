"""
Prompt Builder: ReportRequest + 원본 내용 → 생성 프롬프트.

생성 결과는 파서가 읽는 방언을 따라야 한다:
- 첫 줄: 제목 문구 (기본 "보 고 서")
- 첫 번째 표: 결재란 (머리행 = 결재라인, 둘째 행 = 빈 서명 칸)
- 두 번째 표: 보고서 정보 (팀명/일시/작성자, 한 행에 한 항목)
- **제목** 한 줄
- 본문: "1. " / "가. " / "1) " / "가) " 항목 번호
"""

from src.app.providers.base import ReportPrompt
from src.domain.constants import DEFAULT_TITLE_MARKER
from src.domain.schemas import ReportRequest

SYSTEM_INSTRUCTION = (
    "You are a professional report generator for Korean public institutions. "
    "Your task is to transform raw text into a formal, structured, and professional "
    "report document. The language must be formal, objective, and adhere to the "
    "standards of official Korean government documents. The output must be entirely "
    "in Korean and formatted using markdown. The report must start with a formal "
    "approval signature table, followed by report metadata (team, date, author), "
    "a bolded title, and then the main content."
)

NO_INSTRUCTIONS = "없음"


def _structure_guide(request: ReportRequest, title_marker: str) -> str:
    approvers = " | ".join(request.approvers)
    blanks = " | ".join("&nbsp;" for _ in request.approvers)
    return f"""0.  **문서 제목**: 보고서의 첫 줄에는 다른 내용 없이 '{title_marker}'만 적어주세요.

1.  **결재란**: 문서 제목 바로 아래에 다음 결재라인에 따른 결재란을 마크다운 테이블로 만들어주세요. 결재라인의 첫 번째는 작성자 본인입니다. 테이블의 첫 행은 직위/이름을, 두 번째 행은 서명을 위한 빈 칸(&nbsp;)으로 구성해주세요.
    - 결재라인: {", ".join(request.approvers)}
    - 예시:
      | {approvers} |
      |{"---|" * len(request.approvers)}
      | {blanks} |

2.  **보고서 정보**: 결재란 바로 아래에 다음 정보를 2열 마크다운 테이블로 명시해주세요. 각 항목은 한 행씩 차지해야 합니다.
    | 팀명 | {request.team_name} |
    | 일시 | {request.report_date} |
    | 작성자 | {request.author} |

3.  **제목**: 보고서 정보 아래에, 원본 내용을 함축하는 '제목'을 만들어 '**'로 감싸 굵은 글씨로 표시해주세요. 이 제목은 보고서 내용과 분리된 한 줄이어야 합니다.

4.  **보고서 본문**: 제목 아래에 개요, 주요 내용, 실행 계획 등의 체계적인 구조로 본문을 작성해주세요. 항목 번호는 "1. ", "가. ", "1) ", "가) " 순서의 공문서 체계를 사용하고, 표 안에서 줄을 바꿀 때는 <br>을 사용해주세요."""


def _template_section(request: ReportRequest) -> str:
    if not request.template_text or not request.template_text.strip():
        return ""
    return f"""
## 참고 서식
아래 서식의 구성과 문체를 참고하여 본문을 작성해주세요.
---
{request.template_text.strip()}
---
"""


def build_initial_prompt(
    request: ReportRequest,
    source_text: str,
    title_marker: str = DEFAULT_TITLE_MARKER,
) -> ReportPrompt:
    """첫 생성 프롬프트."""
    user_prompt = f"""다음 정보를 바탕으로 공식 보고서를 작성해 주십시오. 보고서의 구조는 다음 순서를 엄격히 따라야 합니다.

{_structure_guide(request, title_marker)}

## 추가 지시사항
{request.instructions.strip() or NO_INSTRUCTIONS}
{_template_section(request)}
## 원본 내용
---
{source_text}
---
"""
    return ReportPrompt(system_instruction=SYSTEM_INSTRUCTION, user_prompt=user_prompt)


def build_refinement_prompt(
    request: ReportRequest,
    source_text: str,
    title_marker: str = DEFAULT_TITLE_MARKER,
) -> ReportPrompt:
    """
    수정 프롬프트.

    보고서 전체를 새로 생성하도록 지시 (부분 수정 없음).
    """
    user_prompt = f"""기존에 작성된 보고서가 있습니다. 아래의 수정 요청사항을 반영하여 보고서를 다시 작성해주십시오.

## 수정 요청사항
---
{(request.refinement or "").strip()}
---

## 보고서 재작성 가이드라인 (이 가이드라인을 반드시 따라서 수정해주세요)
아래의 구조와 정보를 사용하여 보고서 전체를 새로 생성해야 합니다.

{_structure_guide(request, title_marker)}

## 추가 지시사항
{request.instructions.strip() or NO_INSTRUCTIONS}
{_template_section(request)}
## 원본 내용
---
{source_text}
---

최종 결과물은 위의 가이드라인과 수정 요청사항이 모두 반영된 완전한 형태의 보고서여야 합니다.
"""
    return ReportPrompt(system_instruction=SYSTEM_INSTRUCTION, user_prompt=user_prompt)


def build_prompt(
    request: ReportRequest,
    source_text: str,
    title_marker: str = DEFAULT_TITLE_MARKER,
) -> ReportPrompt:
    """refinement 유무로 첫 생성/수정 프롬프트 선택."""
    if request.refinement and request.refinement.strip():
        return build_refinement_prompt(request, source_text, title_marker)
    return build_initial_prompt(request, source_text, title_marker)
