"""
Markdown report generation for an evaluation result.

The report is purely derived from an `EvaluationResult`; the only decision it
makes is which steps are painful enough to earn an improvement suggestion.
"""

from datetime import date
from typing import Final, Literal

from ux_eval.exceptions import InvalidInputError
from ux_eval.models import EvaluationResult, PersonaConfig, StepBreakdown

ReportLanguage = Literal["en", "zh"]

# Steps whose final pain exceeds this value (strictly) get a suggestion.
PAIN_SUGGESTION_THRESHOLD_MS: Final = 3000

_LABELS: Final[dict[str, dict[str, str]]] = {
    "en": {
        "title": "UX Experience Test Report",
        "date": "Test Date",
        "target": "Test Target",
        "target_placeholder": "[Fill in the test target here]",
        "persona": "Persona",
        "total_steps": "Total Steps",
        "breakpoints": "Breakpoints",
        "summary": "1. Key Findings",
        "summary_header": "| Overall Score | Total Physical Time "
        "| Total Perceived Time | Total Pain Score |",
        "details": "2. Step Details",
        "details_header": "| Step | Physical (s) | Perceived (s) | Pain (s) "
        "| Complexity | Screenshot |",
        "suggestions": "3. Improvement Suggestions",
        "suggestion": '1. **Optimize step "{step}"**: current pain score '
        "{pain}s; review loading performance or the interaction flow.",
        "no_suggestion": "1. The overall experience is good; "
        "no significant pain points.",
    },
    "zh": {
        "title": "UX 体验测试报告",
        "date": "测试时间",
        "target": "测试目标",
        "target_placeholder": "[请在此处填写测试目标]",
        "persona": "用户画像",
        "total_steps": "Total Steps",
        "breakpoints": "Breakpoints",
        "summary": "1. 核心结论",
        "summary_header": "| 综合评分 | 总物理耗时 | 总感知耗时 | 总疼痛评分 |",
        "details": "2. 详细链路数据",
        "details_header": "| 步骤 | 物理耗时 (s) | 感知耗时 (s) | 疼痛评分 (s) "
        "| 复杂度 | 截图 |",
        "suggestions": "3. 改进建议",
        "suggestion": '1. **优化步骤 "{step}"**: 当前疼痛评分 {pain}s，'
        "建议检查加载性能或交互流程。",
        "no_suggestion": "1. 整体体验良好，暂无显著痛点。",
    },
}


def _seconds(ms: float) -> str:
    return f"{ms / 1000:.2f}"


def _plain_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def painful_steps(
    result: EvaluationResult, threshold_ms: float = PAIN_SUGGESTION_THRESHOLD_MS
) -> list[StepBreakdown]:
    """Returns the breakdown entries whose final pain exceeds the threshold."""
    return [entry for entry in result.breakdown if entry.final_pain_ms > threshold_ms]


def _step_row(entry: StepBreakdown) -> str:
    screenshot = f"![Step]({entry.screenshot})" if entry.screenshot else "-"
    return (
        f"| {_cell(entry.step)} | {_seconds(entry.original_ms)}s "
        f"| {_seconds(entry.base_perceived_ms)}s | {_seconds(entry.final_pain_ms)}s "
        f"| {_cell(entry.complexity)} | {screenshot} |"
    )


def render_report(
    result: EvaluationResult,
    persona: PersonaConfig,
    *,
    language: ReportLanguage = "en",
    generated_on: date | None = None,
    target: str | None = None,
    threshold_ms: float = PAIN_SUGGESTION_THRESHOLD_MS,
) -> str:
    """
    Render an evaluation result as a Markdown report.

    Args:
        result: The evaluation to describe.
        persona: The persona the evaluation was run with.
        language: Report language, "en" or "zh".
        generated_on: Date printed in the header (defaults to today).
        target: Free-text test target; a placeholder is printed when omitted.
        threshold_ms: Pain above which a step gets an improvement suggestion.

    Raises:
        InvalidInputError: If the language is not supported.
    """
    labels = _LABELS.get(language)
    if labels is None:
        raise InvalidInputError(
            f"Unsupported report language '{language}'. "
            f"Expected one of: {', '.join(_LABELS)}"
        )

    report_date = (generated_on or date.today()).isoformat()
    flagged = painful_steps(result, threshold_ms)
    if flagged:
        suggestions = [
            labels["suggestion"].format(
                step=entry.step, pain=_seconds(entry.final_pain_ms)
            )
            for entry in flagged
        ]
    else:
        suggestions = [labels["no_suggestion"]]

    lines = [
        f"# {labels['title']}",
        "",
        f"**{labels['date']}**: {report_date}",
        f"**{labels['target']}**: {target or labels['target_placeholder']}",
        f"**{labels['persona']}**: {persona.name or 'Unknown'} "
        f"(ThinkTime: {_plain_number(persona.human_think_time_ms)}ms, "
        f"Factor: {_plain_number(persona.persona_factor)})",
        f"- **{labels['total_steps']}**: {result.complexity.total_steps}",
        f"- **{labels['breakpoints']}**: {result.complexity.breakpoints}",
        "",
        f"## {labels['summary']}",
        labels["summary_header"],
        "| :--- | :--- | :--- | :--- |",
        f"| **{result.score}** | **{_seconds(result.total_physical_time)}s** "
        f"| **{_seconds(result.total_base_perceived_time)}s** "
        f"| **{_seconds(result.total_pain_score)}s** |",
        "",
        f"## {labels['details']}",
        labels["details_header"],
        "| :--- | :--- | :--- | :--- | :--- | :--- |",
        *(_step_row(entry) for entry in result.breakdown),
        "",
        f"## {labels['suggestions']}",
        *suggestions,
    ]
    return "\n".join(lines) + "\n"
