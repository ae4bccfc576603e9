import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ux_eval.exceptions import InvalidInputError
from ux_eval.models import (
    ComplexityStats,
    EvaluationResult,
    PersonaConfig,
    StepBreakdown,
    TraceStep,
)

from .scoring import (
    COMPRESSION_FACTOR,
    EXCLUDED_FROM_EXPECTATION,
    attention_loss_factor,
    classify_score,
    complexity_factor,
    expected_time_ms,
    pain_ratio,
)

_TRACE_STEPS_ADAPTER = TypeAdapter(list[TraceStep])

BREAKPOINT_MARKER = "error"


@dataclass(frozen=True, slots=True)
class StepEvaluation:
    """Unrounded intermediate values for one step, plus its display record."""

    think_time_ms: float
    base_perceived_ms: float
    final_pain_ms: float
    breakdown: StepBreakdown


def round_ms(value: float) -> int:
    """Rounds half up to the nearest millisecond."""
    return math.floor(value + 0.5)


def _format_factor(value: float) -> str:
    return f"{value:g}"


def _ensure_finite(what: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(
            f"The {what} is not a finite number; check the step durations "
            "and persona values for out-of-range magnitudes."
        )


def evaluate_step(step: TraceStep, persona: PersonaConfig) -> StepEvaluation:
    """
    Applies the perceived-time pipeline to a single step.

    1. Think time scales the persona's baseline by the step complexity.
    2. The base perceived duration counts the full wait for `perceived`
       steps, a compressed share for `partially_perceived` ones and nothing
       for every other category.
    3. The final pain amplifies the base by attention loss and persona factor.
    """
    think_time = persona.human_think_time_ms * complexity_factor(step.complexity)
    attention_loss = attention_loss_factor(step.complexity)

    duration_term: str | None
    match step.category:
        case "perceived":
            base = step.duration + think_time
            duration_term = "Dur"
        case "partially_perceived":
            base = step.duration * COMPRESSION_FACTOR + think_time
            duration_term = f"Dur*{_format_factor(COMPRESSION_FACTOR)}"
        case _:
            base = 0.0
            duration_term = None

    final_pain = base * attention_loss * persona.persona_factor
    for label, value in (
        ("think time", think_time),
        ("perceived duration", base),
        ("pain score", final_pain),
    ):
        _ensure_finite(f"{label} of step '{step.name}'", value)

    if duration_term is not None:
        rule = (
            f"({duration_term} + Think[{round_ms(think_time)}])"
            f" * Attn[{_format_factor(attention_loss)}]"
            f" * Pers[{_format_factor(persona.persona_factor)}]"
        )
    else:
        rule = "Exclude"

    return StepEvaluation(
        think_time_ms=think_time,
        base_perceived_ms=base,
        final_pain_ms=final_pain,
        breakdown=StepBreakdown(
            step=step.name,
            category=step.category,
            complexity=step.complexity,
            original_ms=round_ms(step.duration),
            think_time_ms=round_ms(think_time),
            base_perceived_ms=round_ms(base),
            final_pain_ms=round_ms(final_pain),
            rule=rule,
            screenshot=step.screenshot,
        ),
    )


def _coerce_steps(steps: Iterable[TraceStep | Mapping[str, Any]]) -> list[TraceStep]:
    try:
        return _TRACE_STEPS_ADAPTER.validate_python(list(steps))
    except ValidationError as e:
        raise InvalidInputError.from_validation_error("trace steps", e) from e
    except TypeError as e:
        raise InvalidInputError(f"Trace steps must be a sequence: {e}") from e


def _coerce_persona(persona: PersonaConfig | Mapping[str, Any]) -> PersonaConfig:
    if isinstance(persona, PersonaConfig):
        return persona
    if not isinstance(persona, Mapping):
        raise InvalidInputError(
            f"Persona must be a PersonaConfig or mapping, got {type(persona).__name__}"
        )
    try:
        return PersonaConfig.model_validate(dict(persona))
    except ValidationError as e:
        raise InvalidInputError.from_validation_error("persona", e) from e


def _is_breakpoint(step: TraceStep) -> bool:
    return (
        step.category == "diagnostic"
        and step.description is not None
        and BREAKPOINT_MARKER in step.description
    )


def evaluate(
    steps: Iterable[TraceStep | Mapping[str, Any]],
    persona: PersonaConfig | Mapping[str, Any],
) -> EvaluationResult:
    """
    Evaluates a recorded trace for the given persona.

    Args:
        steps: Ordered trace steps, as `TraceStep` objects or plain mappings.
        persona: A complete persona configuration (see `resolve_persona`).

    Returns:
        EvaluationResult with one breakdown entry per step, in input order.

    Raises:
        InvalidInputError: If the steps or persona cannot be interpreted, or a
            step or total overflows to a non-finite value.
    """
    trace_steps = _coerce_steps(steps)
    persona_config = _coerce_persona(persona)

    evaluations = [evaluate_step(step, persona_config) for step in trace_steps]
    breakdown = [evaluation.breakdown for evaluation in evaluations]

    total_physical_time = sum(step.duration for step in trace_steps)
    total_base_perceived_time = sum(e.base_perceived_ms for e in evaluations)
    total_pain_score = sum(entry.final_pain_ms for entry in breakdown)

    # Dynamic baseline: what this persona tolerates for the steps it can see.
    expected_steps = [
        step
        for step in trace_steps
        if step.category not in EXCLUDED_FROM_EXPECTATION
    ]
    expected_time = sum(
        expected_time_ms(step.complexity) * persona_config.expectation_bias
        for step in expected_steps
    )
    for label, value in (
        ("total physical time", total_physical_time),
        ("total perceived time", total_base_perceived_time),
        ("expected time", expected_time),
    ):
        _ensure_finite(label, value)

    return EvaluationResult(
        total_physical_time=total_physical_time,
        total_base_perceived_time=total_base_perceived_time,
        total_pain_score=total_pain_score,
        persona_factor=persona_config.persona_factor,
        expectation_bias=persona_config.expectation_bias,
        complexity=ComplexityStats(
            valid_steps=len(expected_steps),
            expected_time_ms=expected_time,
            total_steps=len(trace_steps),
            breakpoints=sum(1 for step in trace_steps if _is_breakpoint(step)),
            pain_ratio=pain_ratio(total_pain_score, expected_time),
        ),
        score=classify_score(total_pain_score, expected_time),
        breakdown=breakdown,
    )
