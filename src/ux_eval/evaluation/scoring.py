from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from ux_eval.models import Grade, TimeClass

# Share of a partially perceived wait that the user actually notices.
COMPRESSION_FACTOR: Final = 0.4

# Think-time multipliers: complex steps need more processing.
COMPLEXITY_FACTORS: Final[Mapping[str, float]] = MappingProxyType(
    {"low": 1.0, "medium": 1.2, "high": 1.5}
)
DEFAULT_COMPLEXITY_FACTOR: Final = 1.0

# Pain multipliers for broken flow and distraction.
ATTENTION_LOSS_FACTORS: Final[Mapping[str, float]] = MappingProxyType(
    {"low": 1.0, "medium": 1.3, "high": 1.8}
)
DEFAULT_ATTENTION_LOSS_FACTOR: Final = 1.0

# Tolerable time per step (think time plus system response).
EXPECTED_TIMES_MS: Final[Mapping[str, float]] = MappingProxyType(
    {"low": 1000, "medium": 3000, "high": 6000}
)
DEFAULT_EXPECTED_TIME_KEY: Final = "medium"

EXCLUDED_FROM_EXPECTATION: Final[frozenset[TimeClass]] = frozenset(
    {"tool_overhead", "diagnostic"}
)

# Upper ratio bounds (inclusive) of pain over expected time, best grade first.
GRADE_THRESHOLDS: Final[tuple[tuple[float, Grade], ...]] = (
    (0.8, Grade.EXCELLENT),
    (1.2, Grade.GOOD),
    (1.5, Grade.FAIR),
)


def complexity_factor(complexity: str) -> float:
    return COMPLEXITY_FACTORS.get(complexity, DEFAULT_COMPLEXITY_FACTOR)


def attention_loss_factor(complexity: str) -> float:
    return ATTENTION_LOSS_FACTORS.get(complexity, DEFAULT_ATTENTION_LOSS_FACTOR)


def expected_time_ms(complexity: str) -> float:
    return EXPECTED_TIMES_MS.get(
        complexity, EXPECTED_TIMES_MS[DEFAULT_EXPECTED_TIME_KEY]
    )


def pain_ratio(pain_ms: float, expected_ms: float) -> float | None:
    """Returns pain over expected time, or None when the baseline is not positive."""
    if expected_ms <= 0:
        return None
    return pain_ms / expected_ms


def classify_score(pain_ms: float, expected_ms: float) -> Grade:
    """
    Grades total pain against the persona's expected time.

    A non-positive baseline (e.g. every step was overhead or diagnostic) has
    no meaningful ratio: no pain grades as Excellent, any pain as Poor.
    """
    ratio = pain_ratio(pain_ms, expected_ms)
    if ratio is None:
        return Grade.EXCELLENT if pain_ms <= 0 else Grade.POOR

    for upper_bound, grade in GRADE_THRESHOLDS:
        if ratio <= upper_bound:
            return grade
    return Grade.POOR
