"""Pure perceived-time evaluation and scoring helpers."""

from .evaluator import StepEvaluation, evaluate, evaluate_step
from .scoring import (
    ATTENTION_LOSS_FACTORS,
    COMPLEXITY_FACTORS,
    COMPRESSION_FACTOR,
    EXPECTED_TIMES_MS,
    attention_loss_factor,
    classify_score,
    complexity_factor,
    expected_time_ms,
)

__all__ = [
    "ATTENTION_LOSS_FACTORS",
    "COMPLEXITY_FACTORS",
    "COMPRESSION_FACTOR",
    "EXPECTED_TIMES_MS",
    "StepEvaluation",
    "attention_loss_factor",
    "classify_score",
    "complexity_factor",
    "evaluate",
    "evaluate_step",
    "expected_time_ms",
]
