"""Perceived-time and pain scoring for recorded UI interaction traces."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _distribution_version

from .evaluation import evaluate
from .exceptions import InvalidInputError
from .models import (
    ComplexityStats,
    EvaluationResult,
    Grade,
    PersonaConfig,
    PersonaOverride,
    StepBreakdown,
    TraceStep,
)
from .persona import PERSONA_PRESETS, persona_from_description, resolve_persona
from .report import render_report

try:
    __version__ = _distribution_version("ux-eval")
except PackageNotFoundError:  # source checkout without an install
    __version__ = "0.0.0+dev"

__all__ = [
    "__version__",
    "PERSONA_PRESETS",
    "ComplexityStats",
    "EvaluationResult",
    "Grade",
    "InvalidInputError",
    "PersonaConfig",
    "PersonaOverride",
    "StepBreakdown",
    "TraceStep",
    "evaluate",
    "persona_from_description",
    "render_report",
    "resolve_persona",
]
