from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TimeClass = Literal[
    "perceived",
    "partially_perceived",
    "non_perceived",
    "tool_overhead",
    "diagnostic",
]
ComplexityLevel = Literal["low", "medium", "high"]

CUSTOM_PERSONA_ID = "custom_persona"
CUSTOM_PERSONA_NAME = "Custom Persona"


class _CamelModel(BaseModel):
    """Base for models exchanged in camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# --- Input Models ---


class TraceStep(BaseModel):
    """
    One observed UI action from a recorded test run.

    Numeric fields are strict: booleans and numeric strings are rejected,
    integers are accepted as floats.

    `category` decides how much of `duration` the user actually perceives;
    `complexity` drives the think-time and attention-loss multipliers. Any
    complexity string is accepted: unknown levels are scored with neutral
    multipliers rather than rejected.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Step identifier, not required to be unique.")
    duration: float = Field(
        ...,
        strict=True,
        allow_inf_nan=False,
        description="Raw physical elapsed time in ms.",
    )
    category: TimeClass = Field(
        ..., description="Perceptual class of the time spent in this step."
    )
    complexity: ComplexityLevel | str = Field(
        ..., description="One of 'low', 'medium' or 'high'; other values are neutral."
    )
    description: str | None = Field(
        default=None, description="Free-form annotation (pass-through)."
    )
    screenshot: str | None = Field(
        default=None, description="Screenshot path or URL (pass-through)."
    )


class PersonaConfig(_CamelModel):
    """
    Numeric model of a hypothetical user.

    Serialized with camelCase keys (`humanThinkTimeMs`, `personaFactor`,
    `expectationBias`); snake_case names are accepted on input as well.
    """

    id: str = Field(default=CUSTOM_PERSONA_ID, description="Persona identifier.")
    name: str = Field(default=CUSTOM_PERSONA_NAME, description="Display name.")
    human_think_time_ms: float = Field(
        ...,
        strict=True,
        allow_inf_nan=False,
        description="Baseline cognitive-processing time added per step. "
        "Lower is faster (expert), higher is slower (novice).",
    )
    persona_factor: float = Field(
        ...,
        strict=True,
        allow_inf_nan=False,
        description="Sensitivity to delay. > 1.0 amplifies pain, < 1.0 reduces it.",
    )
    expectation_bias: float = Field(
        ...,
        strict=True,
        allow_inf_nan=False,
        description="Performance expectation baseline. < 1.0 is demanding, "
        "> 1.0 is lenient.",
    )
    description: str | None = Field(default=None)


class PersonaOverride(_CamelModel):
    """A partial `PersonaConfig`: every field left unset keeps the default."""

    id: str | None = None
    name: str | None = None
    human_think_time_ms: float | None = Field(
        default=None, strict=True, allow_inf_nan=False
    )
    persona_factor: float | None = Field(
        default=None, strict=True, allow_inf_nan=False
    )
    expectation_bias: float | None = Field(
        default=None, strict=True, allow_inf_nan=False
    )
    description: str | None = None


# --- Evaluation Models ---


class Grade(StrEnum):
    EXCELLENT = "Excellent (S)"
    GOOD = "Good (A)"
    FAIR = "Fair (B)"
    POOR = "Poor (C)"


class StepBreakdown(BaseModel):
    """Per-step evaluation record. Millisecond values are rounded for display."""

    model_config = ConfigDict(frozen=True)

    step: str
    category: TimeClass
    complexity: ComplexityLevel | str
    original_ms: int
    think_time_ms: int
    base_perceived_ms: int
    final_pain_ms: int
    rule: str = Field(..., description="Human-readable formula that was applied.")
    screenshot: str | None = None


class ComplexityStats(_CamelModel):
    valid_steps: int = Field(
        ..., description="Steps not classified as tool overhead or diagnostic."
    )
    expected_time_ms: float = Field(
        ..., description="Time the persona is expected to tolerate for the sequence."
    )
    total_steps: int = Field(..., description="Total number of recorded steps.")
    breakpoints: int = Field(
        ...,
        description="Number of interruptions (diagnostic steps reporting an error).",
    )
    pain_ratio: float | None = Field(
        default=None,
        description="Total pain divided by expected time. "
        "None when the expected time is not positive.",
    )


class EvaluationResult(_CamelModel):
    """
    Aggregate and per-step outcome of an evaluation.

    `total_pain_score` is the sum of the rounded per-step `final_pain_ms`
    values and `breakdown` mirrors the input order one-to-one.
    """

    total_physical_time: float
    total_base_perceived_time: float
    total_pain_score: int
    persona_factor: float
    expectation_bias: float
    complexity: ComplexityStats
    score: Grade
    breakdown: list[StepBreakdown]
