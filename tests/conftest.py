"""Shared test fixtures and utilities."""

import pytest

from ux_eval.models import PersonaConfig, TraceStep
from ux_eval.persona import PERSONA_PRESETS

from .utils import create_step


@pytest.fixture
def expert_persona() -> PersonaConfig:
    """The default expert/impatient preset."""
    return PERSONA_PRESETS["XIAO_FANG"]


@pytest.fixture
def novice_persona() -> PersonaConfig:
    return PERSONA_PRESETS["XIAO_DIU"]


@pytest.fixture
def neutral_persona() -> PersonaConfig:
    """A persona whose multipliers leave durations untouched."""
    return PersonaConfig(
        id="neutral",
        name="Neutral",
        human_think_time_ms=0,
        persona_factor=1.0,
        expectation_bias=1.0,
    )


@pytest.fixture
def sample_trace() -> list[TraceStep]:
    """A small checkout flow touching every category."""
    return [
        create_step(
            1200, "perceived", "medium", name="open checkout", screenshot="s1.png"
        ),
        create_step(5000, "partially_perceived", "high", name="upload receipt"),
        create_step(800, "non_perceived", "low", name="prefetch"),
        create_step(3000, "tool_overhead", "low", name="take screenshot"),
        create_step(
            150,
            "diagnostic",
            "low",
            name="console check",
            description="network error occurred",
        ),
    ]
