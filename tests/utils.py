"""Test utilities and helper functions."""

from ux_eval.models import TimeClass, TraceStep


def create_step(
    duration: float,
    category: TimeClass = "perceived",
    complexity: str = "low",
    name: str = "step",
    description: str | None = None,
    screenshot: str | None = None,
) -> TraceStep:
    """Test helper to build a TraceStep with sensible defaults."""
    return TraceStep(
        name=name,
        duration=duration,
        category=category,
        complexity=complexity,
        description=description,
        screenshot=screenshot,
    )
