import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ux_eval.exceptions import InvalidInputError
from ux_eval.models import TraceStep

_TRACE_STEP_ADAPTER = TypeAdapter(TraceStep)


def iter_lines_from_jsonl_file(file_path: Path) -> Iterator[tuple[int, str]]:
    """Yields (line_num, line) for each non-empty line of a JSONL file."""
    with file_path.open("r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            yield line_num, line


def _validate_steps(
    items: Iterable[tuple[str, Any]], file_path: Path
) -> list[TraceStep]:
    steps: list[TraceStep] = []
    for location, data in items:
        try:
            steps.append(_TRACE_STEP_ADAPTER.validate_python(data))
        except ValidationError as e:
            raise InvalidInputError.from_validation_error(
                f"trace step in {file_path.name} {location}", e
            ) from e
    return steps


def load_steps(steps_path: Path) -> list[TraceStep]:
    """Loads trace steps from a JSON or JSONL file.

    A `.jsonl` file holds one step per non-empty line. Any other file is read
    as JSON: either a list of steps or an object with a `steps` list.

    Raises:
        InvalidInputError: If the file cannot be read as UTF-8, the content is
            not valid JSON or a step is malformed.
    """
    if steps_path.suffix == ".jsonl":
        items: list[tuple[str, Any]] = []
        try:
            for line_num, line in iter_lines_from_jsonl_file(steps_path):
                try:
                    items.append((f"line {line_num}", json.loads(line)))
                except json.JSONDecodeError as e:
                    raise InvalidInputError(
                        f"Invalid JSON in {steps_path.name} line {line_num}: {e}"
                    ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise _unreadable(steps_path, e) from e
        return _validate_steps(items, steps_path)

    data = _load_json(steps_path)
    if isinstance(data, dict) and "steps" in data:
        data = data["steps"]
    if not isinstance(data, list):
        raise InvalidInputError(
            f"Expected a list of steps (or an object with 'steps') in {steps_path.name}"
        )
    return _validate_steps(
        ((f"item {index}", item) for index, item in enumerate(data)), steps_path
    )


def load_persona_file(persona_path: Path) -> dict[str, Any]:
    """Loads a persona mapping (full config or partial overrides) from JSON."""
    data = _load_json(persona_path)
    if not isinstance(data, dict):
        raise InvalidInputError(f"Expected a JSON object in {persona_path.name}")
    return data


def _unreadable(path: Path, error: Exception) -> InvalidInputError:
    return InvalidInputError(f"Cannot read {path.name} as UTF-8 text: {error}")


def _load_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise _unreadable(path, e) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"Invalid JSON in {path.name}: {e}") from e
