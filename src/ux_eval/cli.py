from pathlib import Path
from typing import Annotated, Literal

import cyclopts
from cyclopts import Parameter
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ux_eval import __version__
from ux_eval.config import settings
from ux_eval.evaluation import evaluate as evaluate_trace
from ux_eval.exceptions import InvalidInputError
from ux_eval.logging_config import setup_cli_logging
from ux_eval.models import EvaluationResult, PersonaConfig
from ux_eval.persona import (
    PERSONA_PRESETS,
    parse_persona_argument,
    persona_from_description,
    resolve_persona,
)
from ux_eval.report import painful_steps, render_report
from ux_eval.utils import load_persona_file, load_steps

app = cyclopts.App(
    help="ux-eval: Perceived-time and pain scoring for recorded UI traces.",
    version=__version__,
)


def _resolve_cli_persona(
    persona: str | None, persona_file: Path | None
) -> PersonaConfig:
    if persona_file is not None:
        if not persona_file.exists():
            logger.error(f"❌ Error: Persona file not found at '{persona_file}'.")
            raise SystemExit(1)
        return resolve_persona(load_persona_file(persona_file))
    return resolve_persona(parse_persona_argument(persona or settings.default_persona))


def _print_evaluation_summary(
    result: EvaluationResult,
    persona: PersonaConfig,
    steps_file: Path | None = None,
) -> None:
    """Print a summary of the evaluation result using Rich."""
    console = Console()

    summary_table = Table(title="🎯 UX Evaluation Summary", show_header=False)
    summary_table.add_column("Field", style="bold cyan", width=22)
    summary_table.add_column("Value", style="white")

    if steps_file:
        summary_table.add_row("Trace File:", Text(str(steps_file)))
    summary_table.add_row("Persona:", Text(f"{persona.name} ({persona.id})"))
    summary_table.add_row("Score:", f"[bold]{result.score}[/bold]")
    summary_table.add_row(
        "Physical Time:", f"{result.total_physical_time / 1000:.2f}s"
    )
    summary_table.add_row(
        "Perceived Time:", f"{result.total_base_perceived_time / 1000:.2f}s"
    )
    summary_table.add_row("Pain Score:", f"{result.total_pain_score / 1000:.2f}s")
    summary_table.add_row(
        "Expected Time:", f"{result.complexity.expected_time_ms / 1000:.2f}s"
    )
    summary_table.add_row(
        "Steps (valid/total):",
        f"{result.complexity.valid_steps}/{result.complexity.total_steps}",
    )
    summary_table.add_row("Breakpoints:", str(result.complexity.breakpoints))

    steps_table = Table(title="📋 Step Breakdown", show_header=True)
    steps_table.add_column("Step", style="bold")
    steps_table.add_column("Category")
    steps_table.add_column("Complexity")
    steps_table.add_column("Physical (ms)", justify="right")
    steps_table.add_column("Perceived (ms)", justify="right")
    steps_table.add_column("Pain (ms)", justify="right")
    steps_table.add_column("Rule", style="dim")

    flagged = painful_steps(result)
    for entry in result.breakdown:
        pain = str(entry.final_pain_ms)
        if entry in flagged:
            pain = f"[bold red]{pain}[/bold red]"
        steps_table.add_row(
            Text(entry.step),
            entry.category,
            Text(entry.complexity),
            str(entry.original_ms),
            str(entry.base_perceived_ms),
            pain,
            Text(entry.rule),
        )

    console.print()
    console.print(Panel(summary_table, expand=False))
    console.print()
    console.print(Panel(steps_table, expand=False))
    console.print()


# --- Main CLI Commands ---


@app.command
def presets() -> None:
    """List the built-in persona presets."""
    console = Console()

    table = Table(title="Persona Presets", show_header=True)
    table.add_column("Key", style="bold cyan")
    table.add_column("ID", style="magenta")
    table.add_column("Name")
    table.add_column("Think Time (ms)", justify="right")
    table.add_column("Persona Factor", justify="right")
    table.add_column("Expectation Bias", justify="right")

    for key, preset in PERSONA_PRESETS.items():
        table.add_row(
            key,
            Text(preset.id),
            Text(preset.name),
            f"{preset.human_think_time_ms:g}",
            f"{preset.persona_factor:g}",
            f"{preset.expectation_bias:g}",
        )

    console.print(table)


@app.command
def persona(
    persona_input: str,
    *,
    describe: Annotated[
        bool,
        Parameter(
            help="Treat the input as a natural-language description "
            "(e.g. 'Industry Expert - Slightly Grumpy') instead of a preset id "
            "or JSON overrides.",
        ),
    ] = False,
) -> None:
    """
    Resolve a persona and print it as JSON.

    Args:
        persona_input: A preset id or key, a JSON object of overrides, or a
            description when --describe is given.
        describe: Decompose the input as a natural-language description.
    """
    console = Console()
    try:
        if describe:
            resolved = persona_from_description(persona_input)
        else:
            resolved = resolve_persona(parse_persona_argument(persona_input))
    except InvalidInputError as e:
        logger.error(f"❌ Error resolving persona: {e}")
        raise SystemExit(1) from e

    console.print_json(resolved.model_dump_json(by_alias=True))


@app.command
def evaluate(
    steps_file: Path,
    *,
    persona: Annotated[
        str | None,
        Parameter(
            help="Preset id/key or JSON overrides. "
            "Defaults to the configured default persona.",
        ),
    ] = None,
    persona_file: Annotated[
        Path | None,
        Parameter(help="JSON file with a persona config or partial overrides."),
    ] = None,
    report: Annotated[
        Path | None, Parameter(help="Write the Markdown report to this file.")
    ] = None,
    json_output: Annotated[
        Path | None, Parameter(help="Write the evaluation result as JSON.")
    ] = None,
    language: Literal["en", "zh"] | None = None,
    target: str | None = None,
    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None,
        Parameter(help="Console log level. Defaults to the configured level."),
    ] = None,
    log_file: Annotated[
        Path | None,
        Parameter(help="Also write DEBUG-level JSON log records to this file."),
    ] = None,
) -> None:
    """
    Evaluate a recorded trace and print the perceived pain summary.

    Steps are read from a JSON file (a list, or an object with a `steps` key)
    or a JSONL file with one step per line.
    """
    if log_level is not None or log_file is not None:
        setup_cli_logging(log_level, log_file)

    if not steps_file.exists():
        logger.error(f"❌ Error: Trace file not found at '{steps_file}'.")
        raise SystemExit(1)

    try:
        steps = load_steps(steps_file)
        resolved = _resolve_cli_persona(persona, persona_file)
        logger.info(
            f"Evaluating {len(steps)} step(s) from '{steps_file}' "
            f"as persona '{resolved.id}'."
        )
        result = evaluate_trace(steps, resolved)
        markdown = render_report(
            result,
            resolved,
            language=language or settings.report_language,
            target=target,
        )
    except InvalidInputError as e:
        logger.error(f"❌ Error: {e}")
        raise SystemExit(1) from e

    _print_evaluation_summary(result, resolved, steps_file)

    if json_output:
        json_output.parent.mkdir(parents=True, exist_ok=True)
        json_output.write_text(
            result.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8"
        )
        logger.info(f"Evaluation result saved to: {json_output}")

    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(markdown, encoding="utf-8")
        logger.info(f"Report saved to: {report}")

    logger.success(f"✅ Evaluation complete: {result.score}")


def main() -> None:
    setup_cli_logging()
    app()


if __name__ == "__main__":
    main()
