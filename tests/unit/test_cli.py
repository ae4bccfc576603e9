"""
Unit tests for the CLI commands, called directly as functions.
"""

import json
import sys
from pathlib import Path

import pytest
from loguru import logger

from ux_eval import __version__
from ux_eval.cli import app, evaluate, persona, presets
from ux_eval.logging_config import setup_cli_logging

STEPS = [
    {
        "name": "open dashboard",
        "duration": 2500,
        "category": "perceived",
        "complexity": "high",
        "screenshot": "dash.png",
    },
    {
        "name": "screenshot tool",
        "duration": 4000,
        "category": "tool_overhead",
        "complexity": "low",
    },
]


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COLUMNS", "200")


@pytest.fixture
def steps_file(tmp_path: Path) -> Path:
    path = tmp_path / "trace.json"
    path.write_text(json.dumps(STEPS), encoding="utf-8")
    return path


@pytest.mark.unit
class TestPresetsCommand:
    def test_lists_presets(self, capsys: pytest.CaptureFixture[str]) -> None:
        presets()
        out = capsys.readouterr().out

        assert "XIAO_FANG" in out
        assert "xiao_diu" in out


@pytest.mark.unit
class TestPersonaCommand:
    def test_prints_resolved_overrides(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        persona('{"personaFactor": 2.0}')
        out = capsys.readouterr().out

        assert '"id": "custom_persona"' in out
        assert '"personaFactor": 2.0' in out
        assert '"humanThinkTimeMs": 1000.0' in out

    def test_describe(self, capsys: pytest.CaptureFixture[str]) -> None:
        persona("Calm novice", describe=True)
        out = capsys.readouterr().out

        assert '"humanThinkTimeMs": 2500.0' in out
        assert '"personaFactor": 1.0' in out

    def test_invalid_overrides_exit(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            persona('{"personaFactor": "very"}')
        assert exc_info.value.code == 1


@pytest.mark.unit
class TestEvaluateCommand:
    def test_writes_report_and_json(self, steps_file: Path, tmp_path: Path) -> None:
        report_path = tmp_path / "out" / "report.md"
        json_path = tmp_path / "out" / "result.json"

        evaluate(
            steps_file,
            persona="xiao_diu",
            report=report_path,
            json_output=json_path,
            target="Dashboard",
        )

        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["totalPhysicalTime"] == 6500
        assert data["complexity"]["validSteps"] == 1
        assert data["breakdown"][1]["rule"] == "Exclude"

        report = report_path.read_text(encoding="utf-8")
        assert "**Test Target**: Dashboard" in report
        assert "Novice PM (Xiao Diu)" in report

    def test_persona_file_and_language(self, steps_file: Path, tmp_path: Path) -> None:
        persona_path = tmp_path / "persona.json"
        persona_path.write_text(json.dumps({"name": "Tester", "personaFactor": 1.0}))
        report_path = tmp_path / "report.md"

        evaluate(
            steps_file,
            persona_file=persona_path,
            report=report_path,
            language="zh",
        )

        report = report_path.read_text(encoding="utf-8")
        assert report.startswith("# UX 体验测试报告")
        assert "**用户画像**: Tester" in report

    def test_prints_summary(
        self, steps_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        evaluate(steps_file)
        out = capsys.readouterr().out

        assert "UX Evaluation Summary" in out
        assert "open dashboard" in out

    def test_bracketed_user_text_is_printed_literally(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "trace.json"
        path.write_text(
            json.dumps(
                [
                    {**STEPS[0], "name": "open [/settings] page"},
                    {**STEPS[1], "name": "[bold]raw[/bold]", "complexity": "[x]"},
                ]
            ),
            encoding="utf-8",
        )
        persona_path = tmp_path / "persona.json"
        persona_path.write_text(json.dumps({"name": "QA [lead]"}))

        evaluate(path, persona_file=persona_path)
        out = capsys.readouterr().out

        assert "open [/settings] page" in out
        assert "[bold]raw[/bold]" in out
        assert "[x]" in out
        assert "QA [lead]" in out

    def test_missing_trace_file_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            evaluate(tmp_path / "missing.json")
        assert exc_info.value.code == 1

    def test_missing_persona_file_exits(self, steps_file: Path, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            evaluate(steps_file, persona_file=tmp_path / "missing.json")
        assert exc_info.value.code == 1

    def test_malformed_trace_exits(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"name": "x", "duration": "slow"}]))

        with pytest.raises(SystemExit) as exc_info:
            evaluate(path)
        assert exc_info.value.code == 1

    def test_undecodable_trace_exits(self, tmp_path: Path) -> None:
        path = tmp_path / "trace.json"
        path.write_bytes(b"\xff")

        with pytest.raises(SystemExit) as exc_info:
            evaluate(path)
        assert exc_info.value.code == 1

    def test_undecodable_persona_file_exits(
        self, steps_file: Path, tmp_path: Path
    ) -> None:
        persona_path = tmp_path / "persona.json"
        persona_path.write_bytes(b"\xff")

        with pytest.raises(SystemExit) as exc_info:
            evaluate(steps_file, persona_file=persona_path)
        assert exc_info.value.code == 1

    def test_log_options_add_file_sink(self, steps_file: Path, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "eval.log"
        try:
            evaluate(steps_file, log_level="ERROR", log_file=log_file)
            logger.complete()
        finally:
            logger.remove()
            logger.add(sys.stderr)

        messages = [
            json.loads(line)["record"]["message"]
            for line in log_file.read_text(encoding="utf-8").splitlines()
        ]
        assert any(m.startswith("Evaluating 2 step(s)") for m in messages)

@pytest.mark.unit
class TestLoggingConfig:
    def test_file_sink_receives_debug_records(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "run.log"
        try:
            setup_cli_logging("WARNING", log_file=log_file)
            logger.debug("persona resolution trace")
            logger.complete()
        finally:
            logger.remove()
            logger.add(sys.stderr)

        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert record["record"]["message"] == "persona resolution trace"
        assert record["record"]["level"]["name"] == "DEBUG"


@pytest.mark.unit
class TestVersion:
    def test_app_reports_package_version(self) -> None:
        assert app.version == __version__
        assert __version__
