"""Integration tests for generator behavior."""

from __future__ import annotations

import ast
import json
import subprocess
import sys
from pathlib import Path

import pytest

from jsonschema_to_pydantic_generator.cli import main
from jsonschema_to_pydantic_generator.config import Visibility
from jsonschema_to_pydantic_generator.generator import (
    SchemaLoadError,
    SchemaSource,
    WriteError,
    load_source,
    run_generation,
)
from jsonschema_to_pydantic_generator.module_loading import load_module_from_path

from .fixture_helpers import fixture_dir, iter_fixture_paths, parametrize_fixtures

_INLINE_SCHEMA = json.dumps(
    {
        "title": "Inline Event",
        "type": "object",
        "properties": {
            "eventId": {"type": "string"},
            "attendees": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["eventId"],
    }
)


def _skip_formatting(monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    formatted: list[Path] = []

    def _fake_format(*, module_path: Path) -> None:
        formatted.append(module_path)

    monkeypatch.setattr(
        "jsonschema_to_pydantic_generator.generator.format_generated_module",
        _fake_format,
    )
    return formatted


@parametrize_fixtures()
def test_generation_smoke(
    fixture_path: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Each fixture should generate a parseable module without crashing."""
    _skip_formatting(monkeypatch)
    output_path = tmp_path / f"{fixture_path.stem}_models.py"
    run = run_generation(source=SchemaSource(path=fixture_path), output_path=output_path)

    assert run.output_path == output_path
    assert run.top_level_name == run.definition_names[-1]
    assert ast.parse(output_path.read_text(encoding="utf-8"))


def test_inline_schema_generation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Inline schema text generates an importable module."""
    _skip_formatting(monkeypatch)
    output_path = tmp_path / "nested" / "inline_event.py"
    run = run_generation(
        source=SchemaSource(text=_INLINE_SCHEMA),
        output_path=output_path,
        visibility=Visibility.PUBLIC,
    )
    assert run.top_level_name == "InlineEvent"

    module = load_module_from_path(module_name="inline_event_models", module_path=output_path)
    assert module.__all__ == ["InlineEvent"]
    event = module.InlineEvent.from_json('{"eventId": "e1"}')
    assert event.event_id == "e1"
    assert event.attendees is None


def test_output_file_must_not_exist(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Generator refuses to overwrite an existing module."""
    _skip_formatting(monkeypatch)
    output_path = tmp_path / "existing.py"
    output_path.write_text("# keep\n", encoding="utf-8")

    with pytest.raises(WriteError):
        run_generation(source=SchemaSource(text=_INLINE_SCHEMA), output_path=output_path)
    assert output_path.read_text(encoding="utf-8") == "# keep\n"


def test_generation_invokes_ruff_formatting(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Generation should run ruff formatting on the emitted module unless disabled."""
    formatted = _skip_formatting(monkeypatch)
    output_path = tmp_path / "formatted.py"
    run = run_generation(source=SchemaSource(text=_INLINE_SCHEMA), output_path=output_path)
    assert formatted == [output_path]
    assert run.formatted

    unformatted = run_generation(
        source=SchemaSource(text=_INLINE_SCHEMA),
        output_path=tmp_path / "unformatted.py",
        format_output=False,
    )
    assert formatted == [output_path]
    assert not unformatted.formatted


def test_debug_dumps_source_to_stderr(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Debug generation prints the module it writes."""
    _skip_formatting(monkeypatch)
    output_path = tmp_path / "debug.py"
    run_generation(source=SchemaSource(text=_INLINE_SCHEMA), output_path=output_path, debug=True)
    assert capsys.readouterr().err == output_path.read_text(encoding="utf-8")


def test_source_must_name_exactly_one_origin() -> None:
    """A schema source needs exactly one of text, path or URL."""
    with pytest.raises(SchemaLoadError):
        load_source(SchemaSource())
    with pytest.raises(SchemaLoadError):
        load_source(SchemaSource(text=_INLINE_SCHEMA, url="https://example.com/schema.json"))


def test_cli_help_screen() -> None:
    """Running the CLI help should succeed and print usage information."""
    result = subprocess.run(
        [sys.executable, "-m", "jsonschema_to_pydantic_generator", "--help"],
        check=False,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()


def test_cli_generates_module(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """The CLI writes the module and reports the top-level type."""
    _skip_formatting(monkeypatch)
    output_path = tmp_path / "address.py"
    exit_code = main(
        [
            "--input",
            str(fixture_dir() / "address.yaml"),
            "--output",
            str(output_path),
            "--ident",
            "PostalAddress",
            "--public",
        ]
    )
    assert exit_code == 0
    assert "Generated PostalAddress" in capsys.readouterr().out
    assert "class PostalAddress(BaseModel):" in output_path.read_text(encoding="utf-8")


def test_cli_reports_schema_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Compilation failures exit with a usage error instead of a traceback."""
    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "--schema",
                '{"title": "Flat", "type": "string"}',
                "--output",
                str(tmp_path / "flat.py"),
            ]
        )
    assert excinfo.value.code == 2
    assert "top-level schema must be of type `object`" in capsys.readouterr().err
    assert not (tmp_path / "flat.py").exists()


def test_generated_modules_pass_ruff_check(tmp_path: Path) -> None:
    """Generated modules should pass ruff checks after formatting."""
    for fixture_path in iter_fixture_paths():
        output_path = tmp_path / f"{fixture_path.stem}_models.py"
        run_generation(
            source=SchemaSource(path=fixture_path),
            output_path=output_path,
            visibility=Visibility.PUBLIC,
            validate=True,
        )

        lint = subprocess.run(
            [
                sys.executable,
                "-m",
                "ruff",
                "check",
                "--target-version",
                "py312",
                "--ignore",
                "D100,D101,D102,D103,D205,D301,D415,E501,N801,N802",
                str(output_path),
            ],
            check=False,
            capture_output=True,
            text=True,
        )
        details = f"{lint.stdout}\n{lint.stderr}".strip()
        assert lint.returncode == 0, details
