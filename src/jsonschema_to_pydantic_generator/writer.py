"""Filesystem writers for generated model modules."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

RUFF_TARGET_VERSION = "py312"

_GENERATED_RUFF_IGNORE_CODES: tuple[str, ...] = (
    "D100",
    "D101",
    "D102",
    "D103",
    "D205",
    "D301",
    "D415",
    "E501",
    "N801",
    "N802",
)


class WriteError(RuntimeError):
    """Raised when output files cannot be written."""


def write_module(output_path: Path, source: str) -> None:
    """Write a generated module, refusing to replace an existing file.

    Args:
        output_path (Path): Destination ``.py`` file.
        source (str): Rendered module source.
    """
    if output_path.exists():
        raise WriteError(f"Output file already exists: {output_path}")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(f"Failed to create directory {output_path.parent}: {exc}") from exc
    _write_file(output_path, source)
    logger.debug("Wrote %s", output_path)


def format_generated_module(*, module_path: Path) -> None:
    """Run Ruff auto-fixes and formatter against a generated module.

    Args:
        module_path (Path): Generated module to format.
    """
    target = ("--target-version", RUFF_TARGET_VERSION)
    _run_ruff(module_path=module_path, args=("format", *target, str(module_path)))
    _run_ruff(
        module_path=module_path,
        args=(
            "check",
            "--fix",
            *target,
            "--ignore",
            ",".join(_GENERATED_RUFF_IGNORE_CODES),
            str(module_path),
        ),
    )
    _run_ruff(module_path=module_path, args=("format", *target, str(module_path)))


def _run_ruff(*, module_path: Path, args: tuple[str, ...]) -> None:
    command = [sys.executable, "-m", "ruff", *args]
    command_desc = " ".join(args[:1])
    try:
        subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise WriteError(f"Failed to execute ruff {command_desc} for {module_path}: {exc}") from exc
    except subprocess.CalledProcessError as exc:
        error_text = exc.stderr.strip() or exc.stdout.strip() or str(exc)
        raise WriteError(f"ruff {command_desc} failed for {module_path}: {error_text}") from exc


def _write_file(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write file {path}: {exc}") from exc
