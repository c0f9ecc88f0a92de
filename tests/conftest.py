"""Shared fixtures for tagalong tests."""

from __future__ import annotations

import io
import typing as typ
from pathlib import Path

import pytest
from rich.console import Console

from tagalong.core.output import Reporter


@pytest.fixture(name="out")
def fixture_out() -> io.StringIO:
    """Buffer receiving everything the reporter prints."""
    return io.StringIO()


@pytest.fixture(name="log")
def fixture_log(out: io.StringIO) -> Reporter:
    """Verbose reporter writing plain text into ``out``."""
    console = Console(file=out, width=200, color_system=None)
    return Reporter(verbose=True, console=console, err_console=console, annotate=False)


@pytest.fixture(name="write_files")
def fixture_write_files(tmp_path: Path) -> typ.Callable[..., tuple[str, ...]]:
    """Create local files and return their paths in the given order."""

    def write(*names: str) -> tuple[str, ...]:
        paths = []
        for name in names:
            path = tmp_path / name
            path.write_bytes(f"content of {name}".encode())
            paths.append(str(path))
        return tuple(paths)

    return write
