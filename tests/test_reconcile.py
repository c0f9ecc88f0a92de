"""Tests for a full reconcile run."""

from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console

from tagalong.core.config import TagalongConfig
from tagalong.core.output import Reporter
from tagalong.core.reconcile import reconcile, run, write_outputs
from tagalong.models.desired import DesiredState

from ._fakes import REPO, FakeGitHub, make_release


def test_skip_produces_empty_report(log: Reporter) -> None:
    client = FakeGitHub([make_release(3, "v1.0")])

    result = reconcile(client, REPO, DesiredState(tag="v1.0", files=("x",)), log)

    assert result.skipped
    assert result.report.uploaded == []
    assert result.outputs()["skipped"] == "true"
    assert result.outputs()["release_id"] == ""


def test_failures_are_summarised(log: Reporter, out: io.StringIO, write_files) -> None:
    client = FakeGitHub()
    client.fail_uploads.update({"a.zip", "b.txt"})
    files = write_files("a.zip", "b.txt")

    result = reconcile(client, REPO, DesiredState(tag="v1.0", files=files), log)

    assert result.report.failed == ["b.txt", "a.zip"]
    assert result.outputs()["failed_assets"] == "b.txt;a.zip"
    assert "2 asset(s) could not be uploaded: b.txt, a.zip" in out.getvalue()


def test_run_closes_client_and_writes_outputs(
    log: Reporter, tmp_path: Path, write_files
) -> None:
    client = FakeGitHub()
    output = tmp_path / "out" / "github_output"
    config = TagalongConfig(token="t", repo=REPO, output_path=output)
    files = write_files("a.zip")

    result = run(config, DesiredState(tag="v1.0", files=files), log, client=client)

    assert client.calls[-1] == ("close",)
    assert result.state.created is True
    assert "created=true" in output.read_text().splitlines()


def test_write_outputs_appends(tmp_path: Path) -> None:
    path = tmp_path / "github_output"
    path.write_text("previous=1\n")

    write_outputs(path, {"a": "1", "b": ""})

    assert path.read_text() == "previous=1\na=1\nb=\n"


def test_write_outputs_without_path() -> None:
    write_outputs(None, {"a": "1"})


def test_quiet_reporter_hides_debug() -> None:
    """Debug lines only show in verbose mode; warnings always do."""
    out = io.StringIO()
    console = Console(file=out, width=200, color_system=None)
    log = Reporter(verbose=False, console=console, err_console=console, annotate=False)

    log.debug("hidden detail", {"x": 1})
    log.info("shown")
    log.warning("careful [here]")

    text = out.getvalue()
    assert "hidden detail" not in text
    assert "shown" in text
    assert "Warning: careful [here]" in text


def test_annotating_reporter() -> None:
    out = io.StringIO()
    console = Console(file=out, width=200, color_system=None)
    log = Reporter(console=console, err_console=console, annotate=True)

    log.error("it broke")

    assert out.getvalue().strip() == "::error::it broke"


def test_annotations_keep_to_one_line() -> None:
    """Line breaks and percent signs are encoded inside workflow commands."""
    out = io.StringIO()
    console = Console(file=out, width=200, color_system=None)
    log = Reporter(console=console, err_console=console, annotate=True)

    log.warning("Uploading a.zip: HTTP 502 <html>\r\n<h1>100% down</h1>\n</html>")

    assert out.getvalue() == (
        "::warning::Uploading a.zip: HTTP 502 <html>%0D%0A<h1>100%25 down</h1>%0A</html>\n"
    )
