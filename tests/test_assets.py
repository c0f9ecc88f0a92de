"""Tests for asset synchronization."""

from __future__ import annotations

import httpx
import pytest

from tagalong.core.assets import sync_assets
from tagalong.core.files import LocalFileError
from tagalong.core.github import GitHubClient
from tagalong.core.output import Reporter
from tagalong.core.resolver import Outcome, ReconcileState
from tagalong.models.desired import DesiredState

from ._fakes import REPO, FakeGitHub, make_release


def _state(release, *, created: bool) -> ReconcileState:
    return ReconcileState(
        desired=DesiredState(tag=release.tag_name),
        outcome=Outcome.CREATE_FRESH if created else Outcome.UPDATE,
        release=release,
        created=created,
    )


def test_files_upload_last_to_first(log: Reporter, write_files) -> None:
    """The last listed file is uploaded first and each file exactly once."""
    release = make_release(1)
    client = FakeGitHub([release])
    files = write_files("a.zip", "b.txt", "c.json")

    report = sync_assets(client, REPO, _state(release, created=True), files, log)

    uploads = [c[1] for c in client.calls if c[0] == "upload"]
    assert uploads == ["c.json", "b.txt", "a.zip"]
    assert report.uploaded == uploads
    assert report.ok


def test_upload_sends_mime_type_and_size(log: Reporter, write_files) -> None:
    """Detected mime type and byte size go with each upload."""
    release = make_release(1)
    client = FakeGitHub([release])
    (path,) = write_files("notes.txt")

    sync_assets(client, REPO, _state(release, created=True), [path], log)

    assert client.calls == [("upload", "notes.txt", "text/plain", len(b"content of notes.txt"))]


def test_fresh_release_skips_replacement(log: Reporter, write_files) -> None:
    """No delete is attempted on a release created in the same run."""
    release = make_release(1, assets=["a.zip"])
    client = FakeGitHub([release])
    files = write_files("a.zip")

    sync_assets(client, REPO, _state(release, created=True), files, log)

    assert [c[0] for c in client.calls] == ["upload"]


def test_existing_assets_are_replaced(log: Reporter, write_files) -> None:
    """M same-named assets get M deletes, each before its own upload."""
    release = make_release(1, draft=True, assets=["a.zip", "c.json", "old.bin"])
    client = FakeGitHub([release])
    files = write_files("a.zip", "b.txt", "c.json")

    report = sync_assets(client, REPO, _state(release, created=False), files, log)

    assert [c[:2] for c in client.calls] == [
        ("delete", 101),
        ("upload", "c.json"),
        ("upload", "b.txt"),
        ("delete", 100),
        ("upload", "a.zip"),
    ]
    assert report.replaced == ["c.json", "a.zip"]
    assert sorted(a.name for a in release.assets) == ["a.zip", "b.txt", "c.json", "old.bin"]


def test_second_run_yields_same_asset_set(log: Reporter, write_files) -> None:
    """Running twice leaves one asset per name."""
    release = make_release(1, draft=True)
    client = FakeGitHub([release])
    files = write_files("a.zip", "b.txt")

    sync_assets(client, REPO, _state(release, created=True), files, log)
    first = sorted(a.name for a in release.assets)
    report = sync_assets(client, REPO, _state(release, created=False), files, log)

    assert sorted(a.name for a in release.assets) == first == ["a.zip", "b.txt"]
    assert report.ok


def test_upload_failure_is_logged_and_skipped(log: Reporter, out, write_files) -> None:
    """A failed upload is reported and the next file is still processed."""
    release = make_release(1)
    client = FakeGitHub([release])
    client.fail_uploads.add("b.txt")
    files = write_files("a.zip", "b.txt")

    report = sync_assets(client, REPO, _state(release, created=True), files, log)

    assert report.failed == ["b.txt"]
    assert report.uploaded == ["a.zip"]
    assert "Failed to upload b.txt" in out.getvalue()


def test_delete_failure_still_attempts_upload(log: Reporter, out, write_files) -> None:
    """A failed delete is a warning; the upload is tried and its rejection recorded."""
    release = make_release(1, draft=True, assets=["a.zip"])
    client = FakeGitHub([release])
    client.fail_deletes.add(100)
    files = write_files("a.zip")

    report = sync_assets(client, REPO, _state(release, created=False), files, log)

    assert [c[0] for c in client.calls] == ["delete", "upload"]
    assert report.replaced == []
    assert report.failed == ["a.zip"]
    assert "Failed to delete asset a.zip" in out.getvalue()


def test_missing_file_raises(log: Reporter, tmp_path) -> None:
    """A file that cannot be read stops the run."""
    release = make_release(1)
    client = FakeGitHub([release])

    with pytest.raises(LocalFileError, match="missing.zip"):
        sync_assets(
            client, REPO, _state(release, created=True), [str(tmp_path / "missing.zip")], log
        )

    assert client.calls == []


def test_unreadable_upload_response_does_not_stop_sync(log: Reporter, out, write_files) -> None:
    """An upload answered with a body that is not an asset counts as failed."""
    release = make_release(1)
    client = GitHubClient(
        "secret",
        transport=httpx.MockTransport(lambda request: httpx.Response(201, text="<html>oops</html>")),
    )
    files = write_files("a.zip", "b.txt")

    with client:
        report = sync_assets(client, REPO, _state(release, created=True), files, log)

    assert report.failed == ["b.txt", "a.zip"]
    assert report.uploaded == []
    assert "Failed to upload b.txt" in out.getvalue()
