"""Attach local files to a resolved release."""

from dataclasses import dataclass, field

from rich.markup import escape

from tagalong.core.files import LocalFile, read_local_file
from tagalong.core.github import GitHubClient, GitHubError
from tagalong.core.output import Reporter
from tagalong.core.resolver import ReconcileState


@dataclass
class SyncReport:
    """Per-asset results of a synchronization."""

    uploaded: list[str] = field(default_factory=list)
    replaced: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def replace_existing(
    client: GitHubClient,
    repo: str,
    state: ReconcileState,
    name: str,
    report: SyncReport,
    log: Reporter,
) -> None:
    """Delete the asset called ``name`` if the release already carries it.

    A failed delete is only reported; the upload that follows is still
    attempted.
    """
    if state.created:
        return

    asset = state.release.find_asset(name)
    if asset is None:
        return

    log.info(f"Asset [cyan]{escape(name)}[/cyan] already exists, deleting it first.")
    log.debug("Asset options (delete)", {"repo": repo, "asset_id": asset.id})
    try:
        client.delete_asset(repo, asset.id)
    except GitHubError as e:
        log.warning(f"Failed to delete asset {name}: {e}")
        return
    report.replaced.append(name)


def upload_file(
    client: GitHubClient,
    state: ReconcileState,
    local: LocalFile,
    report: SyncReport,
    log: Reporter,
) -> None:
    """Upload one local file, reporting rather than raising on API failure."""
    log.info(f"Uploading [cyan]{escape(local.name)}[/cyan] ({local.size} bytes).")

    try:
        asset = client.upload_asset(
            state.release.upload_url,
            name=local.name,
            content_type=local.mime_type,
            size=local.size,
            content=local.content,
        )
    except GitHubError as e:
        log.warning(f"Failed to upload {local.name}: {e}")
        report.failed.append(local.name)
        return

    log.debug("Result from upload", asset)
    report.uploaded.append(local.name)


def sync_assets(
    client: GitHubClient,
    repo: str,
    state: ReconcileState,
    files: tuple[str, ...] | list[str],
    log: Reporter,
) -> SyncReport:
    """Ensure every file in ``files`` is attached to ``state.release``.

    Files are taken from the end of the list, so the last file is uploaded
    first. Same-named assets are deleted before upload unless the release was
    created by this run. Asset failures end up in the returned report; a
    file that cannot be read raises LocalFileError.
    """
    report = SyncReport()
    pending = list(files)

    while pending:
        local = read_local_file(pending.pop())
        replace_existing(client, repo, state, local.name, report, log)
        upload_file(client, state, local, report, log)

    return report
