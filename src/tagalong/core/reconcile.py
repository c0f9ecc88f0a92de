"""Reconcile a GitHub release with its desired state."""

from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from tagalong.core.assets import SyncReport, sync_assets
from tagalong.core.config import TagalongConfig
from tagalong.core.github import GitHubClient
from tagalong.core.output import Reporter
from tagalong.core.resolver import ReconcileState, resolve_release
from tagalong.models.desired import DesiredState


@dataclass
class RunResult:
    """Everything a run did."""

    state: ReconcileState
    report: SyncReport

    @property
    def skipped(self) -> bool:
        return self.state.skipped

    def outputs(self) -> dict[str, str]:
        """Step outputs exposed to later workflow steps."""
        release = self.state.release
        return {
            "release_id": str(release.id) if release else "",
            "release_url": release.html_url if release else "",
            "upload_url": release.upload_url if release else "",
            "created": str(self.state.created).lower(),
            "skipped": str(self.skipped).lower(),
            "failed_assets": ";".join(self.report.failed),
        }


def write_outputs(path: Path | None, outputs: dict[str, str]) -> None:
    """Append step outputs to the GitHub Actions output file."""
    if path is None:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")


def reconcile(
    client: GitHubClient, repo: str, desired: DesiredState, log: Reporter
) -> RunResult:
    """Resolve the release, then attach the desired files to it.

    GitHubError from resolution and LocalFileError propagate. Asset upload
    and delete failures are collected in the report and never raise.
    """
    log.debug("Desired state", desired.to_dict())

    state = resolve_release(client, repo, desired, log)
    if state.skipped:
        return RunResult(state=state, report=SyncReport())

    report = sync_assets(client, repo, state, desired.files, log)
    if report.failed:
        log.warning(
            f"{len(report.failed)} asset(s) could not be uploaded: "
            + ", ".join(report.failed)
        )
    return RunResult(state=state, report=report)


def run(
    config: TagalongConfig,
    desired: DesiredState,
    log: Reporter,
    client: GitHubClient | None = None,
) -> RunResult:
    """Run a full reconcile against the configured repository."""
    log.info(
        f"Reconciling release [bold]{escape(desired.tag)}[/bold] in {escape(config.repo)}"
    )

    with client or GitHubClient(config.token, base_url=config.api_url) as gh:
        result = reconcile(gh, config.repo, desired, log)

    write_outputs(config.output_path, result.outputs())
    return result
