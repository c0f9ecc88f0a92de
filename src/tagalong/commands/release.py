"""Release command implementation."""

from pathlib import Path

import click

from tagalong.core.config import (
    ConfigError,
    TagalongConfig,
    build_desired_state,
    load_manifest,
)
from tagalong.core.files import LocalFileError, parse_file_list
from tagalong.core.github import GitHubError
from tagalong.core.output import Reporter
from tagalong.core.reconcile import run
from tagalong.models.desired import DesiredState

# Every option can also be given as a GitHub Action input (INPUT_*)
_OPTIONS = [
    click.option("--token", envvar=["INPUT_TOKEN", "GITHUB_TOKEN"], help="GitHub token"),
    click.option(
        "--repo",
        envvar=["INPUT_REPO", "GITHUB_REPOSITORY"],
        help="Repository in owner/repo format",
    ),
    click.option("--tag", envvar="INPUT_TAG", help="Tag of the release"),
    click.option("--name", envvar="INPUT_NAME", help="Release title (defaults to the tag)"),
    click.option("--body", envvar="INPUT_BODY", help="Release notes"),
    click.option("--commit", envvar="INPUT_COMMIT", help="Commitish the tag points at"),
    click.option("--draft", envvar="INPUT_DRAFT", type=click.BOOL, help="Draft release"),
    click.option(
        "--prerelease", envvar="INPUT_PRERELEASE", type=click.BOOL, help="Prerelease"
    ),
    click.option(
        "--files", envvar="INPUT_FILES", help="Files to attach, separated by ';'"
    ),
    click.option(
        "--manifest",
        envvar="INPUT_MANIFEST",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML file describing the release",
    ),
    click.option(
        "--verbose", "-v", envvar="INPUT_VERBOSE", is_flag=True, help="Show diagnostics"
    ),
]


def release_options(func):
    """Attach the shared release options to a command."""
    for option in reversed(_OPTIONS):
        func = option(func)
    return func


def load_inputs(
    log: Reporter,
    token: str | None,
    repo: str | None,
    manifest: Path | None,
    **fields,
) -> tuple[TagalongConfig, DesiredState]:
    """Build the run configuration, exiting on invalid input."""
    files = parse_file_list(fields.pop("files", None))
    fields["files"] = files or None

    try:
        config = TagalongConfig.from_env(token=token, repo=repo)
        desired = build_desired_state(
            fields, load_manifest(manifest) if manifest else None
        )
    except ConfigError as e:
        log.error(str(e))
        raise SystemExit(1)

    return config, desired


@click.command()
@release_options
def release(
    token: str | None,
    repo: str | None,
    manifest: Path | None,
    verbose: bool,
    **fields,
):
    """Create or update a GitHub release and upload its assets.

    An existing published release is left untouched unless a draft is
    requested, in which case a new draft is created next to it. Assets with
    the same name as an uploaded file are replaced.
    """
    log = Reporter(verbose=verbose)
    config, desired = load_inputs(log, token, repo, manifest, **fields)

    try:
        result = run(config, desired, log)
    except (GitHubError, LocalFileError) as e:
        log.error(str(e))
        raise SystemExit(1)
    except Exception as e:
        log.error(f"Unexpected error: {type(e).__name__}: {e}")
        raise SystemExit(1) from e

    if result.skipped:
        log.info("Nothing to do.")
    elif result.report.failed:
        log.info("[yellow]Finished with asset failures, see warnings above.[/yellow]")
    else:
        log.info("[green]✓[/green] All is nominal. Execution has ended.")
