"""Plan command implementation."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tagalong.commands.release import load_inputs, release_options
from tagalong.core.files import detect_mime
from tagalong.core.github import GitHubClient, GitHubError
from tagalong.core.output import Reporter
from tagalong.core.resolver import Outcome, plan_release

console = Console()

_DESCRIPTIONS = {
    Outcome.SKIP: "leave the published release untouched",
    Outcome.UPDATE: "update release {id} in place",
    Outcome.CREATE_ALONGSIDE: "create a new draft next to published release {id}",
    Outcome.CREATE_FRESH: "create a new release",
}


@click.command()
@release_options
def plan(
    token: str | None,
    repo: str | None,
    manifest: Path | None,
    verbose: bool,
    **fields,
):
    """Show what 'release' would do, without changing anything."""
    log = Reporter(verbose=verbose, console=console)
    config, desired = load_inputs(log, token, repo, manifest, **fields)

    with GitHubClient(config.token, base_url=config.api_url) as client:
        try:
            outcome, target = plan_release(client, config.repo, desired, log)
        except GitHubError as e:
            log.error(str(e))
            raise SystemExit(1)

    description = _DESCRIPTIONS[outcome].format(id=target.id if target else "")
    console.print(f"[blue]Release {escape(desired.tag)}:[/blue] {description}")

    if outcome is Outcome.SKIP or not desired.files:
        raise SystemExit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Order")
    table.add_column("Asset")
    table.add_column("Type")
    table.add_column("Action")

    # Uploads run from the last file to the first
    for order, path in enumerate(reversed(desired.files), start=1):
        name = Path(path).name
        replaces = outcome is Outcome.UPDATE and target.find_asset(name) is not None
        table.add_row(
            str(order),
            name,
            detect_mime(path),
            "replace" if replaces else "upload",
        )

    console.print(table)
