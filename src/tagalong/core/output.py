"""Console reporting for a reconcile run."""

import os

from rich.console import Console
from rich.markup import escape
from rich.pretty import Pretty


def running_in_actions() -> bool:
    """Whether the process runs inside a GitHub Actions job."""
    return os.environ.get("GITHUB_ACTIONS") == "true"


def escape_command_data(text: str) -> str:
    """Encode ``text`` for use as the message of a workflow command."""
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class Reporter:
    """Prints progress, diagnostics and problems.

    ``debug`` output only appears in verbose mode. Warnings and errors go to
    stderr and become workflow annotations when running under GitHub Actions.
    """

    def __init__(
        self,
        verbose: bool = False,
        console: Console | None = None,
        err_console: Console | None = None,
        annotate: bool | None = None,
    ):
        self.verbose = verbose
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.annotate = running_in_actions() if annotate is None else annotate

    def info(self, text: str) -> None:
        self.console.print(text)

    def debug(self, text: str, payload: object = None) -> None:
        if not self.verbose:
            return
        self.console.print(f"[dim]{text}[/dim]")
        if payload is not None:
            self.console.print(Pretty(payload))

    def _command(self, name: str, text: str) -> None:
        self.err_console.print(
            f"::{name}::{escape_command_data(text)}",
            markup=False,
            emoji=False,
            soft_wrap=True,
        )

    def warning(self, text: str) -> None:
        if self.annotate:
            self._command("warning", text)
        else:
            self.err_console.print(f"[yellow]Warning:[/yellow] {escape(text)}")

    def error(self, text: str) -> None:
        if self.annotate:
            self._command("error", text)
        else:
            self.err_console.print(f"[red]Error:[/red] {escape(text)}")
