"""CLI entry point for tagalong."""

import click

from tagalong import __version__
from tagalong.commands import plan, release


@click.group()
@click.version_option(version=__version__, prog_name="tagalong")
def main():
    """Tagalong - keep a GitHub release in line with a description of it.

    Creates or updates the release for a tag and uploads files as its
    assets, replacing assets that already exist under the same name.

    Examples:

        tagalong release --repo owner/repo --tag v1.0 --files "dist/a.zip;dist/b.txt"

        tagalong release --tag v1.1 --draft true --manifest release.yaml

        tagalong plan --repo owner/repo --tag v1.0
    """
    pass


# Register commands
main.add_command(release.release)
main.add_command(plan.plan)


if __name__ == "__main__":
    main()
