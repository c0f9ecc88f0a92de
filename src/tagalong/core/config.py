"""Run configuration for tagalong."""

from dataclasses import dataclass
from pathlib import Path
import os

import click
import yaml

from tagalong.core.github import GITHUB_API_BASE, parse_repo_spec
from tagalong.models.desired import DesiredState


class ConfigError(Exception):
    """Invalid or incomplete run configuration."""

    pass


@dataclass
class TagalongConfig:
    """Connection settings for a run."""

    token: str
    repo: str
    api_url: str = GITHUB_API_BASE
    output_path: Path | None = None  # GitHub Actions step output file

    @classmethod
    def from_env(
        cls, token: str | None = None, repo: str | None = None
    ) -> "TagalongConfig":
        """Create config from explicit values, falling back to the Actions environment."""
        token = token or os.environ.get("GITHUB_TOKEN", "")
        repo = repo or os.environ.get("GITHUB_REPOSITORY", "")
        if not token:
            raise ConfigError("No token given. Pass --token or set GITHUB_TOKEN.")
        if not repo:
            raise ConfigError("No repository given. Pass --repo or set GITHUB_REPOSITORY.")

        try:
            owner, name = parse_repo_spec(repo)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        output = os.environ.get("GITHUB_OUTPUT")
        return cls(
            token=token,
            repo=f"{owner}/{name}",
            api_url=os.environ.get("GITHUB_API_URL") or GITHUB_API_BASE,
            output_path=Path(output) if output else None,
        )


def load_manifest(path: Path) -> dict:
    """Load desired release fields from a YAML manifest."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read manifest {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Manifest {path} must be a mapping")

    # Accept a top-level "release:" section as well as bare fields
    release = data.get("release", data)
    if not isinstance(release, dict):
        raise ConfigError(f"Manifest {path}: 'release' must be a mapping")
    return release


def build_desired_state(options: dict, manifest: dict | None = None) -> DesiredState:
    """Merge command line options over manifest values.

    Options left unset (None) take the manifest value, if any.
    """
    merged = dict(manifest or {})
    merged.update({k: v for k, v in options.items() if v is not None})

    if not merged.get("tag"):
        raise ConfigError("No tag given. Pass --tag or set it in the manifest.")
    try:
        return DesiredState.from_dict(merged)
    except click.BadParameter as e:
        raise ConfigError(f"Invalid release field: {e.message}") from e
