"""Desired release state model."""

from dataclasses import dataclass, field

import click


def _flag(value: object) -> bool:
    """Read a boolean the way the command line does ("false", "no", "0", ...).

    Raises click.BadParameter for values that are not booleans.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return click.BOOL.convert(str(value), None, None)


@dataclass(frozen=True)
class DesiredState:
    """What the release should look like once the run is over."""

    tag: str
    name: str = ""
    body: str = ""
    commit: str = ""  # Target commitish, empty means the default branch
    draft: bool = False
    prerelease: bool = False
    files: tuple[str, ...] = field(default_factory=tuple)

    @property
    def identity(self) -> tuple[str, bool, bool]:
        """The (tag, draft, prerelease) triple a matching release must have."""
        return (self.tag, self.draft, self.prerelease)

    @property
    def title(self) -> str:
        """Release title, falling back to the tag."""
        return self.name or self.tag

    def to_dict(self) -> dict:
        """Convert to dictionary for debug output."""
        return {
            "tag": self.tag,
            "name": self.title,
            "body": self.body,
            "commit": self.commit,
            "draft": self.draft,
            "prerelease": self.prerelease,
            "files": list(self.files),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DesiredState":
        """Create DesiredState from a manifest dictionary."""
        files = data.get("files") or []
        if isinstance(files, str):
            files = [files]
        return cls(
            tag=str(data["tag"]),
            name=str(data.get("name") or ""),
            body=str(data.get("body") or ""),
            commit=str(data.get("commit") or ""),
            draft=_flag(data.get("draft")),
            prerelease=_flag(data.get("prerelease")),
            files=tuple(str(f) for f in files),
        )
