"""Local files that get attached to a release."""

import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path


DEFAULT_MIME_TYPE = "application/octet-stream"


class LocalFileError(Exception):
    """A local file could not be read."""

    pass


@dataclass(frozen=True)
class LocalFile:
    """A file read from disk, ready for upload."""

    name: str
    mime_type: str
    size: int
    content: bytes


def parse_file_list(raw: str | None) -> tuple[str, ...]:
    """Split a ``;`` or newline separated list of paths.

    Blank entries are dropped so that a trailing separator or an unset input
    does not turn into a bogus path.
    """
    if not raw:
        return ()
    return tuple(p.strip() for p in re.split(r"[;\n]", raw) if p.strip())


def detect_mime(path: Path | str) -> str:
    """Guess the mime type of a file from its name."""
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or DEFAULT_MIME_TYPE


def read_local_file(path: Path | str) -> LocalFile:
    """Read a file and describe it for upload."""
    file_path = Path(path)
    try:
        size = file_path.stat().st_size
        content = file_path.read_bytes()
    except OSError as e:
        raise LocalFileError(f"Cannot read {file_path}: {e.strerror or e}") from e

    return LocalFile(
        name=file_path.name,
        mime_type=detect_mime(file_path),
        size=size,
        content=content,
    )
