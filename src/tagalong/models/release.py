"""GitHub release data models."""

from dataclasses import dataclass, field


@dataclass
class Asset:
    """Represents a GitHub release asset."""

    id: int
    name: str
    size: int
    content_type: str
    download_url: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "Asset":
        """Create Asset from GitHub API response."""
        return cls(
            id=data["id"],
            name=data["name"],
            size=data.get("size", 0),
            content_type=data.get("content_type", "application/octet-stream"),
            download_url=data.get("browser_download_url", ""),
        )


@dataclass
class Release:
    """Represents a GitHub release."""

    id: int
    tag_name: str
    name: str
    draft: bool
    prerelease: bool
    upload_url: str
    html_url: str = ""
    assets: list[Asset] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict) -> "Release":
        """Create Release from GitHub API response."""
        assets = [Asset.from_api_response(a) for a in data.get("assets") or []]
        return cls(
            id=data["id"],
            tag_name=data["tag_name"],
            name=data.get("name") or data["tag_name"],
            draft=data.get("draft", False),
            prerelease=data.get("prerelease", False),
            upload_url=data.get("upload_url", ""),
            html_url=data.get("html_url", ""),
            assets=assets,
        )

    @property
    def identity(self) -> tuple[str, bool, bool]:
        """The (tag, draft, prerelease) triple used to match releases."""
        return (self.tag_name, self.draft, self.prerelease)

    def find_asset(self, name: str) -> Asset | None:
        """Return the asset called ``name``, if the release has one."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None
