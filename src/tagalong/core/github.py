"""GitHub API client for reading and writing releases."""

import re
from urllib.parse import quote

import httpx

from tagalong.models.release import Asset, Release


GITHUB_API_BASE = "https://api.github.com"

API_TIMEOUT = 30.0
UPLOAD_TIMEOUT = 300.0
RELEASES_PER_PAGE = 100
_ERROR_DETAIL_LIMIT = 512


class GitHubError(Exception):
    """Error from GitHub API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(GitHubError):
    """The requested GitHub resource does not exist."""

    pass


def parse_repo_spec(spec: str) -> tuple[str, str]:
    """Parse a repo spec into (owner, repo).

    Accepts:
    - owner/repo
    - https://github.com/owner/repo
    - github.com/owner/repo
    """
    # Handle full URLs
    url_pattern = r"(?:https?://)?github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$"
    match = re.match(url_pattern, spec)
    if match:
        return match.group(1), match.group(2)

    # Handle owner/repo format
    if "/" in spec:
        parts = spec.split("/")
        if len(parts) == 2 and all(parts):
            return parts[0], parts[1]

    raise ValueError(f"Invalid repo spec: {spec}. Use 'owner/repo' or GitHub URL.")


def _error_detail(response: httpx.Response) -> str:
    """Return a short description of a failed response."""
    try:
        message = response.json().get("message", "")
    except (ValueError, AttributeError):
        message = response.text.strip()
    detail = message or response.reason_phrase or ""
    return detail[:_ERROR_DETAIL_LIMIT]


def _check_response(response: httpx.Response, what: str) -> None:
    """Raise a GitHubError describing ``what`` failed, if it did."""
    if response.is_success:
        return

    status = response.status_code
    detail = _error_detail(response)
    if status == 404:
        raise NotFoundError(f"{what}: not found", status_code=status)
    if status == 401:
        raise GitHubError(f"{what}: bad credentials ({detail})", status_code=status)
    if status == 403:
        raise GitHubError(
            f"{what}: forbidden, check token permissions or rate limit ({detail})",
            status_code=status,
        )
    raise GitHubError(f"{what}: HTTP {status} {detail}".rstrip(), status_code=status)


def _parse(response: httpx.Response, what: str, parse):
    """Decode a successful response with ``parse``, as GitHubError on bad data."""
    try:
        return parse(response.json())
    except (ValueError, KeyError, TypeError) as e:
        raise GitHubError(
            f"{what}: unexpected response ({type(e).__name__}: {e})",
            status_code=response.status_code,
        ) from e


def _upload_target(upload_url: str) -> str:
    """Strip the ``{?name,label}`` URI template from an upload URL."""
    return upload_url.split("{", 1)[0]


class GitHubClient:
    """Client for interacting with GitHub API."""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_BASE,
        transport: httpx.BaseTransport | None = None,
    ):
        self.client = httpx.Client(
            base_url=base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "tagalong",
            },
            timeout=API_TIMEOUT,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.client.close()

    def _send(self, method: str, url: str, what: str, **kwargs) -> httpx.Response:
        """Send a request, turning transport and HTTP failures into GitHubError."""
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubError(f"{what}: {e}") from e
        _check_response(response, what)
        return response

    def get_release_by_tag(self, repo: str, tag: str) -> Release:
        """Get a specific release by tag name."""
        what = f"Release {tag} of {repo}"
        # Tags may contain '#', '%' or '/', all of which must stay in the path
        response = self._send(
            "GET", f"/repos/{repo}/releases/tags/{quote(tag, safe='')}", what
        )
        return _parse(response, what, Release.from_api_response)

    def list_releases(self, repo: str) -> list[Release]:
        """Get every release of a repository, following pagination links."""
        releases = []
        url: str | None = f"/repos/{repo}/releases"
        params: dict | None = {"per_page": RELEASES_PER_PAGE}

        while url:
            what = f"Releases of {repo}"
            response = self._send("GET", url, what, params=params)
            page = _parse(
                response, what, lambda data: [Release.from_api_response(d) for d in data]
            )
            releases.extend(page)

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        return releases

    def create_release(
        self,
        repo: str,
        *,
        tag: str,
        commit: str,
        name: str,
        body: str,
        draft: bool,
        prerelease: bool,
    ) -> Release:
        """Create a release for ``tag``."""
        payload = _release_payload(tag, commit, name, body, draft, prerelease)
        what = f"Creating release {tag} in {repo}"
        response = self._send("POST", f"/repos/{repo}/releases", what, json=payload)
        return _parse(response, what, Release.from_api_response)

    def update_release(
        self,
        repo: str,
        release_id: int,
        *,
        tag: str,
        commit: str,
        name: str,
        body: str,
        draft: bool,
        prerelease: bool,
    ) -> Release:
        """Update the metadata of an existing release in place."""
        payload = _release_payload(tag, commit, name, body, draft, prerelease)
        what = f"Updating release {release_id} in {repo}"
        response = self._send(
            "PATCH", f"/repos/{repo}/releases/{release_id}", what, json=payload
        )
        return _parse(response, what, Release.from_api_response)

    def delete_asset(self, repo: str, asset_id: int) -> None:
        """Delete a release asset."""
        self._send(
            "DELETE",
            f"/repos/{repo}/releases/assets/{asset_id}",
            f"Deleting asset {asset_id} from {repo}",
        )

    def upload_asset(
        self,
        upload_url: str,
        *,
        name: str,
        content_type: str,
        size: int,
        content: bytes,
    ) -> Asset:
        """Upload ``content`` as a release asset called ``name``."""
        what = f"Uploading {name}"
        response = self._send(
            "POST",
            _upload_target(upload_url),
            what,
            params={"name": name},
            headers={
                "Content-Type": content_type,
                "Content-Length": str(size),
            },
            content=content,
            timeout=UPLOAD_TIMEOUT,
        )
        return _parse(response, what, Asset.from_api_response)


def _release_payload(
    tag: str,
    commit: str,
    name: str,
    body: str,
    draft: bool,
    prerelease: bool,
) -> dict:
    """Build the JSON body shared by release create and update."""
    payload = {
        "tag_name": tag,
        "name": name,
        "body": body,
        "draft": draft,
        "prerelease": prerelease,
    }
    if commit:
        payload["target_commitish"] = commit
    return payload
