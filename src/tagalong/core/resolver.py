"""Find, create or update the release a run reconciles.

Resolution first looks the tag up directly. GitHub only returns published
releases from that endpoint, so its answer decides whether the run may touch
the release at all. When it may, the full release list is searched for a
release with the exact (tag, draft, prerelease) identity; that release is
updated in place, otherwise a new one is created.
"""

import enum
from dataclasses import dataclass

from rich.markup import escape

from tagalong.core.github import GitHubClient, NotFoundError
from tagalong.core.output import Reporter
from tagalong.models.desired import DesiredState
from tagalong.models.release import Release


class Outcome(enum.Enum):
    """What the resolver decided to do with the release."""

    SKIP = "skip"
    UPDATE = "update"
    CREATE_ALONGSIDE = "create-alongside"
    CREATE_FRESH = "create-fresh"


class TagLookup(enum.Enum):
    """Action taken after a direct tag lookup found a release."""

    SKIP = "skip"
    SEARCH = "search"


# (existing release is draft, desired draft) -> action
TAG_LOOKUP_TABLE: dict[tuple[bool, bool], TagLookup] = {
    (False, False): TagLookup.SKIP,  # published release, assets cannot change
    (True, False): TagLookup.SKIP,
    (False, True): TagLookup.SEARCH,  # new draft goes next to the published one
    (True, True): TagLookup.SEARCH,
}


@dataclass
class ReconcileState:
    """Result assembled step by step during a run."""

    desired: DesiredState
    outcome: Outcome | None = None
    release: Release | None = None
    created: bool = False

    @property
    def skipped(self) -> bool:
        return self.outcome is Outcome.SKIP


def lookup_tag(
    client: GitHubClient, repo: str, desired: DesiredState, log: Reporter
) -> tuple[TagLookup, Release | None]:
    """Look the tag up directly and decide whether the run may continue."""
    try:
        existing = client.get_release_by_tag(repo, desired.tag)
    except NotFoundError:
        log.debug(f"No release is published for tag {escape(desired.tag)}.")
        return TagLookup.SEARCH, None

    if existing.tag_name != desired.tag:
        log.debug(
            f"Tag lookup for {escape(desired.tag)} returned release "
            f"{existing.id} tagged {escape(existing.tag_name)}, ignoring it."
        )
        return TagLookup.SEARCH, None

    log.debug("Release already exists.", existing)
    action = TAG_LOOKUP_TABLE[(existing.draft, desired.draft)]
    return action, existing


def find_matching_release(
    client: GitHubClient, repo: str, desired: DesiredState, log: Reporter
) -> Release | None:
    """Return the first listed release whose identity matches ``desired``."""
    try:
        releases = client.list_releases(repo)
    except NotFoundError:
        return None

    log.debug("Releases", [r.identity for r in releases])

    for release in releases:
        if release.identity == desired.identity:
            log.debug(f"Found existing release {release.id} by searching.")
            return release
    return None


def decide(
    tag_action: TagLookup, tagged: Release | None, match: Release | None
) -> Outcome:
    """Combine the lookup results into a single outcome."""
    if tag_action is TagLookup.SKIP:
        return Outcome.SKIP
    if match is not None:
        return Outcome.UPDATE
    if tagged is not None and not tagged.draft:
        return Outcome.CREATE_ALONGSIDE
    return Outcome.CREATE_FRESH


def apply_outcome(
    client: GitHubClient,
    repo: str,
    state: ReconcileState,
    target: Release | None,
    log: Reporter,
) -> ReconcileState:
    """Perform the single create or update call the outcome requires."""
    desired = state.desired
    options = {
        "tag": desired.tag,
        "commit": desired.commit,
        "name": desired.title,
        "body": desired.body,
        "draft": desired.draft,
        "prerelease": desired.prerelease,
    }

    if state.outcome is Outcome.UPDATE:
        log.debug("Release options (update)", {"release_id": target.id, **options})
        log.info(f"Updating GitHub release for tag [bold]{escape(desired.tag)}[/bold].")
        state.release = client.update_release(repo, target.id, **options)
        state.created = False
    else:
        log.debug("Release options (create)", options)
        log.info(f"Creating GitHub release for tag [bold]{escape(desired.tag)}[/bold].")
        state.release = client.create_release(repo, **options)
        state.created = True

    return state


def plan_release(
    client: GitHubClient, repo: str, desired: DesiredState, log: Reporter
) -> tuple[Outcome, Release | None]:
    """Decide what to do with the release without changing anything.

    Returns the outcome together with the release it applies to: the
    matching release for ``Outcome.UPDATE``, the published release for
    ``Outcome.SKIP`` and ``Outcome.CREATE_ALONGSIDE``, otherwise None.
    """
    tag_action, tagged = lookup_tag(client, repo, desired, log)
    if tag_action is TagLookup.SKIP:
        return Outcome.SKIP, tagged

    if tagged is not None and not tagged.draft:
        log.debug("The existing release is published, a new draft release can be created.")

    match = find_matching_release(client, repo, desired, log)
    outcome = decide(tag_action, tagged, match)
    return outcome, match if outcome is Outcome.UPDATE else tagged


def resolve_release(
    client: GitHubClient, repo: str, desired: DesiredState, log: Reporter
) -> ReconcileState:
    """Resolve the release for ``desired``, creating or updating it.

    Returns a state whose outcome is ``Outcome.SKIP`` when an existing
    published release must be left alone; nothing is mutated in that case.
    Any GitHubError other than NotFoundError propagates.
    """
    state = ReconcileState(desired=desired)
    state.outcome, target = plan_release(client, repo, desired, log)

    if state.skipped:
        log.info(
            "Draft is not requested and a release already exists for tag "
            f"[bold]{escape(desired.tag)}[/bold]. Skipping any updates."
        )
        return state

    return apply_outcome(client, repo, state, target, log)
