import logging
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from datetime import UTC
from datetime import datetime
from typing import Any
from typing import TypeVar

from profile_svg.api.schemas.profile import ActivityEvent
from profile_svg.api.schemas.profile import ContributionSummary
from profile_svg.api.schemas.profile import LanguageShare
from profile_svg.api.schemas.profile import ProfileContent
from profile_svg.api.schemas.profile import ProfileSnapshot
from profile_svg.api.schemas.profile import RenderModel
from profile_svg.api.schemas.profile import RepositoryRecord
from profile_svg.clients.github_client import GitHubAPIError
from profile_svg.clients.github_client import GitHubDataSource
from profile_svg.core.result import attempt


logger = logging.getLogger(__name__)

T = TypeVar("T")

PAGE_SIZE = 100
RECENT_LIMIT = 5
LANGUAGE_SAMPLE_LIMIT = 40
TOP_LANGUAGES = 5
DEFAULT_BIO = "Software Developer | Building Scalable & User-Focused Web Applications"
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class UpstreamFatalError(Exception):
    """Raised when a mandatory GitHub lookup fails and no SVG can be built."""


def parse_github_datetime(raw_value: str) -> datetime:
    return datetime.fromisoformat(raw_value.replace("Z", "+00:00"))


def collect_pages(
    fetch_page: Callable[[int], Sequence[T]],
    per_page: int = PAGE_SIZE,
) -> list[T]:
    """Collect a paginated listing starting at page 1.

    Stops after the first page holding fewer than `per_page` items. A listing
    whose size is an exact multiple of `per_page` therefore costs one extra,
    empty request.
    """

    collected: list[T] = []
    page = 1
    while True:
        items = fetch_page(page)
        collected.extend(items)
        if len(items) < per_page:
            return collected
        page += 1


def text_field(value: Any, default: str) -> str:
    """Coerce an upstream value to display text; empty or missing gives `default`."""

    if value is None or value == "":
        return default
    return str(value)


def count_field(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)


def to_repository_record(raw: Mapping[str, Any]) -> RepositoryRecord:
    owner = raw.get("owner")
    owner_login = owner.get("login") if isinstance(owner, Mapping) else None

    raw_pushed_at = raw.get("pushed_at")
    pushed_at = None
    if isinstance(raw_pushed_at, str) and raw_pushed_at:
        try:
            pushed_at = parse_github_datetime(raw_pushed_at)
        except ValueError:
            pushed_at = None

    return RepositoryRecord(
        name=text_field(raw.get("name"), "unknown"),
        is_private=bool(raw.get("private")),
        pushed_at=pushed_at,
        owner=owner_login if isinstance(owner_login, str) else "",
    )


def sort_by_recent_push(repos: Iterable[RepositoryRecord]) -> list[RepositoryRecord]:
    """Sort repositories by push time, newest first; ties keep listing order."""

    return sorted(repos, key=lambda repo: repo.pushed_at or EPOCH, reverse=True)


def recent_repository_names(
    repos: Iterable[RepositoryRecord], limit: int = RECENT_LIMIT
) -> list[str]:
    return [repo.name for repo in sort_by_recent_push(repos)[:limit]]


def tally_languages(language_maps: Iterable[Mapping[str, int]]) -> dict[str, int]:
    """Sum byte counts per language, keeping first-seen order."""

    tally: dict[str, int] = {}
    for languages in language_maps:
        for name, size in languages.items():
            tally[name] = tally.get(name, 0) + max(0, size)
    return tally


def language_shares(
    tally: Mapping[str, int], limit: int = TOP_LANGUAGES
) -> list[LanguageShare]:
    """Convert a byte tally into the top `limit` percentage shares."""

    total = sum(tally.values())
    shares = [
        LanguageShare(name=name, percentage=size / (total or 1) * 100)
        for name, size in tally.items()
    ]
    shares.sort(key=lambda share: share.percentage, reverse=True)
    return shares[:limit]


def active_days(counts: Sequence[int]) -> int:
    return sum(1 for count in counts if count > 0)


def current_streak(counts: Sequence[int]) -> int:
    """Length of the run of non-zero days ending at the most recent day."""

    streak = 0
    for count in reversed(counts):
        if count <= 0:
            break
        streak += 1
    return streak


def summarize_contributions(
    total: int, days: Sequence[Mapping[str, str | int]]
) -> ContributionSummary:
    counts = [int(day["count"]) for day in days]
    return ContributionSummary(
        total=max(0, total),
        active_days=active_days(counts),
        current_streak=current_streak(counts),
    )


def to_activity_event(raw: Mapping[str, Any]) -> ActivityEvent:
    repo = raw.get("repo")
    repo_name = None
    if isinstance(repo, Mapping):
        repo_name = repo.get("name") or repo.get("full_name")

    created_at = raw.get("created_at")
    return ActivityEvent(
        repo_name=text_field(repo_name, "unknown"),
        event_type=text_field(raw.get("type"), "Activity"),
        date=created_at[:10] if isinstance(created_at, str) else "",
    )


class ProfileAggregator:
    """Gathers GitHub data for one username into a `RenderModel`.

    Profile and authenticated-identity lookups are mandatory; every other
    fetch is best-effort and falls back to an empty value.
    """

    def __init__(self, client: GitHubDataSource, content: ProfileContent) -> None:
        self.client = client
        self.content = content

    def aggregate(self, username: str) -> RenderModel:
        username = username.strip()
        logger.info("Aggregating GitHub profile data for %s", username)

        try:
            user = self.client.get_user(username)
            authenticated = self.client.get_authenticated_user()
        except GitHubAPIError as exc:
            logger.error("Mandatory GitHub lookup failed for %s: %s", username, exc)
            raise UpstreamFatalError(exc.message) from exc

        login = authenticated.get("login")
        is_own_profile = isinstance(login, str) and login.lower() == username.lower()

        repos = attempt(
            "repositories", lambda: self._collect_repositories(username, is_own_profile)
        ).value_or([])
        public_repos = [repo for repo in repos if not repo.is_private]
        private_repos = [repo for repo in repos if repo.is_private]
        logger.debug(
            "Collected %d public and %d private repositories for %s",
            len(public_repos),
            len(private_repos),
            username,
        )

        followers = attempt(
            "followers",
            lambda: self.client.list_followers(username, per_page=RECENT_LIMIT),
        ).value_or([])
        recent_followers = [
            text_field(follower.get("login"), "unknown")
            for follower in followers[:RECENT_LIMIT]
        ]

        languages = language_shares(self._tally_languages(username, public_repos))

        total, days = attempt(
            "contributions",
            lambda: self.client.fetch_contribution_calendar(username),
        ).value_or((0, []))

        events = attempt(
            "events",
            lambda: self.client.list_public_events(username, per_page=RECENT_LIMIT),
        ).value_or([])

        return RenderModel(
            profile=ProfileSnapshot(
                username=username,
                display_name=text_field(user.get("name"), username),
                bio=text_field(user.get("bio"), DEFAULT_BIO),
                follower_count=count_field(user.get("followers")),
                is_own_profile=is_own_profile,
            ),
            recent_followers=recent_followers,
            public_repo_count=len(public_repos),
            private_repo_count=len(private_repos) if is_own_profile else None,
            recent_public_repos=recent_repository_names(public_repos),
            recent_private_repos=(
                recent_repository_names(private_repos) if is_own_profile else None
            ),
            languages=languages,
            contributions=summarize_contributions(total, days),
            activity=[to_activity_event(event) for event in events[:RECENT_LIMIT]],
            content=self.content,
        )

    def _collect_repositories(
        self, username: str, is_own_profile: bool
    ) -> list[RepositoryRecord]:
        normalized_username = username.lower()

        if is_own_profile:
            def fetch_page(page: int) -> list[Mapping[str, Any]]:
                return self.client.list_authenticated_user_repos(
                    page=page, per_page=PAGE_SIZE
                )
        else:
            def fetch_page(page: int) -> list[Mapping[str, Any]]:
                return self.client.list_user_repos(
                    username, page=page, per_page=PAGE_SIZE
                )

        records = [to_repository_record(raw) for raw in collect_pages(fetch_page)]
        if is_own_profile:
            records = [
                record
                for record in records
                if record.owner.lower() == normalized_username
            ]
        return records

    def _tally_languages(
        self, username: str, public_repos: Sequence[RepositoryRecord]
    ) -> dict[str, int]:
        sample = sort_by_recent_push(public_repos)[:LANGUAGE_SAMPLE_LIMIT]
        results = [
            attempt(
                f"languages for {repo.name}",
                lambda repo=repo: self.client.list_repo_languages(
                    repo.owner or username, repo.name
                ),
            )
            for repo in sample
        ]
        return tally_languages(result.value for result in results if result.ok)
