from collections.abc import Mapping
from typing import Any

import pytest

from profile_svg.clients.github_client import GitHubAPIError


def make_repo(
    name: str,
    private: bool = False,
    pushed_at: str | None = None,
    owner: str = "octocat",
) -> dict[str, Any]:
    return {
        "name": name,
        "private": private,
        "pushed_at": pushed_at,
        "owner": {"login": owner},
    }


class FakeGitHub:
    """In-memory stand-in for `GitHubClient` recording every call."""

    def __init__(self) -> None:
        self.user: dict[str, Any] = {
            "login": "octocat",
            "name": "The Octocat",
            "bio": "Mascot",
            "followers": 12,
        }
        self.authenticated_login = "someone-else"
        self.user_repo_pages: list[list[Mapping[str, Any]]] = []
        self.auth_repo_pages: list[list[Mapping[str, Any]]] = []
        self.followers: list[Mapping[str, Any]] = []
        self.languages: dict[str, dict[str, int]] = {}
        self.calendar: tuple[int, list[dict[str, str | int]]] = (0, [])
        self.events: list[Mapping[str, Any]] = []
        self.failing: set[str] = set()
        self.calls: list[tuple[Any, ...]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise GitHubAPIError(f"{name} unavailable", status_code=502)

    def calls_to(self, name: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]

    def get_user(self, username: str) -> Mapping[str, Any]:
        self._record("get_user", username)
        return self.user

    def get_authenticated_user(self) -> Mapping[str, Any]:
        self._record("get_authenticated_user")
        return {"login": self.authenticated_login}

    def list_user_repos(
        self, username: str, page: int, per_page: int
    ) -> list[Mapping[str, Any]]:
        self._record("list_user_repos", username, page, per_page)
        if page > len(self.user_repo_pages):
            return []
        return self.user_repo_pages[page - 1]

    def list_authenticated_user_repos(
        self, page: int, per_page: int
    ) -> list[Mapping[str, Any]]:
        self._record("list_authenticated_user_repos", page, per_page)
        if page > len(self.auth_repo_pages):
            return []
        return self.auth_repo_pages[page - 1]

    def list_followers(self, username: str, per_page: int) -> list[Mapping[str, Any]]:
        self._record("list_followers", username, per_page)
        return self.followers

    def list_repo_languages(self, owner: str, repo: str) -> dict[str, int]:
        self._record("list_repo_languages", owner, repo)
        if f"languages:{repo}" in self.failing:
            raise GitHubAPIError("Repository access blocked", status_code=403)
        return self.languages.get(repo, {})

    def fetch_contribution_calendar(
        self, username: str
    ) -> tuple[int, list[dict[str, str | int]]]:
        self._record("fetch_contribution_calendar", username)
        return self.calendar

    def list_public_events(
        self, username: str, per_page: int
    ) -> list[Mapping[str, Any]]:
        self._record("list_public_events", username, per_page)
        return self.events


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def repo():
    return make_repo
