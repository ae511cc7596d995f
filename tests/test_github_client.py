import json

import httpx
import pytest

from profile_svg.clients.github_client import GitHubAPIError
from profile_svg.clients.github_client import GitHubClient


def make_client(handler, token: str | None = "test-token") -> GitHubClient:
    return GitHubClient(token=token, transport=httpx.MockTransport(handler))


def test_get_user_sends_token_and_returns_profile() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"login": "octocat", "followers": 3})

    with make_client(handler) as client:
        user = client.get_user("octocat")

    assert user == {"login": "octocat", "followers": 3}
    assert seen[0].url.path == "/users/octocat"
    assert seen[0].headers["Authorization"] == "Bearer test-token"
    assert seen[0].headers["Accept"] == "application/vnd.github+json"


def test_error_status_raises_with_github_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    with make_client(handler) as client:
        with pytest.raises(GitHubAPIError) as exc_info:
            client.get_user("ghost")

    assert exc_info.value.message == "Not Found"
    assert exc_info.value.status_code == 404


def test_transport_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with make_client(handler) as client:
        with pytest.raises(GitHubAPIError):
            client.get_authenticated_user()


def test_authenticated_repos_request_owner_affiliation() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"name": "site"}, "garbage"])

    with make_client(handler) as client:
        repos = client.list_authenticated_user_repos(page=2, per_page=100)

    assert repos == [{"name": "site"}]
    assert seen[0].url.path == "/user/repos"
    assert dict(seen[0].url.params) == {
        "per_page": "100",
        "page": "2",
        "affiliation": "owner",
        "sort": "pushed",
    }


def test_list_endpoints_use_expected_paths() -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path.endswith("/languages"):
            return httpx.Response(200, json={"Python": 1200, "Broken": "x"})
        return httpx.Response(200, json=[])

    with make_client(handler) as client:
        client.list_user_repos("octocat", page=1, per_page=100)
        client.list_followers("octocat", per_page=5)
        client.list_public_events("octocat", per_page=5)
        languages = client.list_repo_languages("octocat", "hello")

    assert paths == [
        "/users/octocat/repos",
        "/users/octocat/followers",
        "/users/octocat/events/public",
        "/repos/octocat/hello/languages",
    ]
    assert languages == {"Python": 1200}


def test_fetch_contribution_calendar_flattens_weeks() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "data": {
                    "user": {
                        "contributionsCollection": {
                            "contributionCalendar": {
                                "totalContributions": 5,
                                "weeks": [
                                    {
                                        "contributionDays": [
                                            {"date": "2026-02-15", "contributionCount": 0},
                                            {"date": "2026-02-16", "contributionCount": 2},
                                        ]
                                    },
                                    {
                                        "contributionDays": [
                                            {"date": "2026-02-22", "contributionCount": 3},
                                        ]
                                    },
                                ],
                            }
                        }
                    }
                }
            },
        )

    with make_client(handler) as client:
        total, days = client.fetch_contribution_calendar("octocat")

    assert total == 5
    assert days == [
        {"date": "2026-02-15", "count": 0},
        {"date": "2026-02-16", "count": 2},
        {"date": "2026-02-22", "count": 3},
    ]
    assert captured["url"] == "https://api.github.com/graphql"
    assert captured["body"]["variables"] == {"login": "octocat"}


def test_fetch_contribution_calendar_reports_graphql_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"errors": [{"message": "Could not resolve to a User"}]}
        )

    with make_client(handler) as client:
        with pytest.raises(GitHubAPIError, match="Could not resolve to a User"):
            client.fetch_contribution_calendar("ghost")


def test_fetch_contribution_calendar_requires_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected without a token")

    with make_client(handler, token=None) as client:
        with pytest.raises(GitHubAPIError, match="GITHUB_TOKEN"):
            client.fetch_contribution_calendar("octocat")
