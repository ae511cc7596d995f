from collections.abc import Mapping
from typing import Any
from typing import Protocol

import httpx


USER_AGENT = "github-profile-svg"

CONTRIBUTION_CALENDAR_QUERY = """
query($login: String!) {
  user(login: $login) {
    contributionsCollection {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


class GitHubAPIError(Exception):
    """Raised for any failed GitHub request or malformed response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GitHubDataSource(Protocol):
    """Capabilities the profile aggregator needs from GitHub."""

    def get_user(self, username: str) -> Mapping[str, Any]: ...

    def get_authenticated_user(self) -> Mapping[str, Any]: ...

    def list_user_repos(
        self, username: str, page: int, per_page: int
    ) -> list[Mapping[str, Any]]: ...

    def list_authenticated_user_repos(
        self, page: int, per_page: int
    ) -> list[Mapping[str, Any]]: ...

    def list_followers(
        self, username: str, per_page: int
    ) -> list[Mapping[str, Any]]: ...

    def list_repo_languages(self, owner: str, repo: str) -> dict[str, int]: ...

    def fetch_contribution_calendar(
        self, username: str
    ) -> tuple[int, list[dict[str, str | int]]]: ...

    def list_public_events(
        self, username: str, per_page: int
    ) -> list[Mapping[str, Any]]: ...


class GitHubClient:
    """Synchronous GitHub REST and GraphQL client bound to one token.

    Create one per request and call `close()` when done; the underlying
    `httpx.Client` is not shared between requests.
    """

    def __init__(
        self,
        token: str | None,
        api_base_url: str = "https://api.github.com",
        graphql_url: str = "https://api.github.com/graphql",
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._token = token
        self._graphql_url = graphql_url
        self._http = httpx.Client(
            base_url=api_base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_user(self, username: str) -> Mapping[str, Any]:
        """Fetch the public profile for `username`."""

        return self._expect_mapping(self._get(f"/users/{username}"), "user")

    def get_authenticated_user(self) -> Mapping[str, Any]:
        """Fetch the profile of the token owner."""

        return self._expect_mapping(self._get("/user"), "authenticated user")

    def list_user_repos(
        self, username: str, page: int, per_page: int
    ) -> list[Mapping[str, Any]]:
        payload = self._get(
            f"/users/{username}/repos",
            params={"per_page": per_page, "page": page},
        )
        return self._expect_list(payload, "repositories")

    def list_authenticated_user_repos(
        self, page: int, per_page: int
    ) -> list[Mapping[str, Any]]:
        payload = self._get(
            "/user/repos",
            params={
                "per_page": per_page,
                "page": page,
                "affiliation": "owner",
                "sort": "pushed",
            },
        )
        return self._expect_list(payload, "repositories")

    def list_followers(self, username: str, per_page: int) -> list[Mapping[str, Any]]:
        payload = self._get(
            f"/users/{username}/followers", params={"per_page": per_page}
        )
        return self._expect_list(payload, "followers")

    def list_repo_languages(self, owner: str, repo: str) -> dict[str, int]:
        """Fetch language byte counts for one repository."""

        payload = self._expect_mapping(
            self._get(f"/repos/{owner}/{repo}/languages"), "languages"
        )
        return {
            name: size
            for name, size in payload.items()
            if isinstance(name, str) and isinstance(size, int)
        }

    def list_public_events(
        self, username: str, per_page: int
    ) -> list[Mapping[str, Any]]:
        payload = self._get(
            f"/users/{username}/events/public", params={"per_page": per_page}
        )
        return self._expect_list(payload, "events")

    def fetch_contribution_calendar(
        self, username: str
    ) -> tuple[int, list[dict[str, str | int]]]:
        """Fetch the contribution calendar for a user from GitHub GraphQL API.

        Returns the total contribution count and the calendar days flattened
        in chronological order.
        """

        if not self._token:
            raise GitHubAPIError("GITHUB_TOKEN is required for GraphQL requests")

        try:
            response = self._http.post(
                self._graphql_url,
                json={
                    "query": CONTRIBUTION_CALENDAR_QUERY,
                    "variables": {"login": username},
                },
            )
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"GitHub GraphQL request failed: {exc}") from exc

        payload = self._decode(response)
        if not isinstance(payload, Mapping):
            raise GitHubAPIError("GitHub GraphQL response is invalid")

        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) and errors else {}
            message = first.get("message") if isinstance(first, Mapping) else None
            raise GitHubAPIError(message or "GitHub GraphQL returned errors")

        data = payload.get("data")
        if not isinstance(data, Mapping):
            raise GitHubAPIError("GitHub GraphQL data is missing")

        user = data.get("user")
        if not isinstance(user, Mapping):
            raise GitHubAPIError("GitHub user not found")

        collection = user.get("contributionsCollection")
        if not isinstance(collection, Mapping):
            raise GitHubAPIError("GitHub contributionsCollection is missing")

        calendar = collection.get("contributionCalendar")
        if not isinstance(calendar, Mapping):
            raise GitHubAPIError("GitHub contributionCalendar is missing")

        weeks = calendar.get("weeks")
        if not isinstance(weeks, list):
            raise GitHubAPIError("GitHub contribution weeks are missing")

        days: list[dict[str, str | int]] = []
        for week in weeks:
            if not isinstance(week, Mapping):
                continue
            contribution_days = week.get("contributionDays")
            if not isinstance(contribution_days, list):
                continue
            for item in contribution_days:
                if not isinstance(item, Mapping):
                    continue
                raw_date = item.get("date")
                raw_count = item.get("contributionCount")
                if isinstance(raw_date, str) and isinstance(raw_count, int):
                    days.append({"date": raw_date, "count": raw_count})

        total = calendar.get("totalContributions")
        if not isinstance(total, int):
            total = sum(int(day["count"]) for day in days)

        return total, days

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"GitHub request failed: {exc}") from exc
        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.is_error:
            message = response.reason_phrase or "GitHub API request failed"
            try:
                error_data = response.json()
            except ValueError:
                error_data = None
            if isinstance(error_data, Mapping) and isinstance(
                error_data.get("message"), str
            ):
                message = error_data["message"]
            raise GitHubAPIError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise GitHubAPIError(
                "GitHub response is not valid JSON", status_code=response.status_code
            ) from exc

    @staticmethod
    def _expect_mapping(payload: Any, label: str) -> Mapping[str, Any]:
        if not isinstance(payload, Mapping):
            raise GitHubAPIError(f"GitHub {label} response is invalid")
        return payload

    @staticmethod
    def _expect_list(payload: Any, label: str) -> list[Mapping[str, Any]]:
        if not isinstance(payload, list):
            raise GitHubAPIError(f"GitHub {label} response is invalid")
        return [item for item in payload if isinstance(item, Mapping)]
