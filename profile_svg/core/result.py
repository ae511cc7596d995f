import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic
from typing import TypeVar

from profile_svg.clients.github_client import GitHubAPIError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class UpstreamPartialFailure(Exception):
    """An optional GitHub fetch failed and its default value was used."""

    def __init__(self, step: str, cause: GitHubAPIError) -> None:
        super().__init__(f"{step} failed: {cause.message}")
        self.step = step
        self.cause = cause


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a best-effort fetch: either a value or the failure."""

    value: T | None = None
    error: UpstreamPartialFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]


def attempt(step: str, operation: Callable[[], T]) -> FetchResult[T]:
    """Run `operation`, turning a GitHub failure into a failed result.

    Only `GitHubAPIError` is captured; anything else propagates.
    """

    try:
        return FetchResult(value=operation())
    except GitHubAPIError as exc:
        failure = UpstreamPartialFailure(step, exc)
        failure.__cause__ = exc
        logger.warning("Best-effort fetch skipped: %s", failure)
        return FetchResult(error=failure)
