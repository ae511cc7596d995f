import logging
from collections.abc import Generator

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import Request
from fastapi import Response

from profile_svg.api.schemas.profile import ProfileContent
from profile_svg.clients.github_client import GitHubClient
from profile_svg.core.middleware import SVG_MEDIA_TYPE
from profile_svg.services.profile_service import ProfileAggregator
from profile_svg.services.profile_service import UpstreamFatalError
from profile_svg.services.svg_renderer import render_error_svg
from profile_svg.services.svg_renderer import render_svg
from profile_svg.settings import Settings


logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings(request: Request) -> Settings:
    """Return the settings loaded when the application was created."""

    return request.app.state.settings


def get_profile_content(request: Request) -> ProfileContent:
    return request.app.state.profile_content


def get_github_client(
    settings: Settings = Depends(get_settings),
) -> Generator[GitHubClient, None, None]:
    """Yield a GitHub client scoped to the current request."""

    client = GitHubClient(
        token=settings.github_token,
        api_base_url=settings.github_api_base_url,
        graphql_url=settings.github_graphql_url,
        timeout=settings.http_timeout_seconds,
    )
    try:
        yield client
    finally:
        client.close()


def get_profile_aggregator(
    client: GitHubClient = Depends(get_github_client),
    content: ProfileContent = Depends(get_profile_content),
) -> ProfileAggregator:
    return ProfileAggregator(client=client, content=content)


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "GitHub profile SVG service"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Report that the SVG service process is up."""

    return {"status": "ok"}


@router.get("/api/svg")
def get_profile_svg(
    username: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    aggregator: ProfileAggregator = Depends(get_profile_aggregator),
) -> Response:
    """Render the GitHub overview for `username` as an SVG image."""

    requested_username = (username or "").strip() or settings.default_username

    try:
        model = aggregator.aggregate(requested_username)
    except UpstreamFatalError as exc:
        logger.error("Unable to render profile for %s: %s", requested_username, exc)
        return Response(
            content=render_error_svg(str(exc)),
            status_code=500,
            media_type=SVG_MEDIA_TYPE,
        )

    return Response(
        content=render_svg(model),
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": settings.cache_control},
    )
