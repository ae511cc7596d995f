import asyncio

from fastapi.testclient import TestClient
from starlette.requests import Request
from starlette.responses import Response

from profile_svg.api.routes.svg import get_profile_aggregator
from profile_svg.content import DEFAULT_PROFILE_CONTENT
from profile_svg.core.middleware import SvgRateLimitMiddleware
from profile_svg.main import create_app
from profile_svg.services.profile_service import ProfileAggregator


def build_client(monkeypatch, fake_github, trust_forwarded_for: bool) -> TestClient:
    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "60")
    monkeypatch.setenv("TRUST_FORWARDED_FOR", "true" if trust_forwarded_for else "false")
    app = create_app()
    app.dependency_overrides[get_profile_aggregator] = lambda: ProfileAggregator(
        client=fake_github, content=DEFAULT_PROFILE_CONTENT
    )
    return TestClient(app)


def svg_request(client_host: str, forwarded_for: str | None = None) -> Request:
    headers = []
    if forwarded_for:
        headers.append((b"x-forwarded-for", forwarded_for.encode()))
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": "/api/svg",
            "root_path": "",
            "query_string": b"",
            "headers": headers,
            "client": (client_host, 50000),
        }
    )


async def ok_response(request: Request) -> Response:
    return Response("ok")


def test_svg_endpoint_rate_limited_after_threshold(monkeypatch, fake_github) -> None:
    """Rate limiter blocks repeated requests to /api/svg behind a trusted proxy."""

    client = build_client(monkeypatch, fake_github, trust_forwarded_for=True)
    headers = {"X-Forwarded-For": "203.0.113.10"}

    first = client.get("/api/svg?username=octocat", headers=headers)
    second = client.get("/api/svg?username=octocat", headers=headers)
    other_client = client.get(
        "/api/svg?username=octocat", headers={"X-Forwarded-For": "203.0.113.11"}
    )

    assert first.status_code == 200
    assert second.status_code == 429
    assert second.headers["Retry-After"]
    assert second.headers["content-type"].startswith("image/svg+xml")
    assert "Too Many Requests" in second.text
    assert other_client.status_code == 200
    assert len(fake_github.calls_to("get_user")) == 2


def test_rotating_forwarded_for_does_not_bypass_limit(monkeypatch, fake_github) -> None:
    """Without a trusted proxy, X-Forwarded-For is ignored for client identity."""

    client = build_client(monkeypatch, fake_github, trust_forwarded_for=False)

    statuses = [
        client.get(
            "/api/svg?username=octocat",
            headers={"X-Forwarded-For": f"10.0.0.{index}"},
        ).status_code
        for index in range(5)
    ]

    assert statuses == [200, 429, 429, 429, 429]
    assert len(fake_github.calls_to("get_user")) == 1


def test_stale_clients_are_dropped(monkeypatch) -> None:
    """Clients idle for a full window no longer occupy the bucket table."""

    clock = [1000.0]
    monkeypatch.setattr("profile_svg.core.middleware.monotonic", lambda: clock[0])
    middleware = SvgRateLimitMiddleware(
        app=ok_response, requests_per_window=1, window_seconds=60
    )

    for index in range(5):
        asyncio.run(middleware.dispatch(svg_request(f"198.51.100.{index}"), ok_response))
    assert middleware.tracked_clients == 5

    clock[0] += 61
    response = asyncio.run(middleware.dispatch(svg_request("198.51.100.200"), ok_response))

    assert response.status_code == 200
    assert middleware.tracked_clients == 1


def test_forwarded_for_ignored_unless_trusted() -> None:
    """Peer address keys the bucket unless the proxy header is trusted."""

    untrusted = SvgRateLimitMiddleware(app=ok_response)
    trusted = SvgRateLimitMiddleware(app=ok_response, trust_forwarded_for=True)
    request = svg_request("192.0.2.1", forwarded_for="203.0.113.5, 10.0.0.1")

    assert untrusted._client_ip(request) == "192.0.2.1"
    assert trusted._client_ip(request) == "203.0.113.5"


def test_non_svg_routes_not_rate_limited(monkeypatch) -> None:
    """Rate limiter does not affect routes other than /api/svg."""

    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "60")
    app = create_app()
    client = TestClient(app)

    first = client.get("/")
    second = client.get("/")

    assert first.status_code == 200
    assert second.status_code == 200
