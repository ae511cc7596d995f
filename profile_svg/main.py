import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from profile_svg.api.routes.svg import router
from profile_svg.content import load_profile_content
from profile_svg.core.middleware import SvgRateLimitMiddleware
from profile_svg.core.observability import configure_logging
from profile_svg.core.observability import init_sentry
from profile_svg.settings import Settings


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application from environment settings."""

    app_settings = app_settings or Settings()
    configure_logging(app_settings.log_level)
    init_sentry(app_settings)

    app = FastAPI(title="GitHub Profile SVG")
    app.state.settings = app_settings
    app.state.profile_content = load_profile_content(
        app_settings.profile_content_path
    )

    app.add_middleware(
        SvgRateLimitMiddleware,
        requests_per_window=app_settings.rate_limit_per_minute,
        window_seconds=app_settings.rate_limit_window_seconds,
        trust_forwarded_for=app_settings.trust_forwarded_for,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_allow_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    settings = Settings()
    uvicorn.run(
        "profile_svg.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
