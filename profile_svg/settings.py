from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    github_token: str | None = None
    github_api_base_url: str = "https://api.github.com"
    github_graphql_url: str = "https://api.github.com/graphql"
    http_timeout_seconds: float = 20.0
    default_username: str = "johndoe"
    port: int = 5000
    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["*"]
    profile_content_path: str | None = None
    cache_control: str = "s-maxage=3600, stale-while-revalidate"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60
    trust_forwarded_for: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
