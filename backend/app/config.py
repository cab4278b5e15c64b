"""Application configuration."""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings from env."""

    # Stack Exchange is public; a key only raises the daily quota
    stackexchange_base_url: str = "https://api.stackexchange.com/2.3"
    stackexchange_site: str = "stackoverflow"
    stackexchange_key: str = ""

    reddit_client_id: str = ""
    reddit_client_secret: str = ""
    reddit_refresh_token: str = ""
    reddit_user_agent: str = "devsearch/0.1"

    email_user: str = ""
    email_pass: str = ""
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    email_subject: str = "Search Results from StackOverflow and Reddit"

    max_results_per_source: int = 10
    detail_fetch_workers: int = 5
    request_timeout_seconds: float = 10.0

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
