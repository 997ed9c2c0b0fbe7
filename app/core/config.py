"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "ScamSafe"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./scamsafe.db"

    # Admin auth (JWT bearer)
    secret_key: str = "change-me-in-production-use-env"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12  # 12 hours
    admin_password_hash: str | None = None

    # Lexical gate
    dictionary_path: str | None = None  # plain wordlist, one word per line
    dictionary_auto_download: bool = False  # fetch nltk "words" corpus if missing
    word_validity_threshold: float = 0.6

    # Toxicity classifier (Perspective API); no key -> check skipped
    perspective_api_key: str | None = None
    perspective_api_url: str = "https://commentanalyzer.googleapis.com/v1alpha1/comments:analyze"
    toxicity_timeout_seconds: float = 5.0
    toxicity_threshold: float = 0.8

    # Story lifecycle
    store_rejected_stories: bool = True  # keep rejected submissions for audit
    moderation_auto_approve: bool = True
    hold_stories_with_contact_details: bool = False
    stories_list_limit: int = 100
    pending_list_limit: int = 200

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
