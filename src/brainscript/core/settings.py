"""Application settings and configuration.

This module defines all configuration options for the BrainScript Stage application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="BrainScript Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Bearer tokens are issued by the external identity provider and signed
    # with a secret shared with this service.
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_email_claim: str = Field(default="email", alias="JWT_EMAIL_CLAIM")

    # The one account no administrator can demote or delete.
    super_admin_email: str | None = Field(default=None, alias="SUPER_ADMIN_EMAIL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./brainscript.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Engagement aggregation
    trending_window_days: int = Field(default=7, alias="TRENDING_WINDOW_DAYS")
    trending_limit: int = Field(default=10, alias="TRENDING_LIMIT")
    trending_like_weight: int = Field(default=2, alias="TRENDING_LIKE_WEIGHT")
    trending_comment_weight: int = Field(default=3, alias="TRENDING_COMMENT_WEIGHT")
    popular_limit: int = Field(default=5, alias="POPULAR_LIMIT")
    recent_limit: int = Field(default=10, alias="RECENT_LIMIT")
    top_writers_scan_size: int = Field(default=100, alias="TOP_WRITERS_SCAN_SIZE")
    top_writers_limit: int = Field(default=12, alias="TOP_WRITERS_LIMIT")
    profile_recent_posts: int = Field(default=20, alias="PROFILE_RECENT_POSTS")

    # Presence tracking
    presence_active_seconds: int = Field(default=30, alias="PRESENCE_ACTIVE_SECONDS")
    presence_reader_cap: int = Field(default=20, alias="PRESENCE_READER_CAP")
    presence_anonymous_bucket: str = Field(default="anon", alias="PRESENCE_ANONYMOUS_BUCKET")

    # Read-time tracking (client side)
    read_time_min_flush_ms: int = Field(default=1000, alias="READ_TIME_MIN_FLUSH_MS")
    read_time_flush_interval_seconds: float = Field(
        default=30.0,
        alias="READ_TIME_FLUSH_INTERVAL_SECONDS",
    )
    read_time_http_timeout_seconds: float = Field(
        default=5.0,
        alias="READ_TIME_HTTP_TIMEOUT_SECONDS",
    )

    # Search and listing limits
    search_post_limit: int = Field(default=5, alias="SEARCH_POST_LIMIT")
    search_user_limit: int = Field(default=3, alias="SEARCH_USER_LIMIT")
    popular_tags_limit: int = Field(default=10, alias="POPULAR_TAGS_LIMIT")
    suggestions_scan_size: int = Field(default=100, alias="SUGGESTIONS_SCAN_SIZE")
    suggestions_limit: int = Field(default=10, alias="SUGGESTIONS_LIMIT")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def trending_weights(self) -> dict[str, int]:
        """Return the engagement score weights as a convenience dictionary."""
        return {
            "views": 1,
            "likes": self.trending_like_weight,
            "comments": self.trending_comment_weight,
        }


settings = Settings()  # type: ignore[call-arg]
