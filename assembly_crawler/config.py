"""
Configuration management for the Assembly crawler.

Supports multiple environments (local, development, production) with
different database settings and crawler tuning knobs.

Responsibility: Centralized configuration and environment management
"""

from enum import Enum
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class Environment(str, Enum):
    """Deployment environment"""
    LOCAL = "local"
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    # Connection settings - prioritize DATABASE_URL env var
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    driver: str = Field(default="postgresql+asyncpg")
    host: Optional[str] = Field(default="localhost")
    port: Optional[int] = Field(default=5432)
    database: str = Field(default="politics")
    username: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)

    # Connection pool settings
    pool_size: int = Field(default=5)
    max_overflow: int = Field(default=10)
    pool_timeout: int = Field(default=30)
    pool_recycle: int = Field(default=3600)

    # Query settings
    echo: bool = Field(default=False)
    echo_pool: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True  # Allow alias matching
    )

    @property
    def connection_string(self) -> str:
        """
        Build database connection string.

        Returns:
            SQLAlchemy async connection string
        """
        if self.database_url:
            url = self.database_url
            # Ensure async driver for async connections
            if url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            elif url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql+asyncpg://", 1)
            elif url.startswith("sqlite://"):
                url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
            return url

        if self.driver.startswith("sqlite"):
            # Local file database; "database" is the file path
            return f"{self.driver}:///{self.database}"

        auth = ""
        if self.username:
            auth = self.username
            if self.password:
                auth = f"{auth}:{self.password}"
            auth = f"{auth}@"

        host_port = self.host or "localhost"
        if self.port:
            host_port = f"{host_port}:{self.port}"

        return f"{self.driver}://{auth}{host_port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured backend is SQLite"""
        return self.connection_string.startswith("sqlite")


class CrawlerConfig(BaseSettings):
    """Browser crawler configuration"""

    headless: bool = Field(default=True)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    # Legislative notice system (ongoing notices)
    bills_listing_url: str = Field(
        default=(
            "https://pal.assembly.go.kr/napal/lgsltpa/lgsltpaOngoing/list.do"
            "?menuNo=1100026&pageIndex={page}"
        ),
        description="Listing URL template, {page} is replaced by the 1-based page index"
    )
    bills_link_pattern: str = Field(default="view.do")
    bills_max_pages: int = Field(default=10, ge=1)

    # National consent petitions
    petitions_listing_url: str = Field(
        default="https://petitions.assembly.go.kr/proceed/onGoingAll"
    )
    petitions_base_url: str = Field(default="https://petitions.assembly.go.kr")
    petition_agree_goal: int = Field(default=50000, ge=1)
    petition_window_days: int = Field(default=30)

    # Politeness delays (milliseconds)
    page_delay_ms: int = Field(default=1000, ge=0)
    item_delay_ms: int = Field(default=500, ge=0)
    petitions_settle_ms: int = Field(default=3000, ge=0)

    # Navigation timeouts (milliseconds)
    listing_timeout_ms: int = Field(default=60000)
    detail_timeout_ms: int = Field(default=30000)
    detail_selector_timeout_ms: int = Field(default=5000)

    # Schedules
    timezone: str = Field(default="Asia/Seoul")
    bills_cron: str = Field(default="0 6,18 * * *")
    petitions_cron: str = Field(default="0 * * * *")
    sweep_cron: str = Field(default="30 0 * * *")

    model_config = SettingsConfigDict(
        env_prefix="CRAWLER_",
        case_sensitive=False,
        extra="ignore"
    )


class AppConfig(BaseSettings):
    """Application configuration"""

    # Environment
    environment: Environment = Field(default=Environment.LOCAL)
    debug: bool = Field(default=True)

    # Application metadata
    app_name: str = Field(default="Assembly Crawler")
    app_version: str = Field(default="1.0.0")

    # Logging
    log_level: str = Field(default="INFO")

    # API settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names from the environment"""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class Settings(BaseSettings):
    """
    Global settings container.

    Loads configuration from:
    1. Environment variables
    2. .env file
    3. Default values

    Example:
        # Local development (SQLite file)
        settings = Settings(
            db=DatabaseConfig(driver="sqlite+aiosqlite", database="local.db")
        )

        # Production (PostgreSQL)
        settings = Settings.for_production()
    """

    app: AppConfig = Field(default_factory=AppConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @classmethod
    def for_production(cls) -> "Settings":
        """
        Create settings for production (PostgreSQL, headless browser).

        Requires environment variables:
        - DATABASE_URL or DB_HOST, DB_PORT, DB_DATABASE, DB_USERNAME, DB_PASSWORD
        """
        return cls(
            app=AppConfig(
                environment=Environment.PRODUCTION,
                debug=False,
                log_level="INFO"
            ),
            db=DatabaseConfig(driver="postgresql+asyncpg"),
            crawler=CrawlerConfig(headless=True),
        )


# Global settings instance
settings = Settings()
