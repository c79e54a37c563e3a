"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Roster
    roster_backend: Literal["notion", "database"] = Field(
        default="notion",
        description="Where members and weekly assignments are stored",
    )

    # Notion
    notion_token: str = Field(default="", description="Notion integration token")
    team_database_id: str = Field(default="", description="Notion database holding members")
    roster_database_id: str = Field(
        default="",
        description="Notion database holding weekly assignments",
    )
    notion_api_base_url: str = Field(default="https://api.notion.com/v1/")
    notion_version: str = Field(default="2022-06-28")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./firechief.db",
        description="SQLAlchemy async URL, used when roster_backend is 'database'",
    )

    # Slack
    slack_bot_token: str = Field(default="", description="Slack bot token (xoxb-...)")
    slack_public_channel_id: str = Field(default="")
    slack_internal_channel_id: str = Field(default="")
    slack_api_base_url: str = Field(default="https://slack.com/api/")

    # Outbound HTTP
    http_timeout: float = Field(default=10.0, description="Per-request timeout in seconds")

    # Workflows
    handover_enabled: bool = Field(
        default=False,
        description="Send a handover message pairing outgoing and incoming chiefs",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def uses_database(self) -> bool:
        """Check if the SQL roster backend is selected."""
        return self.roster_backend == "database"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
