"""Configuration management for the Slack→vault pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """App configuration derived from environment variables."""

    slack_api_token: str | None = Field(None, alias="SLACK_API_TOKEN")
    slack_cookie: str | None = Field(None, alias="SLACK_COOKIE")

    vault_path: Path = Field(Path("."), alias="VAULT_PATH")
    attachment_folder_path: str | None = Field(None, alias="ATTACHMENT_FOLDER_PATH")

    get_users: bool = Field(False, alias="GET_USERS")
    get_reactions: bool = Field(False, alias="GET_REACTIONS")
    get_channel_info: bool = Field(False, alias="GET_CHANNEL_INFO")
    get_attachments: bool = Field(False, alias="GET_ATTACHMENTS")
    get_team_info: bool = Field(False, alias="GET_TEAM_INFO")

    http_timeout: float = Field(30, alias="HTTP_TIMEOUT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator(
        "slack_api_token",
        "slack_cookie",
        "attachment_folder_path",
        mode="before",
    )
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL {value!r}")
        return level

    @field_validator("http_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("HTTP_TIMEOUT must be positive")
        return value

    @property
    def feature_flags(self) -> dict[str, bool]:
        """Flags handed to the conversation fetch function."""
        return {
            "get_users": self.get_users,
            "get_reactions": self.get_reactions,
            "get_channel_info": self.get_channel_info,
            "get_attachments": self.get_attachments,
            "get_team_info": self.get_team_info,
        }

    @property
    def store_overrides(self) -> dict[str, str]:
        """Vault config keys forced from the environment."""
        if self.attachment_folder_path is None:
            return {}
        return {"attachmentFolderPath": self.attachment_folder_path}
