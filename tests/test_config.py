from pathlib import Path

import pytest
from pydantic import ValidationError

from slack_vault.config import Settings

ENV_KEYS = (
    "SLACK_API_TOKEN",
    "SLACK_COOKIE",
    "VAULT_PATH",
    "ATTACHMENT_FOLDER_PATH",
    "GET_USERS",
    "GET_REACTIONS",
    "GET_CHANNEL_INFO",
    "GET_ATTACHMENTS",
    "GET_TEAM_INFO",
    "HTTP_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.slack_api_token is None
    assert settings.vault_path == Path(".")
    assert settings.store_overrides == {}
    assert settings.log_level == "INFO"
    assert not any(settings.feature_flags.values())


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SLACK_API_TOKEN", "xoxc-1")
    monkeypatch.setenv("SLACK_COOKIE", "xoxd-1")
    monkeypatch.setenv("VAULT_PATH", "/tmp/vault")
    monkeypatch.setenv("ATTACHMENT_FOLDER_PATH", "slack")
    monkeypatch.setenv("GET_USERS", "true")
    monkeypatch.setenv("GET_TEAM_INFO", "1")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.slack_cookie == "xoxd-1"
    assert settings.vault_path == Path("/tmp/vault")
    assert settings.store_overrides == {"attachmentFolderPath": "slack"}
    assert settings.feature_flags == {
        "get_users": True,
        "get_reactions": False,
        "get_channel_info": False,
        "get_attachments": False,
        "get_team_info": True,
    }
    assert settings.log_level == "DEBUG"


def test_blank_strings_become_none(monkeypatch):
    monkeypatch.setenv("SLACK_COOKIE", "  ")
    monkeypatch.setenv("ATTACHMENT_FOLDER_PATH", "")

    settings = Settings(_env_file=None)

    assert settings.slack_cookie is None
    assert settings.attachment_folder_path is None


def test_unknown_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("HTTP_TIMEOUT", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
