# ruff: noqa: INP001
"""Settings validation tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from taskdeck.core.config import AuthMode, Settings

TOKEN_ERROR = (
    "LOCAL_AUTH_TOKEN must be at least 50 characters and non-placeholder when AUTH_MODE=local"
)
VALID_TOKEN = "a" * 50


def test_local_mode_requires_non_empty_token() -> None:
    with pytest.raises(ValidationError, match=TOKEN_ERROR):
        Settings(_env_file=None, auth_mode=AuthMode.LOCAL, local_auth_token="")


def test_local_mode_requires_minimum_length() -> None:
    with pytest.raises(ValidationError, match=TOKEN_ERROR):
        Settings(_env_file=None, auth_mode=AuthMode.LOCAL, local_auth_token="x" * 49)


def test_local_mode_rejects_placeholder_token() -> None:
    with pytest.raises(ValidationError, match=TOKEN_ERROR):
        Settings(_env_file=None, auth_mode=AuthMode.LOCAL, local_auth_token="change-me")


def test_local_mode_accepts_real_token() -> None:
    settings = Settings(_env_file=None, auth_mode=AuthMode.LOCAL, local_auth_token=VALID_TOKEN)

    assert settings.auth_mode == AuthMode.LOCAL
    assert settings.local_auth_token == VALID_TOKEN


def test_clerk_mode_requires_secret_key() -> None:
    with pytest.raises(
        ValidationError,
        match="CLERK_SECRET_KEY must be set and non-empty when AUTH_MODE=clerk",
    ):
        Settings(_env_file=None, auth_mode=AuthMode.CLERK, clerk_secret_key="")


def test_unknown_default_timezone_is_rejected() -> None:
    with pytest.raises(ValidationError, match="DEFAULT_TIMEZONE must be an IANA timezone"):
        Settings(
            _env_file=None,
            auth_mode=AuthMode.LOCAL,
            local_auth_token=VALID_TOKEN,
            default_timezone="Mars/Olympus_Mons",
        )


def test_page_sizes_default_to_list_page_conventions() -> None:
    settings = Settings(_env_file=None, auth_mode=AuthMode.LOCAL, local_auth_token=VALID_TOKEN)

    assert settings.tasks_page_size == 10
    assert settings.notifications_page_size == 20


def test_dev_enables_auto_migrate_unless_explicitly_set(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DB_AUTO_MIGRATE", raising=False)

    implicit = Settings(
        _env_file=None,
        auth_mode=AuthMode.LOCAL,
        local_auth_token=VALID_TOKEN,
        environment="dev",
    )
    explicit = Settings(
        _env_file=None,
        auth_mode=AuthMode.LOCAL,
        local_auth_token=VALID_TOKEN,
        environment="dev",
        db_auto_migrate=False,
    )
    prod = Settings(
        _env_file=None,
        auth_mode=AuthMode.LOCAL,
        local_auth_token=VALID_TOKEN,
        environment="prod",
    )

    assert implicit.db_auto_migrate is True
    assert explicit.db_auto_migrate is False
    assert prod.db_auto_migrate is False
