from __future__ import annotations

import pytest
from pydantic import ValidationError

from jpashop.config import Settings


@pytest.mark.unit
def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "DB_POOL_MODE", "LOG_LEVEL", "LOG_FORMAT", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url.startswith("postgresql+asyncpg://")
    assert settings.db_pool_mode == "pooled"
    assert settings.default_batch_fetch_size == 100
    assert settings.open_session_in_view is False
    assert settings.log_format == "json"


@pytest.mark.unit
def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OPEN_SESSION_IN_VIEW", "true")
    monkeypatch.setenv("DEFAULT_BATCH_FETCH_SIZE", "10")

    settings = Settings(_env_file=None)

    assert settings.open_session_in_view is True
    assert settings.default_batch_fetch_size == 10


@pytest.mark.unit
def test_batch_size_must_be_positive(monkeypatch):
    monkeypatch.setenv("DEFAULT_BATCH_FETCH_SIZE", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.unit
def test_unknown_pool_mode_is_rejected(monkeypatch):
    monkeypatch.setenv("DB_POOL_MODE", "bogus")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
