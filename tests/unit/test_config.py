"""Settings validation and caching."""

import pytest
from pydantic import ValidationError

from subject_vault.core.config import Settings, get_settings

_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("DATABASE_URL", "LEDGER_ENABLED", "LEDGER_URL", "VAULT_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_database_url_required() -> None:
    with pytest.raises(ValidationError, match="DATABASE_URL is required"):
        Settings(_env_file=None, ledger_enabled=False)


def test_ledger_url_required_when_enabled() -> None:
    with pytest.raises(ValidationError, match="LEDGER_URL is required"):
        Settings(_env_file=None, database_url=_DB_URL)


def test_defaults() -> None:
    settings = Settings(_env_file=None, database_url=_DB_URL, ledger_enabled=False)
    assert settings.vault_page_size == 10
    assert settings.allow_reinitialize_after_erasure is False
    assert settings.telemetry_enabled is False
    assert settings.ledger_api_token is None


def test_page_size_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url=_DB_URL, ledger_enabled=False, vault_page_size=0)


def test_loaded_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", _DB_URL)
    monkeypatch.setenv("LEDGER_URL", "https://ledger.example.test")
    monkeypatch.setenv("VAULT_PAGE_SIZE", "25")
    settings = Settings(_env_file=None)
    assert settings.ledger_enabled is True
    assert settings.ledger_url == "https://ledger.example.test"
    assert settings.vault_page_size == 25


def test_ledger_token_is_secret() -> None:
    settings = Settings(
        _env_file=None,
        database_url=_DB_URL,
        ledger_url="https://ledger.example.test",
        ledger_api_token="t0ken",
    )
    assert "t0ken" not in repr(settings)
    assert settings.ledger_api_token.get_secret_value() == "t0ken"
