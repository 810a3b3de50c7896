"""vault_lifespan wiring: settings -> engine, ledger, service; shutdown disposes resources."""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from subject_vault.core.config import Settings
from subject_vault.core.lifespan import vault_lifespan
from subject_vault.domain.enums import SubjectStatus
from subject_vault.domain.exceptions import ResourceNotFoundException
from subject_vault.infrastructure.persistence.database import create_schema
from subject_vault.shared.telemetry import TelemetryConfig, get_telemetry

pytestmark = pytest.mark.requires_db


@pytest.fixture
async def database_url(tmp_path) -> str:
    """File-backed SQLite database with the vault schema already created."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}"
    eng = create_async_engine(url)
    await create_schema(eng)
    await eng.dispose()
    return url


async def test_lifespan_yields_working_service(database_url: str) -> None:
    settings = Settings(
        _env_file=None,
        database_url=database_url,
        ledger_enabled=False,
        telemetry_enabled=False,
        vault_page_size=5,
    )
    async with vault_lifespan(settings) as vault:
        assert vault.page_size == 5
        await vault.initialize_user("s1", {"name": "Alice"})
        await vault.associate_processor("s1", "p1")
        assert await vault.get_subject_data("s1") == {"name": "Alice"}

        result = await vault.erase_data_and_revoke_consent("s1")
        assert result.ledger_recorded is True
        assert result.ledger_receipt.transaction_id.startswith("local-")
        assert await vault.get_subject_status("s1") == SubjectStatus.ERASED
        with pytest.raises(ResourceNotFoundException):
            await vault.get_subject_data("s1")


async def test_data_survives_across_lifespans(database_url: str) -> None:
    settings = Settings(_env_file=None, database_url=database_url, ledger_enabled=False)
    async with vault_lifespan(settings) as vault:
        await vault.initialize_user("s1", ["a", 1])
    async with vault_lifespan(settings) as vault:
        assert await vault.get_subject_data("s1") == ["a", 1]


async def test_lifespan_registers_and_clears_telemetry(
    database_url: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(TelemetryConfig, "instrument_logging", lambda self: None)
    monkeypatch.setattr(TelemetryConfig, "instrument_sqlalchemy", lambda self, engine: None)
    settings = Settings(
        _env_file=None,
        database_url=database_url,
        ledger_enabled=False,
        telemetry_enabled=True,
        telemetry_exporter="none",
    )
    async with vault_lifespan(settings) as vault:
        telemetry = get_telemetry()
        assert telemetry is not None
        assert telemetry.tracer_provider is not None
        await vault.initialize_user("s1", {"name": "Alice"})
    assert get_telemetry() is None
