"""Vault runtime lifespan: startup and shutdown.

Single place for all startup/shutdown logic. No business logic here, only
wiring of infrastructure (logging, telemetry, SQL engine, ledger client).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from subject_vault.application.use_cases.subjects import SubjectVaultService
from subject_vault.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def vault_lifespan(
    settings: Settings | None = None,
) -> AsyncIterator[SubjectVaultService]:
    """Run startup, yield a ready SubjectVaultService, then run shutdown.

    Startup order: logging, telemetry (if enabled), SQL engine, ledger
    notifier. Shutdown order: ledger client close, SQL engine dispose,
    telemetry shutdown.
    """
    from subject_vault.infrastructure.composition import build_subject_vault_service
    from subject_vault.infrastructure.external.ledger import LedgerFactory
    from subject_vault.infrastructure.persistence.database import (
        build_engine,
        build_session_factory,
    )
    from subject_vault.shared.telemetry.logging import setup_logging
    from subject_vault.shared.telemetry.telemetry import (
        TelemetryConfig,
        get_telemetry,
        set_telemetry,
    )

    settings = settings or get_settings()

    # ---- Startup ----
    setup_logging(settings)

    telemetry: TelemetryConfig | None = None
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_logging()
        set_telemetry(telemetry)
        logger.info("Telemetry initialized")

    engine = build_engine(settings)
    if telemetry is not None:
        telemetry.instrument_sqlalchemy(engine)
    ledger = LedgerFactory.create_ledger(settings)
    service = build_subject_vault_service(settings, build_session_factory(engine), ledger)

    try:
        yield service
    finally:
        # ---- Shutdown ----
        await ledger.aclose()
        logger.info("Ledger client closed")
        await engine.dispose()
        logger.info("Database engine disposed")
        telemetry_instance = get_telemetry()
        if telemetry_instance is not None:
            telemetry_instance.shutdown()
            set_telemetry(None)
