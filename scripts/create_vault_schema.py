"""Create the vault tables directly from the ORM models (local development only).

Usage:
    python -m scripts.create_vault_schema
Production databases are migrated with: alembic upgrade head
"""

import asyncio

from subject_vault.core.config import get_settings
from subject_vault.infrastructure.persistence.database import build_engine, create_schema


async def main() -> None:
    settings = get_settings()
    engine = build_engine(settings)
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()
    print("Vault schema created")


if __name__ == "__main__":
    asyncio.run(main())
