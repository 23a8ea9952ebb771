"""
Service factory functions for dependency injection.

Wires a persistence gateway chosen from settings to the inventory ledger
engine and keeps a single process-wide instance.
"""

from stockledger.config import Settings, get_logger, get_settings
from stockledger.core.interfaces.persistence import IPersistenceGateway
from stockledger.core.services.engine import InventoryLedgerEngine
from stockledger.core.services.sku_allocator import SkuAllocator

logger = get_logger(__name__)

# Singleton engine instance
_engine: InventoryLedgerEngine | None = None


async def create_gateway(settings: Settings | None = None) -> IPersistenceGateway:
    """
    Create the persistence gateway for the configured backend.

    For SQLite, pending migrations are applied (and an empty database
    seeded) before the gateway is returned.
    """
    settings = settings or get_settings()

    if settings.storage.backend == "memory":
        from stockledger.infrastructure.storage.memory import InMemoryPersistenceGateway

        return InMemoryPersistenceGateway()

    # SQLite infrastructure is only imported when selected
    from stockledger.infrastructure.storage.sqlite import (
        ConnectionPool,
        SQLiteGateway,
        initialize_database,
    )

    await initialize_database(
        settings.storage.db_path,
        seed=settings.ledger.seed_on_empty,
    )
    return SQLiteGateway(
        pool=ConnectionPool.from_settings(settings.storage),
        write_retries=settings.storage.write_retries,
        retry_delay=settings.storage.retry_delay,
    )


async def build_engine(
    gateway: IPersistenceGateway | None = None,
    settings: Settings | None = None,
) -> InventoryLedgerEngine:
    """
    Build and load an engine.

    Args:
        gateway: Optional gateway override
        settings: Optional settings override

    Returns:
        Engine with catalog and ledger loaded from the gateway
    """
    settings = settings or get_settings()
    gateway = gateway or await create_gateway(settings)

    allocator = SkuAllocator(
        prefix=settings.ledger.sku_prefix,
        width=settings.ledger.sku_width,
    )
    engine = InventoryLedgerEngine(gateway, allocator=allocator)
    await engine.load()
    return engine


async def get_engine() -> InventoryLedgerEngine:
    """Get or create the process-wide engine."""
    global _engine
    if _engine is None:
        _engine = await build_engine()
        logger.info("engine_ready", backend=get_settings().storage.backend)
    return _engine


async def close_engine() -> None:
    """Close the process-wide engine and its gateway."""
    global _engine
    if _engine is not None:
        await _engine.close()
        _engine = None


def reset_services() -> None:
    """Forget the engine without closing it (for testing)."""
    global _engine
    _engine = None
