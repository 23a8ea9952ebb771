"""
Database schema migrator with versioned migrations.

Supports:
- Versioned SQL migrations (v001_, v002_, etc.)
- Migration tracking in schema_migrations table
- Seeding example inventory into an empty database
"""

import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings
from stockledger.core.exceptions import PersistenceError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

# (sku, name, quantity, cost_price, sell_price, category, location, min_stock)
EXAMPLE_ITEMS: list[tuple[str, str, int, str, str, str, str, int]] = [
    ("UQ001", "USB Cable", 120, "1.5", "3.5", "Electronics", "Shelf 1", 10),
    ("UQ002", "T-Shirt", 30, "5.0", "12.0", "Clothing", "Shelf 2", 5),
    ("UQ003", "Chips", 200, "0.5", "1.2", "Food", "Warehouse A", 20),
]


@dataclass
class MigrationInfo:
    """Information about a migration file."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        """Parse migration info from filename."""
        # Expected format: v001_name.sql
        match = re.match(r"v(\d+)_(.+)\.sql", path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        version = match.group(1)
        name = match.group(2)
        content = path.read_text(encoding="utf-8")
        checksum = hashlib.sha256(content.encode()).hexdigest()[:16]

        return cls(version=version, name=name, path=path, checksum=checksum)


@dataclass
class MigrationResult:
    """Result of a migration operation."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


async def ensure_migrations_table(conn: aiosqlite.Connection) -> None:
    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            checksum TEXT,
            applied_at TEXT DEFAULT (datetime('now')),
            execution_time_ms INTEGER
        )
        """
    )
    await conn.commit()


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Get dictionary of applied migration versions to checksums."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
        rows = await cursor.fetchall()
        return {row[0]: row[1] for row in rows}
    except aiosqlite.OperationalError:
        # Table doesn't exist yet
        return {}


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Discover all migration files in order."""
    migrations = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Apply a single migration."""
    logger.info(
        "applying_migration",
        version=migration.version,
        name=migration.name,
    )

    start_time = time.time()

    try:
        sql = migration.path.read_text(encoding="utf-8")
        await conn.executescript(sql)

        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (
                migration.version,
                migration.name,
                migration.checksum,
                int((time.time() - start_time) * 1000),
            ),
        )

        await conn.commit()

        execution_time = int((time.time() - start_time) * 1000)
        logger.info(
            "migration_applied",
            version=migration.version,
            name=migration.name,
            execution_time_ms=execution_time,
        )

        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=True,
            execution_time_ms=execution_time,
        )

    except aiosqlite.Error as e:
        await conn.rollback()
        execution_time = int((time.time() - start_time) * 1000)
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=execution_time,
            error=str(e),
        )


async def seed_example_items(conn: aiosqlite.Connection) -> int:
    """Insert the example items when the inventory table is empty.

    Returns the number of rows inserted.
    """
    cursor = await conn.execute("SELECT COUNT(*) FROM inventory")
    row = await cursor.fetchone()
    if row is not None and row[0] > 0:
        return 0

    await conn.executemany(
        """
        INSERT INTO inventory (
            sku, name, quantity, cost_price, sell_price,
            category, location, min_stock
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        EXAMPLE_ITEMS,
    )
    await conn.commit()
    logger.info("inventory_seeded", items=len(EXAMPLE_ITEMS))
    return len(EXAMPLE_ITEMS)


async def initialize_database(
    db_path: Path | None = None,
    seed: bool | None = None,
    migrations_dir: Path | None = None,
) -> list[MigrationResult]:
    """
    Initialize the database with all pending migrations.

    Args:
        db_path: Path to database file (default from settings)
        seed: Seed example items into an empty inventory (default from settings)
        migrations_dir: Directory holding v*.sql files (default: bundled)

    Returns:
        List of migration results
    """
    settings = get_settings()
    db_path = db_path or settings.storage.db_path
    seed = settings.ledger.seed_on_empty if seed is None else seed

    db_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("initializing_database", db_path=str(db_path))

    results: list[MigrationResult] = []

    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        await ensure_migrations_table(conn)

        applied = await get_applied_migrations(conn)

        for migration in discover_migrations(migrations_dir or MIGRATIONS_DIR):
            if migration.version in applied:
                if applied[migration.version] != migration.checksum:
                    logger.warning(
                        "migration_checksum_changed",
                        version=migration.version,
                    )
                continue

            result = await apply_migration(conn, migration)
            results.append(result)

            if not result.success:
                logger.error("migration_failed_stopping", version=migration.version)
                raise PersistenceError(
                    f"migration v{result.version}_{result.name}", result.error or "unknown"
                )

        # Only a brand-new database is seeded; an emptied one stays empty
        if seed and not applied:
            await seed_example_items(conn)

    return results

