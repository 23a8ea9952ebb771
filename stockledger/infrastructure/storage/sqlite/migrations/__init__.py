"""Database migrations."""

from stockledger.infrastructure.storage.sqlite.migrations.migrator import (
    initialize_database,
    seed_example_items,
)

__all__ = ["initialize_database", "seed_example_items"]
