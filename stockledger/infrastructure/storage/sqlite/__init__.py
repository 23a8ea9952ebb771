"""SQLite storage implementation."""

from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool
from stockledger.infrastructure.storage.sqlite.gateway import SQLiteGateway
from stockledger.infrastructure.storage.sqlite.migrations import initialize_database

__all__ = [
    "ConnectionPool",
    "SQLiteGateway",
    "initialize_database",
]
