"""Storage backends implementing the persistence gateway."""

from stockledger.infrastructure.storage.memory import InMemoryPersistenceGateway

__all__ = ["InMemoryPersistenceGateway"]
