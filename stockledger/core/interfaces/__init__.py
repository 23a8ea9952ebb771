"""Core interfaces (abstract base classes)."""

from stockledger.core.interfaces.persistence import IPersistenceGateway

__all__ = ["IPersistenceGateway"]
