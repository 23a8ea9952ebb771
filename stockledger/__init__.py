"""Stock Ledger: inventory catalog and sales ledger service."""

__version__ = "1.0.0"
