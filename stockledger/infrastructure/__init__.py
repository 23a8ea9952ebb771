"""Infrastructure adapters: persistence backends."""
