"""Infrastructure adapters (storage, logging, metrics, tracing)."""
