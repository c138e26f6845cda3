"""MinIO-backed file provider service."""

__version__ = "0.1.0"
