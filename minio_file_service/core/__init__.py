"""Core building blocks shared across the service."""
