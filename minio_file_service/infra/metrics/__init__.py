"""Prometheus metrics registry and shared collectors."""

from .prometheus import REGISTRY

__all__ = ["REGISTRY"]
