"""HTTP middleware."""

from __future__ import annotations

from .metrics import MetricsMiddleware
from .request_id import RequestIDMiddleware

__all__ = ["MetricsMiddleware", "RequestIDMiddleware"]
