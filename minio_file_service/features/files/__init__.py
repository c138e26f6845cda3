"""Files feature: upload, download, presign and delete over HTTP."""

from __future__ import annotations

from .router import router

__all__ = ["router"]
