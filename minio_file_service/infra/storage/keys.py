"""Object key and URL helpers."""

from __future__ import annotations

from pathlib import PurePosixPath
from uuid import uuid4


def generate_unique_key() -> str:
    """Generate a compact unique identifier for object keys.

    Returns:
        UUID4 hex string (32 lowercase hex characters, no hyphens).
    """
    return uuid4().hex


def generate_file_key(filename: str) -> str:
    """Build the object key for an uploaded file.

    The key keeps the original stem and extension around a unique id so
    repeated uploads of the same filename never collide. Only the final path
    component of ``filename`` is used.

    Example:
        ```python
        generate_file_key("photos/summer shirt.jpg")
        # Returns: "summer shirt-3f2a9c...e1.jpg"

        generate_file_key("archive.tar.gz")
        # Returns: "archive.tar-3f2a9c...e1.gz"
        ```
    """
    path = PurePosixPath(filename.replace("\\", "/"))
    return f"{path.stem}-{generate_unique_key()}{path.suffix}"


def build_public_url(public_endpoint: str, bucket: str, key: str) -> str:
    """Path-style public URL for an object: ``{endpoint}/{bucket}/{key}``."""
    return f"{public_endpoint.rstrip('/')}/{bucket}/{key}"
