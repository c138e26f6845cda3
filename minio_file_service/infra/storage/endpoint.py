"""MinIO endpoint parsing.

Endpoints are accepted with or without a scheme::

    parse_endpoint("minio.internal:9000")      # https://minio.internal:9000
    parse_endpoint("http://localhost:9000")    # http://localhost:9000
    parse_endpoint("https://cdn.example.com")  # https://cdn.example.com (port 443)

Anything the URL parser rejects falls back to a plain ``hostname[:port]`` split
over HTTPS.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from urllib.parse import urlsplit

from .exceptions import StorageValidationError

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class ParsedEndpoint:
    """Connection details extracted from an endpoint string.

    Attributes:
        protocol: ``"https:"`` or ``"http:"``.
        hostname: Host name without port.
        port: Explicit port, or the scheme's default port.
        host: ``hostname[:port]``; the port is omitted when it is the default.
    """

    protocol: str
    hostname: str
    port: int
    host: str

    @property
    def use_ssl(self) -> bool:
        return self.protocol == "https:"

    @property
    def url(self) -> str:
        """Base URL, e.g. ``http://localhost:9000``."""
        return f"{self.protocol}//{self.host}"


def _format_host(hostname: str, port: int, default_port: int) -> str:
    name = f"[{hostname}]" if ":" in hostname else hostname
    return name if port == default_port else f"{name}:{port}"


def _parse_host_port(endpoint: str) -> ParsedEndpoint:
    """Fallback for bare ``hostname:port`` strings, always over HTTPS."""
    bare = endpoint.split("://", 1)[-1].split("/", 1)[0]
    parts = bare.split(":")
    hostname = parts[0]
    port_part = parts[1] if len(parts) > 1 else ""

    if not hostname or (port_part and not port_part.isdigit()):
        raise StorageValidationError(
            f"Invalid MinIO endpoint: {endpoint}",
            metadata={"endpoint": endpoint},
        )

    port = int(port_part) if port_part else DEFAULT_PORTS["https"]
    if not 0 < port < 65536:
        raise StorageValidationError(
            f"Invalid MinIO endpoint port: {endpoint}",
            metadata={"endpoint": endpoint},
        )
    return ParsedEndpoint(
        protocol="https:",
        hostname=hostname,
        port=port,
        host=_format_host(hostname, port, DEFAULT_PORTS["https"]),
    )


def parse_endpoint(endpoint: str) -> ParsedEndpoint:
    """Parse an endpoint into protocol, hostname, port and host.

    Args:
        endpoint: Endpoint string, optionally prefixed with ``http://`` or ``https://``.

    Returns:
        The parsed endpoint.

    Raises:
        StorageValidationError: If the endpoint is blank or has no usable host/port.
    """
    endpoint = (endpoint or "").strip()
    if not endpoint:
        raise StorageValidationError("endpoint is required in the provider's options")

    url_string = endpoint
    if not endpoint.startswith(("http://", "https://")):
        url_string = f"https://{endpoint}"

    try:
        parts = urlsplit(url_string)
        if not parts.hostname:
            raise ValueError(f"no hostname in {url_string!r}")
        default_port = DEFAULT_PORTS[parts.scheme]
        port = parts.port if parts.port is not None else default_port
    except ValueError as e:
        logger.warning("Failed to parse endpoint URL, using fallback: %s", e)
        return _parse_host_port(endpoint)

    return ParsedEndpoint(
        protocol=f"{parts.scheme}:",
        hostname=parts.hostname,
        port=port,
        host=_format_host(parts.hostname, port, default_port),
    )
