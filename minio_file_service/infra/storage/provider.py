"""MinIO file provider.

Adapts generic file operations (upload, delete, presigned URLs, buffer and
stream reads) onto an async S3 client pointed at a MinIO server. The bucket is
bootstrapped with a public-read policy on startup so that uploaded files are
reachable at ``{public_endpoint}/{bucket}/{key}``.

Example:
    ```python
    from minio_file_service.infra.storage import MinioFileProvider, ProviderUploadFile

    async with MinioFileProvider.from_settings(get_minio_settings()) as provider:
        result = await provider.upload(
            ProviderUploadFile(filename="shirt.jpg", mime_type="image/jpeg", content=data)
        )
        print(result.url)
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from minio_file_service.core.settings.minio import DEFAULT_BUCKET, MinioSettings

from .endpoint import parse_endpoint
from .exceptions import (
    StorageDownloadError,
    StorageNotConfiguredError,
    StoragePresignError,
    StorageUploadError,
    StorageValidationError,
    client_error_code,
    map_boto_error,
)
from .instrumentation import track_storage_operation
from .keys import build_public_url, generate_file_key
from .metrics import storage_client_initializations, storage_presigned_urls_generated
from .policy import public_read_policy_json
from .types import (
    ProviderDeleteFile,
    ProviderFileResult,
    ProviderGetFile,
    ProviderGetPresignedUploadUrl,
    ProviderUploadFile,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping, Sequence
    from types import TracebackType

logger = logging.getLogger(__name__)

REQUIRED_OPTIONS = ("endpoint", "access_key", "secret_key")

_MISSING_BUCKET_CODES = frozenset({"404", "NoSuchBucket", "NotFound"})


def _content_bytes(content: bytes | str) -> bytes:
    if isinstance(content, str):
        # Binary string: one character per byte.
        return content.encode("latin-1")
    return bytes(content)


@dataclass
class DownloadStream:
    """Async iterator over the body of an object opened for download.

    Iterating yields byte chunks of at most ``chunk_size`` and closes the
    underlying body once exhausted or abandoned. A stream that is never
    iterated must be released with :meth:`aclose`.
    """

    key: str
    body: Any
    chunk_size: int
    content_type: str | None = None
    content_length: int | None = None
    _closed: bool = field(default=False, init=False, repr=False)

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.body.iter_chunks(self.chunk_size):
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Release the connection behind the body. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.body.close()


class MinioFileProvider:
    """File provider backed by a MinIO bucket.

    The provider owns one long-lived aioboto3 S3 client, opened by
    :meth:`startup` (or ``async with``) and closed by :meth:`shutdown`.
    """

    identifier = "minio-file"

    def __init__(
        self,
        options: Mapping[str, Any],
        settings: MinioSettings | None = None,
    ) -> None:
        """Initialize the provider from its options.

        Args:
            options: Mapping with ``endpoint``, ``access_key``, ``secret_key``
                and optionally ``bucket`` and ``public_endpoint``.
            settings: Client tuning (retries, timeouts, URL expiries). Defaults
                to ``MinioSettings()``.

        Raises:
            StorageValidationError: If a required option is missing or the
                endpoint cannot be parsed.
        """
        self.validate_options(options)

        self.settings = settings or MinioSettings()
        self.bucket: str = options.get("bucket") or DEFAULT_BUCKET
        self.endpoint = parse_endpoint(options["endpoint"])
        self.public_endpoint: str = (
            options.get("public_endpoint") or self.endpoint.url
        ).rstrip("/")

        self._access_key: str = options["access_key"]
        self._secret_key: str = options["secret_key"]
        self._session = aioboto3.Session()
        self._client: Any = None
        self._client_context: Any = None

        logger.info("MinIO service initialized with bucket: %s", self.bucket)
        logger.info(
            "MinIO internal endpoint: %s",
            self.endpoint.url,
            extra={"protocol": self.endpoint.protocol, "port": self.endpoint.port},
        )
        logger.info("MinIO public endpoint: %s", self.public_endpoint)

    @classmethod
    def from_settings(cls, settings: MinioSettings) -> MinioFileProvider:
        """Build a provider from ``MINIO_*`` settings."""
        return cls(settings.to_provider_options(), settings=settings)

    @staticmethod
    def validate_options(options: Mapping[str, Any]) -> None:
        """Check the required provider options are present.

        Raises:
            StorageValidationError: Naming the first missing option.
        """
        for option in REQUIRED_OPTIONS:
            if not options.get(option):
                raise StorageValidationError(
                    f"{option} is required in the provider's options",
                    metadata={"field": option},
                )

    async def __aenter__(self) -> MinioFileProvider:
        """Open the client without bootstrapping the bucket."""
        await self.ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ──────────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────────

    async def startup(self) -> None:
        """Open the S3 client and bootstrap the bucket.

        Called during application startup. A bucket bootstrap failure is
        logged and re-raised, but the client stays open so the provider
        remains usable if the bucket already exists.
        """
        try:
            await self.ensure_client()
            storage_client_initializations.labels(status="success").inc()
        except Exception:
            storage_client_initializations.labels(status="error").inc()
            logger.exception("Failed to initialize MinIO client")
            raise

        try:
            await self.initialize_bucket()
        except Exception:
            logger.exception(
                "Error initializing bucket", extra={"bucket": self.bucket}
            )
            raise

    async def shutdown(self) -> None:
        """Close the S3 client gracefully."""
        if self._client is None:
            logger.debug("MinIO client not initialized, nothing to shutdown")
            return

        logger.info("Shutting down MinIO client")
        await self.close()
        logger.info("MinIO client shutdown complete")

    async def ensure_client(self) -> Any:
        """Ensure the S3 client is open and return it."""
        if self._client is None:
            boto_config = Config(
                retries={
                    "max_attempts": self.settings.max_retries,
                    "mode": self.settings.retry_mode,
                },
                connect_timeout=self.settings.timeout,
                read_timeout=self.settings.timeout,
                max_pool_connections=self.settings.max_pool_connections,
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            )
            self._client_context = self._session.client(
                "s3",
                endpoint_url=self.endpoint.url,
                aws_access_key_id=self._access_key,
                aws_secret_access_key=self._secret_key,
                region_name=self.settings.region,
                use_ssl=self.endpoint.use_ssl,
                verify=self.settings.verify_ssl,
                config=boto_config,
            )
            self._client = await self._client_context.__aenter__()

            logger.info(
                "MinIO client initialized",
                extra={
                    "endpoint": self.endpoint.url,
                    "bucket": self.bucket,
                    "region": self.settings.region,
                    "use_ssl": self.endpoint.use_ssl,
                    "verify_ssl": self.settings.verify_ssl,
                },
            )

        return self._client

    async def close(self) -> None:
        """Close the S3 client and clean up resources."""
        if self._client_context is not None:
            try:
                await self._client_context.__aexit__(None, None, None)
            except Exception as e:
                logger.warning("Error closing MinIO client: %s", e)
            finally:
                self._client = None
                self._client_context = None

    @property
    def is_ready(self) -> bool:
        """Check if the client is open and ready for operations."""
        return self._client is not None

    async def health_check(self) -> bool:
        """HEAD the bucket. Returns False instead of raising."""
        if self._client is None:
            return False

        try:
            await self._client.head_bucket(Bucket=self.bucket)
            return True
        except Exception as e:
            logger.warning(
                "MinIO health check failed",
                extra={"error": str(e), "bucket": self.bucket},
            )
            return False

    def _require_client(self) -> Any:
        if self._client is None:
            raise StorageNotConfiguredError(
                "MinIO client is not initialized",
                metadata={"bucket": self.bucket},
            )
        return self._client

    # ──────────────────────────────────────────────────────────────
    # Bucket bootstrap
    # ──────────────────────────────────────────────────────────────

    async def bucket_exists(self) -> bool:
        """Check whether the configured bucket exists."""
        s3 = await self.ensure_client()
        try:
            await s3.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            if client_error_code(e) in _MISSING_BUCKET_CODES:
                return False
            raise map_boto_error(
                e,
                operation="initialize_bucket",
                message=f"Failed to check bucket {self.bucket}: {e}",
            ) from e
        return True

    async def initialize_bucket(self) -> None:
        """Create the bucket if needed and apply the public-read policy.

        A new bucket must accept its policy; for an existing bucket a policy
        failure is only logged.
        """
        s3 = await self.ensure_client()
        policy = public_read_policy_json(self.bucket)

        if not await self.bucket_exists():
            try:
                create_kwargs: dict[str, Any] = {"Bucket": self.bucket}
                if self.settings.region != "us-east-1":
                    create_kwargs["CreateBucketConfiguration"] = {
                        "LocationConstraint": self.settings.region
                    }
                await s3.create_bucket(**create_kwargs)
                logger.info("Created bucket: %s", self.bucket)

                await s3.put_bucket_policy(Bucket=self.bucket, Policy=policy)
                logger.info("Set public read policy for new bucket: %s", self.bucket)
            except ClientError as e:
                raise map_boto_error(
                    e,
                    operation="initialize_bucket",
                    message=f"Failed to initialize bucket {self.bucket}: {e}",
                ) from e
            return

        logger.info("Using existing bucket: %s", self.bucket)
        try:
            await s3.put_bucket_policy(Bucket=self.bucket, Policy=policy)
            logger.info("Updated public read policy for existing bucket: %s", self.bucket)
        except (ClientError, BotoCoreError) as e:
            logger.warning("Failed to update policy for existing bucket: %s", e)

    # ──────────────────────────────────────────────────────────────
    # File operations
    # ──────────────────────────────────────────────────────────────

    async def upload(self, file: ProviderUploadFile | None) -> ProviderFileResult:
        """Upload a file under a unique key and return its public URL.

        Raises:
            StorageValidationError: If no file or no filename is given.
            StorageUploadError: If the object cannot be written.
        """
        if file is None:
            raise StorageValidationError("No file provided", metadata={"operation": "upload"})
        if not file.filename:
            raise StorageValidationError(
                "No filename provided", metadata={"operation": "upload"}
            )

        s3 = self._require_client()
        key = generate_file_key(file.filename)

        try:
            content = _content_bytes(file.content)
            put_kwargs: dict[str, Any] = {
                "Bucket": self.bucket,
                "Key": key,
                "Body": content,
                "ContentLength": len(content),
                # Header values must stay ASCII.
                "Metadata": {"original-filename": quote(file.filename)},
                "ACL": "public-read",
            }
            if file.mime_type:
                put_kwargs["ContentType"] = file.mime_type

            async with track_storage_operation(
                "upload",
                key=key,
                bucket=self.bucket,
                size_bytes=len(content),
                content_type=file.mime_type,
            ):
                await s3.put_object(**put_kwargs)

        except ClientError as e:
            logger.error("Failed to upload file: %s", e, extra={"key": key})
            raise map_boto_error(
                e,
                operation="upload",
                key=key,
                message=f"Failed to upload file: {e}",
                default=StorageUploadError,
            ) from e
        except Exception as e:
            logger.error("Failed to upload file: %s", e, extra={"key": key})
            raise StorageUploadError(
                f"Failed to upload file: {e}",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

        logger.info(
            "Successfully uploaded file %s to MinIO bucket %s",
            key,
            self.bucket,
            extra={"size_bytes": len(content), "content_type": file.mime_type},
        )
        return ProviderFileResult(
            url=build_public_url(self.public_endpoint, self.bucket, key),
            key=key,
        )

    async def delete(
        self, files: ProviderDeleteFile | Sequence[ProviderDeleteFile] | None
    ) -> None:
        """Delete one object or several, in order.

        A failed removal is logged and the remaining files are still processed.

        Raises:
            StorageValidationError: When a file has no key. Files before it
                have already been deleted.
        """
        if files is None or isinstance(files, ProviderDeleteFile):
            file_list: list[ProviderDeleteFile | None] = [files]
        else:
            file_list = list(files)

        s3 = self._require_client()

        for file in file_list:
            if file is None or not file.file_key:
                raise StorageValidationError(
                    "No file key provided", metadata={"operation": "delete"}
                )

            try:
                async with track_storage_operation(
                    "delete", key=file.file_key, bucket=self.bucket
                ):
                    await s3.delete_object(Bucket=self.bucket, Key=file.file_key)
            except (ClientError, BotoCoreError) as e:
                logger.warning(
                    "Failed to delete file %s: %s",
                    file.file_key,
                    e,
                    extra={"bucket": self.bucket},
                )
                continue

            logger.info(
                "Deleted file %s from MinIO bucket %s", file.file_key, self.bucket
            )

    async def get_presigned_download_url(self, file: ProviderGetFile | None) -> str:
        """Sign a GET URL for an object, valid for the configured download expiry.

        Raises:
            StorageValidationError: If no file key is given.
            StoragePresignError: If signing fails.
        """
        key = self._require_key(file, operation="presigned_download")
        s3 = self._require_client()
        expires_in = self.settings.download_url_expiry_seconds

        try:
            async with track_storage_operation(
                "presigned_download", key=key, bucket=self.bucket
            ):
                url = await s3.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.bucket, "Key": key},
                    ExpiresIn=expires_in,
                )
        except ClientError as e:
            logger.error(
                "Failed to generate presigned URL: %s",
                e,
                extra={"key": key, "bucket": self.bucket},
            )
            raise map_boto_error(
                e,
                operation="presigned_download",
                key=key,
                message=f"Failed to generate presigned URL: {e}",
                default=StoragePresignError,
            ) from e
        except Exception as e:
            logger.error(
                "Failed to generate presigned URL: %s",
                e,
                extra={"key": key, "bucket": self.bucket},
            )
            raise StoragePresignError(
                f"Failed to generate presigned URL: {e}",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

        storage_presigned_urls_generated.labels(type="download").inc()
        logger.info(
            "Generated presigned URL for file %s",
            key,
            extra={"expires_in": expires_in},
        )
        logger.debug("Presigned download URL: %s", url)
        return str(url)

    async def get_presigned_upload_url(
        self, file: ProviderGetPresignedUploadUrl | None
    ) -> ProviderFileResult:
        """Sign a PUT URL for ``file.filename``, valid for the configured upload expiry.

        The filename is used as the object key verbatim.

        Raises:
            StorageValidationError: If no filename is given.
            StoragePresignError: If signing fails.
        """
        if file is None or not file.filename:
            raise StorageValidationError(
                "No filename provided", metadata={"operation": "presigned_upload"}
            )

        key = file.filename
        s3 = self._require_client()
        expires_in = self.settings.upload_url_expiry_seconds

        try:
            async with track_storage_operation(
                "presigned_upload", key=key, bucket=self.bucket
            ):
                url = await s3.generate_presigned_url(
                    "put_object",
                    Params={"Bucket": self.bucket, "Key": key},
                    ExpiresIn=expires_in,
                )
        except ClientError as e:
            logger.error(
                "Failed to generate presigned upload URL: %s",
                e,
                extra={"key": key, "bucket": self.bucket},
            )
            raise map_boto_error(
                e,
                operation="presigned_upload",
                key=key,
                message=f"Failed to generate presigned upload URL: {e}",
                default=StoragePresignError,
            ) from e
        except Exception as e:
            logger.error(
                "Failed to generate presigned upload URL: %s",
                e,
                extra={"key": key, "bucket": self.bucket},
            )
            raise StoragePresignError(
                f"Failed to generate presigned upload URL: {e}",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

        storage_presigned_urls_generated.labels(type="upload").inc()
        logger.info(
            "Generated presigned upload URL for file %s",
            key,
            extra={"expires_in": expires_in},
        )
        logger.debug("Presigned upload URL: %s", url)
        return ProviderFileResult(url=str(url), key=key)

    async def get_as_buffer(self, file: ProviderGetFile | None) -> bytes:
        """Read an object's full contents into memory.

        Raises:
            StorageValidationError: If no file key is given.
            StorageDownloadError: If the object cannot be read.
        """
        key = self._require_key(file, operation="get_buffer")
        s3 = self._require_client()

        try:
            async with track_storage_operation(
                "get_buffer", key=key, bucket=self.bucket
            ) as ctx:
                response = await s3.get_object(Bucket=self.bucket, Key=key)
                raw = await response["Body"].read()
                data = raw if isinstance(raw, bytes) else bytes(raw)
                ctx["result_size"] = len(data)
        except ClientError as e:
            logger.error(
                "Failed to get buffer: %s",
                e,
                extra={"key": key, "bucket": self.bucket},
            )
            raise map_boto_error(
                e,
                operation="get_buffer",
                key=key,
                message=f"Failed to get buffer: {e}",
                default=StorageDownloadError,
            ) from e
        except Exception as e:
            logger.error(
                "Failed to get buffer: %s",
                e,
                extra={"key": key, "bucket": self.bucket},
            )
            raise StorageDownloadError(
                f"Failed to get buffer: {e}",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

        logger.info(
            "Retrieved buffer for file %s", key, extra={"size_bytes": len(data)}
        )
        return data

    async def get_download_stream(self, file: ProviderGetFile | None) -> DownloadStream:
        """Open an object and return an async iterator over its body.

        Raises:
            StorageValidationError: If no file key is given.
            StorageDownloadError: If the object cannot be opened.
        """
        key = self._require_key(file, operation="get_stream")
        s3 = self._require_client()

        try:
            async with track_storage_operation(
                "get_stream", key=key, bucket=self.bucket
            ):
                response = await s3.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            logger.error(
                "Failed to get download stream: %s",
                e,
                extra={"key": key, "bucket": self.bucket},
            )
            raise map_boto_error(
                e,
                operation="get_stream",
                key=key,
                message=f"Failed to get download stream: {e}",
                default=StorageDownloadError,
            ) from e
        except Exception as e:
            logger.error(
                "Failed to get download stream: %s",
                e,
                extra={"key": key, "bucket": self.bucket},
            )
            raise StorageDownloadError(
                f"Failed to get download stream: {e}",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

        logger.info("Retrieved download stream for file %s", key)
        return DownloadStream(
            key=key,
            body=response["Body"],
            chunk_size=self.settings.stream_chunk_size,
            content_type=response.get("ContentType"),
            content_length=response.get("ContentLength"),
        )

    @staticmethod
    def _require_key(file: ProviderGetFile | None, operation: str) -> str:
        if file is None or not file.file_key:
            raise StorageValidationError(
                "No file key provided", metadata={"operation": operation}
            )
        return file.file_key


__all__ = [
    "REQUIRED_OPTIONS",
    "DownloadStream",
    "MinioFileProvider",
]
