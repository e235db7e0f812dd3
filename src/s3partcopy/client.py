"""S3 client facade for s3partcopy.

Owns the HTTP connection pool, the resolved credentials and the request
dispatcher, and exposes the UploadPartCopy operation.

Credentials come from the ``credentials`` config section when both keys
are set, otherwise from the standard AWS credential chain (env vars,
~/.aws/credentials, IAM role, etc.) via aiobotocore.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from aiobotocore.session import AioSession
from botocore.exceptions import NoCredentialsError

from s3partcopy import metrics
from s3partcopy.config import S3PartCopyConfig
from s3partcopy.copy_part import (
    COPY_SOURCE_HEADER,
    CopyPartRequest,
    CopySourceOptions,
    build_upload_part_copy_request,
)
from s3partcopy.dispatcher import Dispatcher
from s3partcopy.signer import SigV4Signer
from s3partcopy.validation import (
    validate_bucket_name,
    validate_object_key,
    validate_part_number,
    validate_upload_id,
)

logger = logging.getLogger(__name__)


class S3Client:
    """Asynchronous client for an S3-compatible object store.

    Use ``init()``/``close()`` explicitly or as an async context manager::

        async with S3Client(config) as client:
            resp = await client.upload_part_copy(
                "dst", "big.bin", upload_id, 3, "src", "orig file.bin"
            )

    Attributes:
        config: The client configuration.
    """

    def __init__(
        self,
        config: S3PartCopyConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or S3PartCopyConfig()
        self._transport = transport
        self._session = AioSession()
        self._http: httpx.AsyncClient | None = None
        self._dispatcher: Dispatcher | None = None

    async def __aenter__(self) -> "S3Client":
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def init(self) -> None:
        """Resolve credentials and open the HTTP connection pool.

        Raises:
            NoCredentialsError: If neither the config nor the AWS credential
                chain provides credentials.
        """
        access_key, secret_key, session_token = await self._resolve_credentials()

        if self.config.metrics.enabled:
            metrics.init_metrics()

        endpoint = self.config.endpoint
        self._http = httpx.AsyncClient(
            timeout=self.config.client.timeout,
            transport=self._transport,
        )
        self._dispatcher = Dispatcher(
            http_client=self._http,
            signer=SigV4Signer(
                access_key=access_key,
                secret_key=secret_key,
                region=endpoint.region,
                session_token=session_token,
            ),
            scheme=endpoint.scheme,
            port=endpoint.port,
            retry=self.config.retry,
        )

        logger.info(
            "S3 client initialized: endpoint=%s://%s region=%s path_style=%s",
            endpoint.scheme,
            endpoint.host,
            endpoint.region,
            endpoint.path_style,
        )

    async def close(self) -> None:
        """Close the HTTP connection pool."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None
            self._dispatcher = None

    async def _resolve_credentials(self) -> tuple[str, str, str]:
        creds = self.config.credentials
        if creds.access_key_id and creds.secret_access_key:
            return creds.access_key_id, creds.secret_access_key, creds.session_token

        resolved = await self._session.get_credentials()
        if resolved is None:
            raise NoCredentialsError()
        frozen = await resolved.get_frozen_credentials()
        return frozen.access_key, frozen.secret_key, frozen.token or ""

    @property
    def dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            raise RuntimeError("S3Client is not initialized; call init() first")
        return self._dispatcher

    async def upload_part_copy(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        part_number: int,
        source_bucket: str,
        source_key: str,
        options: CopySourceOptions | Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Upload a multipart part by copying bytes from an existing object.

        Args:
            bucket: Destination bucket.
            key: Destination object key.
            upload_id: Identifier of the multipart upload to add the part to.
            part_number: Index of the part in the upload (1-based).
            source_bucket: Bucket holding the source object.
            source_key: Key of the source object.
            options: Either ``CopySourceOptions`` or a mapping of header names
                (``x-amz-copy-source-range``, ``x-amz-copy-source-if-match``,
                ...) to values, optionally with a ``version_id`` entry. The
                mapping is read, never modified.

        Returns:
            The provider response, unmodified. Use
            ``CopyPartResult.from_response`` to read the new part's ETag.

        Raises:
            S3Error: The provider rejected the request.
            httpx.TransportError: The request could not be delivered.
        """
        if options is None:
            copy_options = CopySourceOptions()
        elif isinstance(options, CopySourceOptions):
            copy_options = options
        else:
            copy_options = CopySourceOptions.from_mapping(options)

        if self.config.client.validate_inputs:
            validate_bucket_name(bucket)
            validate_object_key(key)
            validate_upload_id(upload_id)
            validate_part_number(part_number)
            validate_bucket_name(source_bucket)
            validate_object_key(source_key)

        request = build_upload_part_copy_request(
            CopyPartRequest(
                bucket=bucket,
                key=key,
                upload_id=upload_id,
                part_number=part_number,
                source_bucket=source_bucket,
                source_key=source_key,
                options=copy_options,
            ),
            provider_host=self.config.endpoint.host,
            path_style=self.config.endpoint.path_style,
        )

        logger.debug(
            "UploadPartCopy %s/%s part %d from %s",
            bucket,
            key,
            part_number,
            request.headers[COPY_SOURCE_HEADER],
            extra={"operation": request.operation, "bucket": bucket, "key": key},
        )
        return await self.dispatcher.request(request)
