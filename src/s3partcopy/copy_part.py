"""UploadPartCopy: build a multipart "copy part" request and read its result.

The destination part's bytes come from an existing object (optionally a
byte range of a specific version) instead of from the request body.

Wire shape::

    PUT /{escaped-key}?uploadId={upload_id}&partNumber={part_number}
    Host: {bucket}.{provider-host}
    x-amz-copy-source: /{source-bucket}/{escaped-source-key}[?versionId={version}]
    x-amz-copy-source-range: bytes=0-5242879          (optional)
    x-amz-copy-source-if-match: "etag"                (optional)
    ...

See https://docs.aws.amazon.com/AmazonS3/latest/API/API_UploadPartCopy.html
"""

from __future__ import annotations

import email.utils
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

import httpx
from botocore.utils import percent_encode

from s3partcopy.errors import error_from_response
from s3partcopy.request import S3Request
from s3partcopy.xml_utils import parse_copy_part_result, parse_error

OPERATION = "UploadPartCopy"

COPY_SOURCE_HEADER = "x-amz-copy-source"
COPY_SOURCE_RANGE_HEADER = "x-amz-copy-source-range"
COPY_SOURCE_IF_MATCH_HEADER = "x-amz-copy-source-if-match"
COPY_SOURCE_IF_NONE_MATCH_HEADER = "x-amz-copy-source-if-none-match"
COPY_SOURCE_IF_MODIFIED_SINCE_HEADER = "x-amz-copy-source-if-modified-since"
COPY_SOURCE_IF_UNMODIFIED_SINCE_HEADER = "x-amz-copy-source-if-unmodified-since"
COPY_SOURCE_VERSION_ID_HEADER = "x-amz-copy-source-version-id"
SERVER_SIDE_ENCRYPTION_HEADER = "x-amz-server-side-encryption"

# Key in a plain option mapping that names the source version.
VERSION_ID_OPTION = "version_id"

# Path segments HTTP clients would collapse as relative references.
_DOT_SEGMENTS = (".", "..")


def escape_key(key: str) -> str:
    """Percent-encode an object key for use as a request path.

    Slashes stay literal and spaces become %20. A `.` or `..`
    segment is sent as %2E escapes so the key reaches the provider as given.
    """
    return "/".join(
        segment.replace(".", "%2E") if segment in _DOT_SEGMENTS else percent_encode(segment)
        for segment in key.split("/")
    )


def http_date(value: datetime) -> str:
    """Render a datetime as an RFC 7231 HTTP date. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return email.utils.format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _header_value(value: Any) -> str:
    if isinstance(value, datetime):
        return http_date(value)
    return str(value)


@dataclass(frozen=True)
class CopySourceOptions:
    """Optional restrictions on the copy source.

    Attributes:
        byte_range: Inclusive ``(first, last)`` byte offsets, or a raw
            ``bytes=first-last`` string sent as-is.
        if_match: Copy only if the source ETag matches.
        if_none_match: Copy only if the source ETag differs.
        if_modified_since: Copy only if the source changed after this time.
        if_unmodified_since: Copy only if the source is unchanged since this time.
        version_id: Source object version to copy from.
        extra_headers: Further headers passed through verbatim.
    """

    byte_range: tuple[int, int] | str | None = None
    if_match: str | None = None
    if_none_match: str | None = None
    if_modified_since: datetime | str | None = None
    if_unmodified_since: datetime | str | None = None
    version_id: str | None = None
    extra_headers: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_headers", MappingProxyType(dict(self.extra_headers)))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> CopySourceOptions:
        """Build options from a header-name mapping.

        Every entry except ``version_id`` is passed through as a header.
        The mapping itself is left untouched.
        """
        extra = {name: value for name, value in options.items() if name != VERSION_ID_OPTION}
        version_id = options.get(VERSION_ID_OPTION)
        return cls(version_id=version_id or None, extra_headers=extra)

    def headers(self) -> dict[str, str]:
        """The conditional and range headers these options translate to."""
        result = {name: _header_value(value) for name, value in self.extra_headers.items()}

        if self.byte_range is not None:
            if isinstance(self.byte_range, str):
                result[COPY_SOURCE_RANGE_HEADER] = self.byte_range
            else:
                first, last = self.byte_range
                result[COPY_SOURCE_RANGE_HEADER] = f"bytes={first}-{last}"
        if self.if_match is not None:
            result[COPY_SOURCE_IF_MATCH_HEADER] = self.if_match
        if self.if_none_match is not None:
            result[COPY_SOURCE_IF_NONE_MATCH_HEADER] = self.if_none_match
        if self.if_modified_since is not None:
            result[COPY_SOURCE_IF_MODIFIED_SINCE_HEADER] = _header_value(self.if_modified_since)
        if self.if_unmodified_since is not None:
            result[COPY_SOURCE_IF_UNMODIFIED_SINCE_HEADER] = _header_value(
                self.if_unmodified_since
            )
        return result


@dataclass(frozen=True)
class CopyPartRequest:
    """Destination part and copy source of one UploadPartCopy call.

    Attributes:
        bucket: Destination bucket name.
        key: Destination object key.
        upload_id: Multipart upload identifier.
        part_number: Destination part number (1-based).
        source_bucket: Bucket holding the source object.
        source_key: Source object key.
        options: Range, conditional, and version restrictions on the source.
    """

    bucket: str
    key: str
    upload_id: str
    part_number: int
    source_bucket: str
    source_key: str
    options: CopySourceOptions = field(default_factory=CopySourceOptions)

    @property
    def copy_source(self) -> str:
        """The ``x-amz-copy-source`` locator for the source object."""
        escaped_key = percent_encode(self.source_key, safe="-_.~/")
        locator = f"/{self.source_bucket}/{escaped_key}"
        if self.options.version_id:
            locator += f"?versionId={percent_encode(self.options.version_id)}"
        return locator


def build_upload_part_copy_request(
    request: CopyPartRequest,
    provider_host: str,
    path_style: bool = False,
) -> S3Request:
    """Translate a CopyPartRequest into an outbound S3Request.

    Performs no validation; malformed input surfaces as a provider error.

    Args:
        request: The copy-part parameters.
        provider_host: The provider endpoint host, e.g. ``s3.amazonaws.com``.
        path_style: Address the bucket in the path instead of the host name.

    Returns:
        An idempotent ``PUT`` request expecting HTTP 200.
    """
    escaped_key = escape_key(request.key)
    if path_style:
        host = provider_host
        path = f"/{request.bucket}/{escaped_key}"
    else:
        host = f"{request.bucket}.{provider_host}"
        path = f"/{escaped_key}"

    headers = {name.lower(): value for name, value in request.options.headers().items()}
    headers[COPY_SOURCE_HEADER] = request.copy_source

    return S3Request(
        operation=OPERATION,
        method="PUT",
        host=host,
        path=path,
        query=(
            ("uploadId", request.upload_id),
            ("partNumber", str(request.part_number)),
        ),
        headers=headers,
        expects=frozenset({200}),
        idempotent=True,
    )


@dataclass
class CopyPartResult:
    """Outcome of a successful UploadPartCopy.

    Attributes:
        etag: Entity tag of the new part, quotes included as sent.
        last_modified: ISO 8601 timestamp string from the response body.
        server_side_encryption: Encryption algorithm applied to the part, if any.
        copy_source_version_id: Version of the source object that was copied, if any.
    """

    etag: str
    last_modified: str
    server_side_encryption: str | None = None
    copy_source_version_id: str | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> CopyPartResult:
        """Read the result from a 200 UploadPartCopy response.

        S3 may report a copy that failed after the 200 status line was sent
        as an ``<Error>`` document in the body.

        Raises:
            S3Error: The body is an error document.
        """
        if parse_error(response.content) is not None:
            raise error_from_response(
                response.status_code,
                response.content,
                response.headers.get("x-amz-request-id", ""),
            )
        body = parse_copy_part_result(response.content)
        return cls(
            etag=body["ETag"],
            last_modified=body["LastModified"],
            server_side_encryption=response.headers.get(SERVER_SIDE_ENCRYPTION_HEADER),
            copy_source_version_id=response.headers.get(COPY_SOURCE_VERSION_ID_HEADER),
        )

    @property
    def last_modified_at(self) -> datetime | None:
        """``last_modified`` parsed as an aware datetime, or None if absent."""
        if not self.last_modified:
            return None
        return datetime.fromisoformat(self.last_modified.replace("Z", "+00:00"))

    def to_dict(self) -> dict[str, str | None]:
        return {
            "ETag": self.etag,
            "LastModified": self.last_modified,
            "ServerSideEncryption": self.server_side_encryption,
            "CopySourceVersionId": self.copy_source_version_id,
        }
