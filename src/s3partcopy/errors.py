"""S3-compatible error definitions for s3partcopy.

Provider error responses are XML documents of the form::

    <Error>
      <Code>NoSuchUpload</Code>
      <Message>The specified multipart upload does not exist.</Message>
      <RequestId>...</RequestId>
    </Error>

``error_from_response`` turns one of those (or a bodiless error status)
into the matching ``S3Error`` subclass.
"""

from s3partcopy.xml_utils import parse_error


class S3Error(Exception):
    """An S3-compatible error reported by the storage provider.

    Attributes:
        code: The S3 error code string (e.g. "NoSuchBucket", "AccessDenied").
        message: Human-readable error description.
        http_status: The HTTP status code the provider returned.
        request_id: The provider's request identifier, if any.
        resource: The resource the provider reported the error against.
        extra_fields: Any other child elements of the XML error document.
    """

    def __init__(
        self,
        code: str,
        message: str,
        http_status: int = 400,
        request_id: str = "",
        resource: str = "",
        extra_fields: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.request_id = request_id
        self.resource = resource
        self.extra_fields = extra_fields or {}

    def __str__(self) -> str:
        return f"{self.code} ({self.http_status}): {self.message}"

    @property
    def retryable(self) -> bool:
        """Whether the provider reported a transient condition."""
        return self.http_status in _RETRYABLE_STATUSES or self.code in _RETRYABLE_CODES


# -- Common pre-defined errors ------------------------------------------------


class AccessDenied(S3Error):
    """Access denied error."""

    def __init__(self, message: str = "Access Denied", **kwargs) -> None:
        kwargs.setdefault("http_status", 403)
        super().__init__(code="AccessDenied", message=message, **kwargs)


class InvalidAccessKeyId(S3Error):
    """The access key Id does not exist in the provider's records."""

    def __init__(
        self,
        message: str = "The AWS access key Id you provided does not exist in our records.",
        **kwargs,
    ) -> None:
        kwargs.setdefault("http_status", 403)
        super().__init__(code="InvalidAccessKeyId", message=message, **kwargs)


class SignatureDoesNotMatch(S3Error):
    """The request signature does not match."""

    def __init__(
        self,
        message: str = "The request signature we calculated does not match the signature you provided.",
        **kwargs,
    ) -> None:
        kwargs.setdefault("http_status", 403)
        super().__init__(code="SignatureDoesNotMatch", message=message, **kwargs)


class NoSuchBucket(S3Error):
    """The specified bucket does not exist."""

    def __init__(self, message: str = "The specified bucket does not exist.", **kwargs) -> None:
        kwargs.setdefault("http_status", 404)
        super().__init__(code="NoSuchBucket", message=message, **kwargs)


class NoSuchKey(S3Error):
    """The specified key does not exist."""

    def __init__(self, message: str = "The specified key does not exist.", **kwargs) -> None:
        kwargs.setdefault("http_status", 404)
        super().__init__(code="NoSuchKey", message=message, **kwargs)


class NoSuchUpload(S3Error):
    """The specified multipart upload does not exist."""

    def __init__(
        self, message: str = "The specified multipart upload does not exist.", **kwargs
    ) -> None:
        kwargs.setdefault("http_status", 404)
        super().__init__(code="NoSuchUpload", message=message, **kwargs)


class PreconditionFailed(S3Error):
    """At least one of the copy-source preconditions did not hold."""

    def __init__(
        self,
        message: str = "At least one of the pre-conditions you specified did not hold.",
        **kwargs,
    ) -> None:
        kwargs.setdefault("http_status", 412)
        super().__init__(code="PreconditionFailed", message=message, **kwargs)


class InvalidRange(S3Error):
    """The requested source range is not satisfiable."""

    def __init__(self, message: str = "The requested range is not satisfiable.", **kwargs) -> None:
        kwargs.setdefault("http_status", 416)
        super().__init__(code="InvalidRange", message=message, **kwargs)


class InvalidArgument(S3Error):
    """An invalid argument was provided."""

    def __init__(self, message: str = "Invalid Argument", **kwargs) -> None:
        kwargs.setdefault("http_status", 400)
        super().__init__(code="InvalidArgument", message=message, **kwargs)


class InvalidRequest(S3Error):
    """The request is not valid."""

    def __init__(self, message: str = "Invalid Request", **kwargs) -> None:
        kwargs.setdefault("http_status", 400)
        super().__init__(code="InvalidRequest", message=message, **kwargs)


class InvalidBucketName(S3Error):
    """The specified bucket name is not valid."""

    def __init__(self, bucket: str = "", **kwargs) -> None:
        kwargs.setdefault("http_status", 400)
        if bucket:
            kwargs.setdefault("extra_fields", {"BucketName": bucket})
        super().__init__(
            code="InvalidBucketName", message="The specified bucket is not valid.", **kwargs
        )


class KeyTooLongError(S3Error):
    """The specified key is too long."""

    def __init__(self, message: str = "Your key is too long.", **kwargs) -> None:
        kwargs.setdefault("http_status", 400)
        super().__init__(code="KeyTooLongError", message=message, **kwargs)


class InvalidPart(S3Error):
    """One or more of the specified parts could not be found."""

    def __init__(
        self, message: str = "One or more of the specified parts could not be found.", **kwargs
    ) -> None:
        kwargs.setdefault("http_status", 400)
        super().__init__(code="InvalidPart", message=message, **kwargs)


class EntityTooSmall(S3Error):
    """The proposed upload is smaller than the minimum allowed object size."""

    def __init__(
        self,
        message: str = "Your proposed upload is smaller than the minimum allowed object size.",
        **kwargs,
    ) -> None:
        kwargs.setdefault("http_status", 400)
        super().__init__(code="EntityTooSmall", message=message, **kwargs)


class EntityTooLarge(S3Error):
    """The proposed upload exceeds the maximum allowed object size."""

    def __init__(
        self,
        message: str = "Your proposed upload exceeds the maximum allowed object size.",
        **kwargs,
    ) -> None:
        kwargs.setdefault("http_status", 400)
        super().__init__(code="EntityTooLarge", message=message, **kwargs)


class RequestTimeout(S3Error):
    """The socket connection to the provider was not read from or written to in time."""

    def __init__(
        self,
        message: str = "Your socket connection to the server was not read from or written to within the timeout period.",
        **kwargs,
    ) -> None:
        kwargs.setdefault("http_status", 400)
        super().__init__(code="RequestTimeout", message=message, **kwargs)


class SlowDown(S3Error):
    """The provider asked the client to reduce its request rate."""

    def __init__(self, message: str = "Please reduce your request rate.", **kwargs) -> None:
        kwargs.setdefault("http_status", 503)
        super().__init__(code="SlowDown", message=message, **kwargs)


class ServiceUnavailable(S3Error):
    """The provider is temporarily unable to handle the request."""

    def __init__(self, message: str = "Service Unavailable", **kwargs) -> None:
        kwargs.setdefault("http_status", 503)
        super().__init__(code="ServiceUnavailable", message=message, **kwargs)


class InternalError(S3Error):
    """The provider encountered an internal error."""

    def __init__(self, message: str = "Internal Error", **kwargs) -> None:
        kwargs.setdefault("http_status", 500)
        super().__init__(code="InternalError", message=message, **kwargs)


_RETRYABLE_STATUSES = frozenset({500, 502, 503, 504})
_RETRYABLE_CODES = frozenset({"InternalError", "SlowDown", "ServiceUnavailable", "RequestTimeout"})

_ERRORS_BY_CODE: dict[str, type[S3Error]] = {
    "AccessDenied": AccessDenied,
    "InvalidAccessKeyId": InvalidAccessKeyId,
    "SignatureDoesNotMatch": SignatureDoesNotMatch,
    "NoSuchBucket": NoSuchBucket,
    "NoSuchKey": NoSuchKey,
    "NoSuchUpload": NoSuchUpload,
    "PreconditionFailed": PreconditionFailed,
    "InvalidRange": InvalidRange,
    "InvalidArgument": InvalidArgument,
    "InvalidRequest": InvalidRequest,
    "InvalidBucketName": InvalidBucketName,
    "KeyTooLongError": KeyTooLongError,
    "InvalidPart": InvalidPart,
    "EntityTooSmall": EntityTooSmall,
    "EntityTooLarge": EntityTooLarge,
    "RequestTimeout": RequestTimeout,
    "SlowDown": SlowDown,
    "ServiceUnavailable": ServiceUnavailable,
    "InternalError": InternalError,
}


def error_from_response(status: int, body: bytes, request_id: str = "") -> S3Error:
    """Build the S3Error matching a failed provider response.

    Args:
        status: The HTTP status code of the response.
        body: The raw response body (normally an XML ``<Error>`` document).
        request_id: Fallback request id (e.g. the ``x-amz-request-id`` header)
            used when the body does not carry one.

    Returns:
        An ``S3Error`` subclass instance for known codes, a plain ``S3Error``
        otherwise. A missing or unparseable body yields code ``str(status)``.
    """
    fields = parse_error(body)
    if fields is None or not fields.get("Code"):
        return S3Error(
            code=str(status),
            message=f"HTTP {status} with no error body",
            http_status=status,
            request_id=request_id,
        )

    code = fields.pop("Code")
    message = fields.pop("Message", "") or code
    request_id = fields.pop("RequestId", "") or request_id
    resource = fields.pop("Resource", "")
    fields.pop("HostId", None)

    kwargs = {
        "http_status": status,
        "request_id": request_id,
        "resource": resource,
        "extra_fields": fields,
    }
    cls = _ERRORS_BY_CODE.get(code)
    if cls is None:
        return S3Error(code=code, message=message, **kwargs)
    if cls is InvalidBucketName:
        return InvalidBucketName(**kwargs)
    return cls(message=message, **kwargs)
