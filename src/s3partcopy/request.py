"""Transport-neutral description of an outbound S3 request.

Request builders produce an ``S3Request``; the dispatcher signs it, sends
it over HTTP, and checks the response status against ``expects``.
"""

from __future__ import annotations

import urllib.parse
from dataclasses import dataclass, field


@dataclass(frozen=True)
class S3Request:
    """A single outbound S3 API request.

    Attributes:
        operation: Operation name used for logging and metrics
            (e.g. "UploadPartCopy").
        method: HTTP method (uppercase).
        host: Target host, e.g. ``dst.s3.amazonaws.com``.
        path: Already URL-escaped request path, starting with ``/``.
        query: Ordered (name, value) query parameters, unescaped.
        headers: Request headers, sent as given.
        body: Request body bytes.
        expects: HTTP status codes counted as success.
        idempotent: Whether the request may be safely retried.
    """

    operation: str
    method: str
    host: str
    path: str
    query: tuple[tuple[str, str], ...] = ()
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    expects: frozenset[int] = frozenset({200})
    idempotent: bool = False

    @property
    def query_string(self) -> str:
        """The query encoded in declaration order, spaces as ``%20``."""
        return urllib.parse.urlencode(self.query, quote_via=urllib.parse.quote)

    def target(self) -> str:
        """The request target (path plus query string) as sent on the wire."""
        qs = self.query_string
        if qs:
            return f"{self.path}?{qs}"
        return self.path
