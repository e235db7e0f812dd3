"""AWS Signature Version 4 request signing for s3partcopy.

Signing is delegated to botocore's ``S3SigV4Auth``, which leaves the
request path as sent (S3 does not normalize it) and hashes the payload
into ``x-amz-content-sha256``.

References:
    - https://docs.aws.amazon.com/AmazonS3/latest/API/sig-v4-header-based-auth.html
"""

from botocore.auth import S3SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

SERVICE_NAME = "s3"


class SigV4Signer:
    """Signs outbound S3 requests with AWS Signature Version 4.

    Attributes:
        region: The region used in the credential scope.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        region: str = "us-east-1",
        session_token: str = "",
    ) -> None:
        self.region = region
        self._credentials = Credentials(access_key, secret_key, session_token or None)

    @property
    def access_key(self) -> str:
        return self._credentials.access_key

    @property
    def secret_key(self) -> str:
        return self._credentials.secret_key

    @property
    def session_token(self) -> str:
        return self._credentials.token or ""

    def sign(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes = b"",
    ) -> dict[str, str]:
        """Return a copy of ``headers`` with the SigV4 auth headers added.

        The Host header is derived from ``url`` and signed, but not added
        to the result; the HTTP client sends the same value. The caller's
        dict is not modified.

        Args:
            method: HTTP method (uppercase).
            url: Absolute request URL with the escaped path and query.
            headers: Request headers to send.
            body: The request body.

        Returns:
            The headers to send, including ``X-Amz-Date``,
            ``X-Amz-Content-SHA256`` and ``Authorization``.
        """
        aws_request = AWSRequest(method=method, url=url, data=body, headers=headers)
        S3SigV4Auth(self._credentials, SERVICE_NAME, self.region).add_auth(aws_request)
        return dict(aws_request.headers.items())
