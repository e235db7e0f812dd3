"""Authenticated request dispatcher for s3partcopy.

Signs each ``S3Request`` with SigV4, sends it through a shared
``httpx.AsyncClient``, and turns unexpected statuses into ``S3Error``
subclasses. Idempotent requests are retried with exponential backoff on
transport failures and transient provider errors; every attempt is
re-signed so its timestamp stays fresh.
"""

import asyncio
import logging
import time

import httpx

from s3partcopy import metrics
from s3partcopy.config import RetryConfig
from s3partcopy.errors import S3Error, error_from_response
from s3partcopy.request import S3Request
from s3partcopy.signer import SigV4Signer

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}


class Dispatcher:
    """Sends signed S3 requests and checks their outcome.

    Attributes:
        signer: The SigV4 signer applied to every attempt.
        scheme: URL scheme, "https" or "http".
        port: Explicit port, or None for the scheme default.
        retry: Retry policy for idempotent requests.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        signer: SigV4Signer,
        scheme: str = "https",
        port: int | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self._http = http_client
        self.signer = signer
        self.scheme = scheme
        self.port = port
        self.retry = retry or RetryConfig()

    def _authority(self, host: str) -> str:
        """Host plus port, omitting the port when it is the scheme default."""
        if self.port is None or self.port == _DEFAULT_PORTS.get(self.scheme):
            return host
        return f"{host}:{self.port}"

    def url_for(self, req: S3Request) -> str:
        """The absolute URL a request is sent to."""
        return f"{self.scheme}://{self._authority(req.host)}{req.target()}"

    def backoff(self, attempt: int) -> float:
        """Delay in seconds before the attempt following ``attempt``."""
        delay = self.retry.base_delay * (2 ** (attempt - 1))
        return min(delay, self.retry.max_delay)

    async def request(self, req: S3Request) -> httpx.Response:
        """Dispatch a request and return the provider's response unmodified.

        Args:
            req: The request to send.

        Returns:
            The ``httpx.Response`` whose status is in ``req.expects``.

        Raises:
            S3Error: The provider answered with an unexpected status.
            httpx.TransportError: The request could not be delivered.
        """
        max_attempts = self.retry.max_attempts if req.idempotent else 1
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = await self._send(req, attempt)
            except httpx.TransportError as exc:
                if attempt >= max_attempts:
                    self._record(req.operation, "transport_error")
                    raise
                logger.warning(
                    "%s to %s failed (%s), retrying (attempt %d/%d)",
                    req.operation,
                    req.host,
                    exc.__class__.__name__,
                    attempt,
                    max_attempts,
                    extra={"operation": req.operation, "attempt": attempt},
                )
            else:
                if resp.status_code in req.expects:
                    self._record(req.operation, str(resp.status_code))
                    return resp

                error = error_from_response(
                    resp.status_code,
                    resp.content,
                    resp.headers.get("x-amz-request-id", ""),
                )
                if not error.retryable or attempt >= max_attempts:
                    self._record(req.operation, str(resp.status_code))
                    raise error
                self._log_retry(req, error, attempt, max_attempts)

            if metrics.retries_total is not None:
                metrics.retries_total.labels(operation=req.operation).inc()
            await asyncio.sleep(self.backoff(attempt))

    async def _send(self, req: S3Request, attempt: int) -> httpx.Response:
        url = self.url_for(req)
        headers = self.signer.sign(req.method, url, req.headers, req.body)
        http_request = self._http.build_request(
            req.method,
            url,
            headers=headers,
            content=req.body,
        )

        start = time.monotonic()
        try:
            resp = await self._http.send(http_request)
        finally:
            elapsed = time.monotonic() - start
            if metrics.request_duration_seconds is not None:
                metrics.request_duration_seconds.labels(operation=req.operation).observe(elapsed)

        logger.debug(
            "%s %s%s -> %d",
            req.method,
            req.host,
            req.target(),
            resp.status_code,
            extra={
                "operation": req.operation,
                "status": resp.status_code,
                "duration_ms": round(elapsed * 1000, 2),
                "request_id": resp.headers.get("x-amz-request-id"),
                "attempt": attempt,
            },
        )
        return resp

    def _log_retry(self, req: S3Request, error: S3Error, attempt: int, max_attempts: int) -> None:
        logger.warning(
            "%s to %s returned %s, retrying (attempt %d/%d)",
            req.operation,
            req.host,
            error.code,
            attempt,
            max_attempts,
            extra={
                "operation": req.operation,
                "status": error.http_status,
                "request_id": error.request_id or None,
                "attempt": attempt,
            },
        )

    def _record(self, operation: str, status: str) -> None:
        if metrics.requests_total is not None:
            metrics.requests_total.labels(operation=operation, status=status).inc()
