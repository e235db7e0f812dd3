"""Shared test helpers: canned S3 responses and a recording mock transport handler."""

import httpx

COPY_PART_RESULT_XML = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<CopyPartResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
    b"<LastModified>2026-02-22T12:00:00.000Z</LastModified>"
    b'<ETag>"b54357faf0632cce46e942fa68356b38"</ETag>'
    b"</CopyPartResult>"
)


def error_xml(code: str, message: str = "error", request_id: str = "REQ123") -> bytes:
    """Build an S3 XML error body."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<Error><Code>{code}</Code><Message>{message}</Message>"
        f"<RequestId>{request_id}</RequestId></Error>"
    ).encode()


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays responses.

    Responses are consumed in order; the last one repeats once the queue
    runs out. An ``Exception`` instance in the queue is raised instead.
    """

    def __init__(self, *responses) -> None:
        self.responses = list(responses) or [httpx.Response(200, content=COPY_PART_RESULT_XML)]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response
