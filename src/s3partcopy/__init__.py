"""s3partcopy: asynchronous S3 multipart "copy part" client."""

from s3partcopy.client import S3Client
from s3partcopy.config import S3PartCopyConfig, load_config
from s3partcopy.copy_part import (
    CopyPartRequest,
    CopyPartResult,
    CopySourceOptions,
    build_upload_part_copy_request,
)
from s3partcopy.errors import S3Error
from s3partcopy.request import S3Request

__all__ = [
    "build_upload_part_copy_request",
    "CopyPartRequest",
    "CopyPartResult",
    "CopySourceOptions",
    "load_config",
    "S3Client",
    "S3Error",
    "S3PartCopyConfig",
    "S3Request",
]
