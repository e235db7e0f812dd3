"""
s3partcopy E2E Test Configuration

Tests run against any S3-compatible endpoint. Fixtures (buckets, source
objects, multipart uploads) are created with boto3; the copy-part request
under test is issued with s3partcopy. Configure via environment variables:

    S3PARTCOPY_E2E_ENDPOINT=http://localhost:9000
    S3PARTCOPY_E2E_ACCESS_KEY=minioadmin
    S3PARTCOPY_E2E_SECRET_KEY=minioadmin
    S3PARTCOPY_E2E_REGION=us-east-1

The whole suite is skipped when S3PARTCOPY_E2E_ENDPOINT is unset.
"""

import os
import urllib.parse
import uuid

import boto3
import pytest
from botocore.config import Config

from s3partcopy.client import S3Client
from s3partcopy.config import (
    CredentialsConfig,
    EndpointConfig,
    RetryConfig,
    S3PartCopyConfig,
)

ENDPOINT = os.environ.get("S3PARTCOPY_E2E_ENDPOINT", "")
ACCESS_KEY = os.environ.get("S3PARTCOPY_E2E_ACCESS_KEY", "minioadmin")
SECRET_KEY = os.environ.get("S3PARTCOPY_E2E_SECRET_KEY", "minioadmin")
REGION = os.environ.get("S3PARTCOPY_E2E_REGION", "us-east-1")

E2E_DIR = os.path.dirname(os.path.abspath(__file__))


def pytest_collection_modifyitems(config, items):
    for item in items:
        if not str(item.fspath).startswith(E2E_DIR):
            continue
        item.add_marker(pytest.mark.e2e)
        if not ENDPOINT:
            item.add_marker(pytest.mark.skip(reason="S3PARTCOPY_E2E_ENDPOINT not set"))


@pytest.fixture(scope="session")
def s3_client():
    """Create a boto3 S3 client for fixture setup and verification."""
    return boto3.client(
        "s3",
        endpoint_url=ENDPOINT,
        aws_access_key_id=ACCESS_KEY,
        aws_secret_access_key=SECRET_KEY,
        region_name=REGION,
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    )


@pytest.fixture
async def part_copier():
    """An initialized s3partcopy client pointed at the e2e endpoint."""
    parsed = urllib.parse.urlsplit(ENDPOINT)
    config = S3PartCopyConfig(
        endpoint=EndpointConfig(
            host=parsed.hostname or "localhost",
            scheme=parsed.scheme or "http",
            port=parsed.port,
            region=REGION,
            path_style=True,
        ),
        credentials=CredentialsConfig(access_key_id=ACCESS_KEY, secret_access_key=SECRET_KEY),
        retry=RetryConfig(max_attempts=1),
    )
    async with S3Client(config) as client:
        yield client


@pytest.fixture()
def bucket_name():
    """Generate a unique bucket name for a test."""
    return f"test-{uuid.uuid4().hex[:12]}"


@pytest.fixture()
def created_bucket(s3_client, bucket_name):
    """Create a bucket, yield its name, then clean up."""
    s3_client.create_bucket(Bucket=bucket_name)
    yield bucket_name
    _empty_and_delete_bucket(s3_client, bucket_name)


@pytest.fixture()
def source_object(s3_client, created_bucket):
    """Upload a source object larger than one part; yields (bucket, key, data)."""
    key = "source dir/orig file.bin"
    data = b"".join(bytes([i % 251]) * 1024 for i in range(6 * 1024))
    s3_client.put_object(Bucket=created_bucket, Key=key, Body=data)
    yield created_bucket, key, data


@pytest.fixture()
def multipart_upload(s3_client, created_bucket):
    """Start a multipart upload; yields (bucket, key, upload_id)."""
    key = "big.bin"
    upload_id = s3_client.create_multipart_upload(Bucket=created_bucket, Key=key)["UploadId"]
    yield created_bucket, key, upload_id


def _empty_and_delete_bucket(client, bucket_name):
    """Delete all objects and uploads in a bucket, then delete the bucket."""
    try:
        uploads = client.list_multipart_uploads(Bucket=bucket_name)
        for upload in uploads.get("Uploads", []):
            client.abort_multipart_upload(
                Bucket=bucket_name,
                Key=upload["Key"],
                UploadId=upload["UploadId"],
            )
        paginator = client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                client.delete_objects(
                    Bucket=bucket_name,
                    Delete={"Objects": [{"Key": obj["Key"]} for obj in objects]},
                )
        client.delete_bucket(Bucket=bucket_name)
    except Exception:
        pass  # Best-effort cleanup
