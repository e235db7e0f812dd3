"""Client-side input checks for s3partcopy.

The provider is the authority on what it accepts; these checks only catch
obviously malformed identifiers before a round trip. ``S3Client`` applies
them when ``client.validate_inputs`` is enabled.

Each function raises an appropriate ``S3Error`` subclass on invalid input.
"""

import re

from s3partcopy.errors import InvalidArgument, InvalidBucketName, KeyTooLongError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# S3 bucket naming rules:
#   - 3-63 characters
#   - lowercase letters, digits, hyphens, and periods
#   - must start and end with a letter or digit
#   - must not be formatted as an IP address
#   - must not start with "xn--" (internationalized domain prefix)
#   - must not end with "-s3alias" (access point alias) or "--ol-s3" (Object Lambda)
#   - no consecutive periods ("..") allowed

_BUCKET_RE = re.compile(r"^[a-z0-9][a-z0-9.\-]{1,61}[a-z0-9]$")
_IP_RE = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")
_RESERVED_BUCKET_PREFIXES = ("xn--",)
_RESERVED_BUCKET_SUFFIXES = ("-s3alias", "--ol-s3")

_MAX_KEY_BYTES = 1024
MAX_PART_NUMBER = 10000


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_bucket_name(name: str) -> None:
    """Validate an S3 bucket name against AWS naming rules.

    Raises:
        InvalidBucketName: If the name violates any S3 bucket naming rule.
    """
    if not _BUCKET_RE.match(name):
        raise InvalidBucketName(name)

    if _IP_RE.match(name):
        raise InvalidBucketName(name)

    if name.startswith(_RESERVED_BUCKET_PREFIXES) or name.endswith(_RESERVED_BUCKET_SUFFIXES):
        raise InvalidBucketName(name)

    if ".." in name:
        raise InvalidBucketName(name)


def validate_object_key(key: str) -> None:
    """Validate an S3 object key.

    Raises:
        InvalidArgument: If the key is empty.
        KeyTooLongError: If the key exceeds 1024 bytes when UTF-8 encoded.
    """
    if not key:
        raise InvalidArgument("Object key must not be empty")
    if len(key.encode("utf-8")) > _MAX_KEY_BYTES:
        raise KeyTooLongError()


def validate_upload_id(upload_id: str) -> None:
    if not upload_id:
        raise InvalidArgument("Upload id must not be empty")


def validate_part_number(part_number: int) -> None:
    """Validate a multipart part number.

    Raises:
        InvalidArgument: If the number is not an integer in [1, 10000].
    """
    if (
        isinstance(part_number, bool)
        or not isinstance(part_number, int)
        or part_number < 1
        or part_number > MAX_PART_NUMBER
    ):
        raise InvalidArgument(
            f"Part number must be an integer between 1 and {MAX_PART_NUMBER}, inclusive"
        )
