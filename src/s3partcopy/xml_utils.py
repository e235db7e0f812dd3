"""S3 XML response parsing helpers for s3partcopy."""

import xml.etree.ElementTree as ET

S3_NAMESPACE = "{http://s3.amazonaws.com/doc/2006-03-01/}"


def _parse_root(body: bytes | str) -> ET.Element | None:
    """Parse an XML document, returning None for empty or malformed input."""
    if not body:
        return None
    try:
        return ET.fromstring(body)
    except ET.ParseError:
        return None


def _local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    if tag.startswith("{"):
        return tag[tag.index("}") + 1 :]
    return tag


def _find_elem(parent: ET.Element, name: str) -> ET.Element | None:
    """Find a child element, trying the S3 namespace first, then the bare name.

    Uses explicit ``is not None`` checks to avoid ElementTree's deprecated
    truth-value testing of elements.
    """
    elem = parent.find(f"{S3_NAMESPACE}{name}")
    if elem is not None:
        return elem
    return parent.find(name)


def _child_text(parent: ET.Element, name: str) -> str:
    elem = _find_elem(parent, name)
    if elem is None or elem.text is None:
        return ""
    return elem.text


def parse_error(body: bytes | str) -> dict[str, str] | None:
    """Parse an S3 XML error response body.

    The Error element carries no XML namespace, but namespaced variants
    from some S3-compatible providers are accepted too.

    Args:
        body: The raw response body.

    Returns:
        A dict mapping each child element name (``Code``, ``Message``,
        ``RequestId``, ...) to its text, or None if the body is not an
        ``<Error>`` document.
    """
    root = _parse_root(body)
    if root is None or _local_name(root.tag) != "Error":
        return None
    return {_local_name(child.tag): (child.text or "") for child in root}


def parse_copy_part_result(body: bytes | str) -> dict[str, str]:
    """Parse an S3 UploadPartCopy result body.

    Example body::

        <CopyPartResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
          <LastModified>2011-04-11T20:34:56.000Z</LastModified>
          <ETag>"9b2cf535f27731c974343645a3985328"</ETag>
        </CopyPartResult>

    Args:
        body: The raw response body.

    Returns:
        A dict with ``ETag`` and ``LastModified`` keys. Missing elements map
        to empty strings; an unparseable body yields both keys empty.
    """
    root = _parse_root(body)
    if root is None or _local_name(root.tag) != "CopyPartResult":
        return {"ETag": "", "LastModified": ""}
    return {
        "ETag": _child_text(root, "ETag"),
        "LastModified": _child_text(root, "LastModified"),
    }
