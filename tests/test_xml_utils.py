"""Tests for S3 XML parsing utilities."""

from s3partcopy.xml_utils import parse_copy_part_result, parse_error


class TestParseError:
    """Tests for parse_error()."""

    def test_basic_error(self):
        body = (
            b'<?xml version="1.0" encoding="UTF-8"?>\n'
            b"<Error><Code>NoSuchBucket</Code>"
            b"<Message>The specified bucket does not exist.</Message>"
            b"<Resource>/mybucket</Resource><RequestId>AABBCCDD11223344</RequestId></Error>"
        )
        assert parse_error(body) == {
            "Code": "NoSuchBucket",
            "Message": "The specified bucket does not exist.",
            "Resource": "/mybucket",
            "RequestId": "AABBCCDD11223344",
        }

    def test_namespaced_error(self):
        body = (
            b'<Error xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
            b"<Code>AccessDenied</Code><Message>Access Denied</Message></Error>"
        )
        assert parse_error(body)["Code"] == "AccessDenied"

    def test_escaped_text_unescaped(self):
        body = b"<Error><Code>InvalidArgument</Code><Message>a &lt; b &amp; c</Message></Error>"
        assert parse_error(body)["Message"] == "a < b & c"

    def test_empty_body(self):
        assert parse_error(b"") is None

    def test_malformed_body(self):
        assert parse_error(b"<Error><Code>") is None

    def test_other_root_element(self):
        assert parse_error(b"<CopyPartResult/>") is None


class TestParseCopyPartResult:
    """Tests for parse_copy_part_result()."""

    def test_namespaced_result(self):
        body = (
            b'<CopyPartResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
            b"<LastModified>2011-04-11T20:34:56.000Z</LastModified>"
            b'<ETag>"9b2cf535f27731c974343645a3985328"</ETag>'
            b"</CopyPartResult>"
        )
        assert parse_copy_part_result(body) == {
            "ETag": '"9b2cf535f27731c974343645a3985328"',
            "LastModified": "2011-04-11T20:34:56.000Z",
        }

    def test_bare_result(self):
        body = b"<CopyPartResult><ETag>abc</ETag><LastModified>t</LastModified></CopyPartResult>"
        assert parse_copy_part_result(body) == {"ETag": "abc", "LastModified": "t"}

    def test_str_input(self):
        assert parse_copy_part_result("<CopyPartResult><ETag>x</ETag></CopyPartResult>")["ETag"] == "x"

    def test_missing_elements(self):
        assert parse_copy_part_result(b"<CopyPartResult/>") == {"ETag": "", "LastModified": ""}

    def test_unparseable(self):
        assert parse_copy_part_result(b"not xml") == {"ETag": "", "LastModified": ""}
