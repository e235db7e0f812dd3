"""Tests for the s3partcopy command-line entry point."""

import argparse
import json
from datetime import datetime
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from s3partcopy.cli import _byte_range, main, options_from_args, parse_args
from s3partcopy.copy_part import CopyPartResult
from s3partcopy.errors import NoSuchUpload

from helpers import error_xml

REQUIRED = [
    "--bucket", "dst",
    "--key", "big.bin",
    "--upload-id", "U1",
    "--part-number", "3",
    "--source-bucket", "src",
    "--source-key", "orig file.bin",
]


class TestParseArgs:
    def test_required_arguments(self):
        args = parse_args(REQUIRED)
        assert args.bucket == "dst"
        assert args.key == "big.bin"
        assert args.upload_id == "U1"
        assert args.part_number == 3
        assert args.source_bucket == "src"
        assert args.source_key == "orig file.bin"
        assert args.config is None
        assert args.range is None

    def test_missing_required_exits(self):
        with pytest.raises(SystemExit):
            parse_args(["--bucket", "dst"])

    def test_options(self):
        args = parse_args(
            REQUIRED
            + [
                "--range", "0-99",
                "--version-id", "v1",
                "--if-match", '"abc"',
                "--if-modified-since", "2015-10-21T07:28:00+00:00",
            ]
        )
        options = options_from_args(args)
        assert options.byte_range == (0, 99)
        assert options.version_id == "v1"
        assert options.if_match == '"abc"'
        assert options.if_modified_since == datetime.fromisoformat("2015-10-21T07:28:00+00:00")
        assert options.headers()["x-amz-copy-source-if-modified-since"] == (
            "Wed, 21 Oct 2015 07:28:00 GMT"
        )


class TestByteRange:
    def test_valid(self):
        assert _byte_range("5242880-10485759") == (5242880, 10485759)

    @pytest.mark.parametrize("value", ["abc", "10", "9-3", "-1-5"])
    def test_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            _byte_range(value)


class TestMain:
    def test_prints_result_json(self, capsys):
        result = CopyPartResult(etag='"abc"', last_modified="2026-02-22T12:00:00.000Z")
        with patch("s3partcopy.cli.run", new=AsyncMock(return_value=result)) as mock_run:
            main(REQUIRED + ["--endpoint", "localhost", "--region", "eu-west-1"])

        config = mock_run.await_args.args[0]
        assert config.endpoint.host == "localhost"
        assert config.endpoint.region == "eu-west-1"
        out = json.loads(capsys.readouterr().out)
        assert out["ETag"] == '"abc"'
        assert out["LastModified"] == "2026-02-22T12:00:00.000Z"

    def test_missing_config_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(REQUIRED + ["--config", str(tmp_path / "missing.yaml")])
        assert exc_info.value.code == 1

    def test_provider_error_exits(self):
        with patch("s3partcopy.cli.run", new=AsyncMock(side_effect=NoSuchUpload())):
            with pytest.raises(SystemExit) as exc_info:
                main(REQUIRED)
        assert exc_info.value.code == 1

    def test_error_document_in_200_response_exits(self, capsys):
        resp = httpx.Response(
            200,
            content=error_xml("InternalError", "We encountered an internal error."),
        )
        with patch("s3partcopy.cli.S3Client") as mock_client_cls:
            client = mock_client_cls.return_value.__aenter__.return_value
            client.upload_part_copy = AsyncMock(return_value=resp)
            with pytest.raises(SystemExit) as exc_info:
                main(REQUIRED)
        assert exc_info.value.code == 1
        assert capsys.readouterr().out == ""
