"""Unit tests for S3 URI parsing."""

from __future__ import annotations

import pytest

from core.errors import DocumentSourceError
from core.s3_uri import parse_s3_uri


def test_parse_s3_uri_splits_bucket_and_key() -> None:
    """Parser should split bucket from nested object key."""
    location = parse_s3_uri("s3://forecasts/glasgow/2016-01-01.json")

    assert (location.bucket, location.key) == ("forecasts", "glasgow/2016-01-01.json")


@pytest.mark.parametrize("uri", ["s3://forecasts", "s3://forecasts/", "s3:///key.json"])
def test_parse_s3_uri_rejects_incomplete_uris(uri: str) -> None:
    """Parser should fail when bucket or key is missing."""
    with pytest.raises(DocumentSourceError):
        parse_s3_uri(uri)
