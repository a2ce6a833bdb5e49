# Tests for the boto3-backed storage backend against a mocked client.

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from bucket_browser.errors import BackendUnavailable, ObjectNotFound
from bucket_browser.storage import S3Backend, _browserize


def _client_error(code, op="HeadObject"):
    return ClientError({"Error": {"Code": code, "Message": code}}, op)


@pytest.fixture
def s3():
    return MagicMock()


@pytest.fixture
def store(s3):
    return S3Backend(bucket="files", client=s3)


class TestEnsureBucket:
    def test_existing(self, store, s3):
        assert store.ensure_bucket() is False
        s3.head_bucket.assert_called_once_with(Bucket="files")
        s3.create_bucket.assert_not_called()

    def test_creates_missing(self, store, s3):
        s3.head_bucket.side_effect = _client_error("404", "HeadBucket")
        assert store.ensure_bucket() is True
        s3.create_bucket.assert_called_once_with(Bucket="files")

    def test_forbidden_is_unavailable(self, store, s3):
        s3.head_bucket.side_effect = _client_error("403", "HeadBucket")
        with pytest.raises(BackendUnavailable):
            store.ensure_bucket()

    def test_unreachable(self, store, s3):
        s3.head_bucket.side_effect = EndpointConnectionError(endpoint_url="http://minio:9000")
        with pytest.raises(BackendUnavailable):
            store.ensure_bucket()


def test_list_walks_every_page(store, s3):
    ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
    paginator = MagicMock()
    paginator.paginate.return_value = [
        {"CommonPrefixes": [{"Prefix": "a/b/"}], "Contents": [{"Key": "a/x.txt", "Size": 3, "LastModified": ts}]},
        {"CommonPrefixes": [{"Prefix": "a/c/"}]},
    ]
    s3.get_paginator.return_value = paginator

    records = list(store.list("a/"))

    s3.get_paginator.assert_called_once_with("list_objects_v2")
    paginator.paginate.assert_called_once_with(Bucket="files", Prefix="a/", Delimiter="/")
    assert [r.prefix for r in records if r.is_prefix] == ["a/b/", "a/c/"]
    files = [r for r in records if not r.is_prefix]
    assert files[0].key == "a/x.txt"
    assert files[0].size == 3
    assert files[0].last_modified == ts


def test_stat(store, s3):
    s3.head_object.return_value = {"ContentLength": 42, "ContentType": "image/png"}
    info = store.stat("a.png")
    assert info.size == 42
    assert info.content_type == "image/png"


def test_stat_defaults_content_type(store, s3):
    s3.head_object.return_value = {"ContentLength": 1}
    assert store.stat("a").content_type == "application/octet-stream"


def test_stat_missing(store, s3):
    s3.head_object.side_effect = _client_error("404")
    with pytest.raises(ObjectNotFound):
        store.stat("nope")


def test_get_streams_and_closes(store, s3):
    body = MagicMock()
    body.iter_chunks.return_value = iter([b"ab", b"cd"])
    s3.get_object.return_value = {"Body": body}

    chunks = store.get("k", chunk_size=2)
    assert b"".join(chunks) == b"abcd"
    body.iter_chunks.assert_called_once_with(chunk_size=2)
    body.close.assert_called_once()


def test_get_missing(store, s3):
    s3.get_object.side_effect = _client_error("NoSuchKey", "GetObject")
    with pytest.raises(ObjectNotFound):
        store.get("nope")


def test_put(store, s3):
    store.put("a/.keep", b"")
    s3.put_object.assert_called_once_with(
        Bucket="files", Key="a/.keep", Body=b"", ContentLength=0, ContentType="application/octet-stream"
    )


def test_presign_uses_get_object(store, s3):
    s3.generate_presigned_url.return_value = "http://minio:9000/files/a.txt?sig=1"
    with patch("bucket_browser.config.MINIO_PUBLIC_ENDPOINT", ""):
        url = store.presign("a.txt", 3600)
    s3.generate_presigned_url.assert_called_once_with(
        ClientMethod="get_object", Params={"Bucket": "files", "Key": "a.txt"}, ExpiresIn=3600
    )
    assert url == "http://localhost:9000/files/a.txt?sig=1"


def test_browserize_public_endpoint():
    with patch("bucket_browser.config.MINIO_PUBLIC_ENDPOINT", "https://files.example.com"):
        url = _browserize("http://minio:9000/files/a.txt?sig=1")
    assert url == "https://files.example.com/files/a.txt?sig=1"
