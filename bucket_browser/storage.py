# bucket_browser/storage.py
import logging
from typing import Iterator, Optional, Protocol
from urllib.parse import urlparse, urlunparse

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from bucket_browser import config
from bucket_browser.errors import BackendUnavailable, ObjectNotFound
from bucket_browser.models import ListedObject, ObjectInfo

logger = logging.getLogger(__name__)

DELIMITER = "/"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}


class StorageBackend(Protocol):
    """Capability surface the browser core needs from an object store."""

    bucket: str

    def ensure_bucket(self) -> bool: ...

    def list(self, prefix: str) -> Iterator[ListedObject]: ...

    def stat(self, key: str) -> ObjectInfo: ...

    def get(self, key: str, chunk_size: int = ...) -> Iterator[bytes]: ...

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> None: ...

    def presign(self, key: str, ttl: int) -> str: ...


def _s3():
    return boto3.client(
        "s3",
        endpoint_url=config.MINIO_ENDPOINT,
        aws_access_key_id=config.MINIO_ACCESS_KEY,
        aws_secret_access_key=config.MINIO_SECRET_KEY,
        config=Config(signature_version="s3v4"),
        region_name=config.MINIO_REGION,
    )


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _browserize(url: str) -> str:
    """Replace internal host with public endpoint so the browser can reach it."""
    u = urlparse(url)
    if config.MINIO_PUBLIC_ENDPOINT:
        pu = urlparse(config.MINIO_PUBLIC_ENDPOINT)
        u = u._replace(scheme=pu.scheme or u.scheme, netloc=pu.netloc)
    elif u.hostname in {"minio", "minio.local"}:
        # Fallback for local dev
        u = u._replace(netloc="localhost:9000")
    return urlunparse(u)


def _iter_body(body, chunk_size: int) -> Iterator[bytes]:
    try:
        for chunk in body.iter_chunks(chunk_size=chunk_size):
            if chunk:
                yield chunk
    finally:
        body.close()


class S3Backend:
    """StorageBackend over a single S3/MinIO bucket."""

    def __init__(self, bucket: str = config.BUCKET_NAME, client=None):
        self.bucket = bucket
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = _s3()
        return self._client

    def ensure_bucket(self) -> bool:
        """Create the bucket when it is missing. Returns True if it was created."""
        try:
            self.client.head_bucket(Bucket=self.bucket)
            return False
        except ClientError as e:
            if _error_code(e) not in _NOT_FOUND_CODES:
                raise BackendUnavailable(self.bucket, e) from e
        except BotoCoreError as e:
            raise BackendUnavailable(self.bucket, e) from e

        try:
            self.client.create_bucket(Bucket=self.bucket)
        except (ClientError, BotoCoreError) as e:
            raise BackendUnavailable(self.bucket, e) from e
        logger.info("Created bucket=%s", self.bucket)
        return True

    def list(self, prefix: str) -> Iterator[ListedObject]:
        """Directory-style listing one level below `prefix`, across all pages."""
        paginator = self.client.get_paginator("list_objects_v2")
        pages = paginator.paginate(Bucket=self.bucket, Prefix=prefix or "", Delimiter=DELIMITER)
        for page in pages:
            for cp in page.get("CommonPrefixes", []):
                yield ListedObject(prefix=cp["Prefix"])
            for obj in page.get("Contents", []):
                yield ListedObject(
                    key=obj["Key"],
                    size=obj.get("Size", 0),
                    last_modified=obj.get("LastModified"),
                )

    def stat(self, key: str) -> ObjectInfo:
        try:
            head = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise ObjectNotFound(key) from e
            raise
        return ObjectInfo(
            key=key,
            size=head.get("ContentLength", 0),
            last_modified=head.get("LastModified"),
            content_type=head.get("ContentType") or DEFAULT_CONTENT_TYPE,
        )

    def get(self, key: str, chunk_size: int = config.STREAM_CHUNK_SIZE) -> Iterator[bytes]:
        # get_object runs eagerly so a missing key fails before any byte is sent.
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise ObjectNotFound(key) from e
            raise
        return _iter_body(resp["Body"], chunk_size)

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentLength=len(data),
            ContentType=content_type or DEFAULT_CONTENT_TYPE,
        )

    def presign(self, key: str, ttl: int = config.PRESIGN_TTL_SECONDS) -> str:
        url = self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=ttl,
        )
        return _browserize(url)
