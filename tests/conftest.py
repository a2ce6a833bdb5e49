# Shared fixtures: an in-memory object store and an app wired to it.

from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from bucket_browser.deps import get_backend
from bucket_browser.errors import ObjectNotFound
from bucket_browser.main import create_app
from bucket_browser.models import ListedObject, ObjectInfo

FIXED_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryBackend:
    """Dict-backed stand-in for S3Backend with directory-style listing."""

    def __init__(self, bucket: str = "test-bucket"):
        self.bucket = bucket
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.puts: List[str] = []
        self.bucket_exists = True
        self.repeat_prefixes = False
        self.fail_after: Optional[int] = None

    def add(self, key: str, data: bytes = b"", content_type: str = "application/octet-stream"):
        self.objects[key] = (data, content_type)

    def ensure_bucket(self) -> bool:
        created = not self.bucket_exists
        self.bucket_exists = True
        return created

    def list(self, prefix: str) -> Iterator[ListedObject]:
        emitted = 0
        seen = set()
        for key in sorted(self.objects):
            if not key.startswith(prefix):
                continue
            if self.fail_after is not None and emitted >= self.fail_after:
                raise ConnectionError("stream reset")
            rest = key[len(prefix):]
            if "/" in rest:
                common = prefix + rest[: rest.index("/") + 1]
                if common in seen and not self.repeat_prefixes:
                    continue
                seen.add(common)
                emitted += 1
                yield ListedObject(prefix=common)
            else:
                emitted += 1
                yield ListedObject(key=key, size=len(self.objects[key][0]), last_modified=FIXED_TIME)

    def stat(self, key: str) -> ObjectInfo:
        if key not in self.objects:
            raise ObjectNotFound(key)
        data, content_type = self.objects[key]
        return ObjectInfo(key=key, size=len(data), last_modified=FIXED_TIME, content_type=content_type)

    def get(self, key: str, chunk_size: int = 4) -> Iterator[bytes]:
        if key not in self.objects:
            raise ObjectNotFound(key)
        data = self.objects[key][0]
        return iter([data[i:i + chunk_size] for i in range(0, len(data), chunk_size)])

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        self.puts.append(key)
        self.objects[key] = (data, content_type or "application/octet-stream")

    def presign(self, key: str, ttl: int) -> str:
        return f"http://localhost:9000/{self.bucket}/{key}?X-Amz-Expires={ttl}"


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def test_app(backend):
    app = create_app()
    app.dependency_overrides[get_backend] = lambda: backend
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)
