from functools import lru_cache

from bucket_browser import config
from bucket_browser.storage import S3Backend, StorageBackend


@lru_cache(maxsize=1)
def _default_backend() -> S3Backend:
    return S3Backend(bucket=config.BUCKET_NAME)


def get_backend() -> StorageBackend:
    """FastAPI dependency for the storage backend; tests override it."""
    return _default_backend()
