"""
errors.py — Error taxonomy for the bucket browser.

Storage and core functions raise these; the HTTP layer turns them into
`{"error": ...}` responses with a fixed message and logs the cause.
"""

from typing import Optional


class BrowserError(Exception):
    """Base class for every error raised by bucket_browser."""


class ListingFailed(BrowserError):
    def __init__(self, prefix: str, cause: Optional[BaseException] = None):
        super().__init__(f"listing failed for prefix {prefix!r}: {cause}")
        self.prefix = prefix
        self.cause = cause


class ObjectNotFound(BrowserError):
    def __init__(self, key: str):
        super().__init__(f"object not found: {key!r}")
        self.key = key


class InvalidName(BrowserError):
    """Empty/whitespace name or a missing required request field."""


class UploadFailed(BrowserError):
    def __init__(self, key: str, cause: Optional[BaseException] = None):
        super().__init__(f"upload failed for {key!r}: {cause}")
        self.key = key
        self.cause = cause


class BackendUnavailable(BrowserError):
    def __init__(self, bucket: str, cause: Optional[BaseException] = None):
        super().__init__(f"storage backend unavailable for bucket {bucket!r}: {cause}")
        self.bucket = bucket
        self.cause = cause
