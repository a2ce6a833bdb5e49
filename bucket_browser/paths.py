"""
paths.py — Folder paths over flat object keys.

A "folder" is a key prefix ending in "/". Everything here is pure string
manipulation; nothing touches storage.
"""

from typing import List, Optional

from bucket_browser.models import BreadcrumbItem

SEPARATOR = "/"
SENTINEL_NAME = ".keep"
ROOT_TITLE = "Home"


def normalize_prefix(prefix: Optional[str]) -> str:
    """Root is "", any other folder prefix ends with exactly one trailing "/"."""
    if not prefix:
        return ""
    return prefix if prefix.endswith(SEPARATOR) else prefix + SEPARATOR


def breadcrumbs(prefix: str) -> List[BreadcrumbItem]:
    items = [BreadcrumbItem(title=ROOT_TITLE, path="")]
    path = ""
    for segment in (prefix or "").split(SEPARATOR):
        if not segment:
            continue
        path += segment + SEPARATOR
        items.append(BreadcrumbItem(title=segment, path=path))
    return items


def child_prefix(prefix: str, folder_name: str) -> str:
    if prefix:
        return f"{prefix}{folder_name}{SEPARATOR}"
    return f"{folder_name}{SEPARATOR}"


def sentinel_key(folder_path: str) -> str:
    return folder_path + SENTINEL_NAME


def is_sentinel(key: str) -> bool:
    return key.rsplit(SEPARATOR, 1)[-1] == SENTINEL_NAME


def strip_prefix(key: str, prefix: str) -> str:
    return key[len(prefix):] if prefix and key.startswith(prefix) else key


def object_key(prefix: str, filename: str) -> str:
    return f"{prefix}{filename}" if prefix else filename


def basename(key: str, default: str = "download") -> str:
    return key.rsplit(SEPARATOR, 1)[-1] or default
