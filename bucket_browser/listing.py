"""
listing.py — Resolve a directory-style object listing into browser entries.

Entries are recomputed from the backend on every call; there is no cache.
"""

import logging
import unicodedata
from typing import List

from bucket_browser import config
from bucket_browser.errors import ListingFailed
from bucket_browser.models import Entry, EntryKind
from bucket_browser.paths import SEPARATOR, is_sentinel, strip_prefix
from bucket_browser.storage import StorageBackend

logger = logging.getLogger(__name__)


def _fold(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def sort_key(entry: Entry):
    # folders first, then accent- and case-insensitive name; casefold and raw name break ties
    return (not entry.is_folder, _fold(entry.name), entry.name.casefold(), entry.name)


def list_entries(
    backend: StorageBackend,
    prefix: str = "",
    hide_sentinels: bool = config.HIDE_SENTINELS,
) -> List[Entry]:
    """
    List the folders and files one level below `prefix`.

    `prefix` is "" for the root or a folder path ending in "/". The result is
    fully materialized and ordered folders-first, then by name. Any backend
    error raises ListingFailed; a partial result is never returned.
    """
    folders: List[Entry] = []
    files: List[Entry] = []
    seen = set()

    try:
        for obj in backend.list(prefix):
            if obj.is_prefix:
                name = strip_prefix(obj.prefix, prefix).removesuffix(SEPARATOR)
                if name and obj.prefix not in seen:
                    seen.add(obj.prefix)
                    folders.append(Entry(name=name, kind=EntryKind.FOLDER, full_path=obj.prefix))
                continue

            name = strip_prefix(obj.key, prefix)
            if not name or name.endswith(SEPARATOR):
                # a key equal to the prefix, or a directory marker object
                continue
            if hide_sentinels and is_sentinel(obj.key):
                continue
            files.append(
                Entry(
                    name=name,
                    kind=EntryKind.FILE,
                    size=obj.size,
                    last_modified=obj.last_modified,
                    full_path=obj.key,
                )
            )
    except Exception as e:
        raise ListingFailed(prefix, e) from e

    entries = folders + files
    entries.sort(key=sort_key)
    logger.debug("Listed prefix=%r folders=%d files=%d", prefix, len(folders), len(files))
    return entries
