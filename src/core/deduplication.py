#!/usr/bin/env python3
"""
Article deduplication.

Feed items are keyed by their source URL. The key doubles as the
``external_id`` column, which carries a unique constraint in the store.
"""

import base64
import logging
from typing import Iterable, List, TypeVar, Callable

logger = logging.getLogger(__name__)

T = TypeVar('T')


def external_id_for_url(url: str) -> str:
    """
    Build the dedup key for a source URL.

    The key is the standard base64 encoding of the UTF-8 URL, so the same
    URL always maps to the same key and different URLs never collide.
    """
    if not url:
        raise ValueError("Cannot derive an external id from an empty URL")
    return base64.b64encode(url.encode('utf-8')).decode('ascii')


def url_for_external_id(external_id: str) -> str:
    """Inverse of external_id_for_url."""
    return base64.b64decode(external_id.encode('ascii')).decode('utf-8')


def unique_by_url(items: Iterable[T], url_of: Callable[[T], str]) -> List[T]:
    """
    Drop items whose URL was already seen, keeping the first occurrence.

    Items without a URL are dropped since they cannot be keyed.
    """
    seen = set()
    unique = []
    skipped = 0

    for item in items:
        url = url_of(item)
        if not url:
            skipped += 1
            continue

        key = external_id_for_url(url)
        if key in seen:
            skipped += 1
            continue

        seen.add(key)
        unique.append(item)

    if skipped:
        logger.debug(f"Dropped {skipped} duplicate or unkeyed feed items")

    return unique
