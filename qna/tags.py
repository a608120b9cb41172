"""
Tag universe for the question list, plus helpers for tag input.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


def normalize_tags(tags: Optional[Iterable[str]]) -> list[str]:
    """Strip whitespace, drop empty tags and repeated tags (first one wins)."""
    cleaned = (tag.strip() for tag in (tags or []))
    return list(dict.fromkeys(tag for tag in cleaned if tag))


def parse_tags(raw: Optional[str]) -> list[str]:
    """Parse comma separated tag input, e.g. "SOC 2, 보안"."""
    return normalize_tags((raw or "").split(","))


def build_tag_universe(tag_sets: Iterable[Optional[Iterable[str]]]) -> list[str]:
    """
    Flatten every question's tags into one distinct list.

    Questions without a tag list contribute nothing. Order is display-only;
    tags keep the order in which they were first seen.
    """
    seen: dict[str, None] = {}
    for tags in tag_sets:
        for tag in tags or []:
            seen.setdefault(tag, None)
    return list(seen)


class TagIndex:
    """
    Tags across all questions, independent of the current filters.

    The index is computed on the first `load()` and kept for the lifetime
    of the owner; later mutations are not reflected until `invalidate()`.
    """

    def __init__(self, store):
        self._store = store
        self._tags: Optional[list[str]] = None

    @property
    def loaded(self) -> bool:
        return self._tags is not None

    @property
    def tags(self) -> list[str]:
        return list(self._tags or [])

    def load(self) -> list[str]:
        if self._tags is None:
            self._tags = build_tag_universe(self._store.list_tag_sets())
            logger.debug("Tag index built with %d tags", len(self._tags))
        return self.tags

    def invalidate(self) -> None:
        self._tags = None
