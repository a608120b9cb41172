"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from qna.config import get_settings
from qna.db import InMemoryRecordStore, PostgresRecordStore, RecordStore

logger = logging.getLogger(__name__)

_record_store: RecordStore | None = None


def get_record_store() -> RecordStore:
    """
    Return a singleton record store so rows persist across requests.
    """
    global _record_store
    if _record_store:
        return _record_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        logger.info("Using in-memory record store")
        _record_store = InMemoryRecordStore()
    else:
        _record_store = PostgresRecordStore(settings.database_url)
    return _record_store
