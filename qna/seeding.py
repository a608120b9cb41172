"""
Helpers used by the maintenance scripts to seed or reset the record store.

A payload is a dict with `title`, `content`, `author`, optional `tags` and
an optional `answers` list of `{"author", "content"}` dicts.
"""

from __future__ import annotations

import logging
from typing import Iterable

from qna.db import QuestionRecord, RecordStore, StoreError
from qna.tags import normalize_tags

logger = logging.getLogger(__name__)


def insert_question_with_answers(store: RecordStore, payload: dict) -> QuestionRecord:
    """
    Insert a question, then its answers as one batch.

    The answers are stored together or not at all; a failed batch is logged
    and the question is kept.
    """
    question = store.insert_question(
        title=payload["title"],
        body=payload.get("content", ""),
        author=payload.get("author", ""),
        tags=normalize_tags(payload.get("tags")),
    )
    answers = [
        {"author": answer.get("author", ""), "body": answer.get("content", "")}
        for answer in payload.get("answers") or []
    ]
    if answers:
        try:
            store.insert_answers(question.id, answers)
        except StoreError as exc:
            logger.error(
                'Error inserting answers for question "%s": %s', payload["title"], exc
            )
    return question


def reset_store(store: RecordStore, payloads: Iterable[dict]) -> int:
    """
    Delete every answer and question, then insert `payloads`.

    Returns the number of questions inserted. A question that fails to insert
    is skipped; a failed delete aborts the reset by raising StoreError.
    """
    logger.info("Deleting existing data...")
    answers, questions = store.delete_all()
    logger.info("Deleted %d answers and %d questions", answers, questions)

    logger.info("Inserting new data...")
    inserted = 0
    for payload in payloads:
        try:
            insert_question_with_answers(store, payload)
        except StoreError as exc:
            logger.error('Error inserting question "%s": %s', payload["title"], exc)
            continue
        inserted += 1
    return inserted
