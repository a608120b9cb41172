"""
HTTP routes for the Q&A backend API.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from qna.config import Settings, get_settings
from qna.controller import normalize_question
from qna.db import AnswerRecord, QuestionRecord, RecordStore, StoreError
from qna.dependencies import get_record_store
from qna.pagination import present_pagination
from qna.query import build_list_query
from qna.schemas import (
    AnswerRequest,
    AnswerResponse,
    AskQuestionRequest,
    PaginationResponse,
    QuestionDetailResponse,
    QuestionListItemResponse,
    QuestionListResponse,
    QuestionResponse,
    TagListResponse,
    UpdateAnswerRequest,
    UpdateQuestionRequest,
)
from qna.tags import build_tag_universe

logger = logging.getLogger(__name__)

router = APIRouter(tags=["questions"])

# Larger offsets overflow the store's integer range.
MAX_PAGE = 1_000_000


def _store_failure(exc: StoreError) -> HTTPException:
    logger.error("Record store error: %s", exc)
    return HTTPException(status_code=502, detail=str(exc))


def _question_response(record: QuestionRecord) -> QuestionResponse:
    return QuestionResponse(**record.as_dict())


def _answer_response(record: AnswerRecord) -> AnswerResponse:
    return AnswerResponse(**record.as_dict())


@router.get("/questions", response_model=QuestionListResponse)
def list_questions(
    search: str = Query("", max_length=200),
    tag: Optional[str] = Query(None),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    """
    One page of the question list, newest first.

    Rows and total count are fetched as a unit; if either fails the whole
    request fails.
    """
    query = build_list_query(search, tag, page, settings.page_size)
    try:
        rows = store.select_questions(query.rows)
        total = store.count_questions(query.count)
    except StoreError as exc:
        raise _store_failure(exc)

    items = [
        QuestionListItemResponse(**normalize_question(row, settings.date_format).as_dict())
        for row in rows
    ]
    pagination = present_pagination(total, settings.page_size, page)
    return QuestionListResponse(
        items=items,
        total_count=total,
        page=page,
        page_size=settings.page_size,
        search=search,
        tag=tag or None,
        pagination=PaginationResponse(**pagination.as_dict()),
    )


@router.get("/tags", response_model=TagListResponse)
def list_tags(store: RecordStore = Depends(get_record_store)):
    try:
        tag_sets = store.list_tag_sets()
    except StoreError as exc:
        raise _store_failure(exc)
    return TagListResponse(tags=build_tag_universe(tag_sets))


@router.get("/questions/{question_id}", response_model=QuestionDetailResponse)
def get_question(question_id: str, store: RecordStore = Depends(get_record_store)):
    try:
        question = store.get_question(question_id)
        if not question:
            raise HTTPException(status_code=404, detail="Question not found")
        answers = store.list_answers(question_id)
    except StoreError as exc:
        raise _store_failure(exc)
    return QuestionDetailResponse(
        question=_question_response(question),
        answers=[_answer_response(a) for a in answers],
    )


@router.post("/questions", response_model=QuestionResponse, status_code=201)
def ask_question(
    payload: AskQuestionRequest, store: RecordStore = Depends(get_record_store)
):
    try:
        record = store.insert_question(
            title=payload.title,
            body=payload.body,
            author=payload.author,
            tags=payload.tags,
        )
    except StoreError as exc:
        raise _store_failure(exc)
    logger.info("Question %s created", record.id)
    return _question_response(record)


@router.patch("/questions/{question_id}", response_model=QuestionResponse)
def update_question(
    question_id: str,
    payload: UpdateQuestionRequest,
    store: RecordStore = Depends(get_record_store),
):
    patch = payload.model_dump(exclude_unset=True, exclude_none=True)
    try:
        if patch:
            record = store.update_question(question_id, patch)
        else:
            record = store.get_question(question_id)
    except StoreError as exc:
        raise _store_failure(exc)
    if not record:
        raise HTTPException(status_code=404, detail="Question not found")
    return _question_response(record)


@router.post(
    "/questions/{question_id}/answers", response_model=AnswerResponse, status_code=201
)
def add_answer(
    question_id: str,
    payload: AnswerRequest,
    store: RecordStore = Depends(get_record_store),
):
    try:
        if not store.get_question(question_id):
            raise HTTPException(status_code=404, detail="Question not found")
        record = store.insert_answer(question_id, payload.author, payload.body)
    except StoreError as exc:
        raise _store_failure(exc)
    return _answer_response(record)


@router.patch("/answers/{answer_id}", response_model=AnswerResponse)
def update_answer(
    answer_id: str,
    payload: UpdateAnswerRequest,
    store: RecordStore = Depends(get_record_store),
):
    try:
        record = store.update_answer(answer_id, {"body": payload.body})
    except StoreError as exc:
        raise _store_failure(exc)
    if not record:
        raise HTTPException(status_code=404, detail="Answer not found")
    return _answer_response(record)


@router.delete("/answers/{answer_id}", status_code=204)
def delete_answer(
    answer_id: str,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    if not settings.allow_answer_delete:
        raise HTTPException(status_code=403, detail="Deleting answers is disabled")
    try:
        deleted = store.delete_answer(answer_id)
    except StoreError as exc:
        raise _store_failure(exc)
    if not deleted:
        raise HTTPException(status_code=404, detail="Answer not found")
    return Response(status_code=204)
