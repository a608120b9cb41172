"""
List view controller for the question list.

Owns the view state (search term, tag, page, rows, total count) and decides
when the current page has to be fetched again. Each fetch is issued as a
numbered ticket; a response is applied only if it belongs to the most
recently issued ticket, so a slow earlier response can never overwrite a
newer one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from qna.db import QuestionRecord, RecordStore, StoreError
from qna.pagination import PaginationView, present_pagination
from qna.query import ListQuery, build_list_query
from qna.tags import TagIndex

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_DATE_FORMAT = "%Y-%m-%d"


class ListStatus(Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    LOADED = "LOADED"
    FAILED = "FAILED"


@dataclass
class QuestionListItem:
    id: str
    title: str
    author: str
    tags: list[str]
    created_at: str
    answer_count: int

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "tags": list(self.tags),
            "created_at": self.created_at,
            "answer_count": self.answer_count,
        }


def format_timestamp(value: Optional[float], date_format: str = DEFAULT_DATE_FORMAT) -> str:
    if value is None:
        return ""
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime(date_format)


def normalize_question(
    record: QuestionRecord, date_format: str = DEFAULT_DATE_FORMAT
) -> QuestionListItem:
    """Turn a stored row into a list row ready for display."""
    return QuestionListItem(
        id=record.id,
        title=record.title,
        author=record.author or "",
        tags=list(record.tags or []),
        created_at=format_timestamp(record.created_at, date_format),
        answer_count=record.answer_count or 0,
    )


@dataclass
class ViewState:
    page_size: int = DEFAULT_PAGE_SIZE
    search_term: str = ""
    selected_tag: Optional[str] = None
    current_page: int = 1
    rows: list[QuestionListItem] = field(default_factory=list)
    total_count: int = 0
    status: ListStatus = ListStatus.IDLE
    error: Optional[str] = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FetchTicket:
    sequence: int
    query: ListQuery


class ListController:
    """
    State machine IDLE -> LOADING -> {LOADED, FAILED} for the question list.

    `scheduler` receives every issued ticket. The default runs it right away;
    an event loop can instead run tickets later via `run()` or deliver
    results with `resolve()` / `reject()`.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        date_format: str = DEFAULT_DATE_FORMAT,
        scheduler: Optional[Callable[[FetchTicket], object]] = None,
        tag_index: Optional[TagIndex] = None,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        self._store = store
        self._date_format = date_format
        self._schedule = scheduler or self.run
        self._tag_index = tag_index or TagIndex(store)
        self._sequence = 0
        self.state = ViewState(page_size=page_size)

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    @property
    def pagination(self) -> PaginationView:
        return present_pagination(
            self.state.total_count, self.state.page_size, self.state.current_page
        )

    def mount(self) -> FetchTicket:
        self._load_tags()
        return self._fetch()

    def set_search_term(self, term: str) -> Optional[FetchTicket]:
        term = term or ""
        if term == self.state.search_term:
            return None
        self.state.search_term = term
        self.state.current_page = 1
        return self._fetch()

    def select_tag(self, tag: Optional[str]) -> Optional[FetchTicket]:
        tag = tag or None
        if tag == self.state.selected_tag:
            return None
        self.state.selected_tag = tag
        self.state.current_page = 1
        return self._fetch()

    def go_to_page(self, page: int) -> Optional[FetchTicket]:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if page == self.state.current_page:
            return None
        self.state.current_page = page
        return self._fetch()

    def retry(self) -> FetchTicket:
        """Fetch again with the current parameters."""
        if not self._tag_index.loaded:
            self._load_tags()
        return self._fetch()

    def run(self, ticket: FetchTicket) -> bool:
        """Execute a ticket's row and count queries as one unit."""
        try:
            rows = self._store.select_questions(ticket.query.rows)
            total = self._store.count_questions(ticket.query.count)
        except StoreError as exc:
            return self.reject(ticket, str(exc))
        return self.resolve(ticket, rows, total)

    def is_current(self, ticket: FetchTicket) -> bool:
        return ticket.sequence == self._sequence

    def resolve(
        self, ticket: FetchTicket, rows: list[QuestionRecord], total_count: int
    ) -> bool:
        if not self.is_current(ticket):
            logger.debug(
                "Discarding stale response #%d (latest #%d)",
                ticket.sequence,
                self._sequence,
            )
            return False
        self.state.rows = [normalize_question(r, self._date_format) for r in rows]
        self.state.total_count = total_count
        self.state.status = ListStatus.LOADED
        self.state.error = None
        return True

    def reject(self, ticket: FetchTicket, message: str) -> bool:
        if not self.is_current(ticket):
            logger.debug("Discarding stale failure #%d: %s", ticket.sequence, message)
            return False
        logger.warning("Question list fetch #%d failed: %s", ticket.sequence, message)
        self.state.rows = []
        self.state.total_count = 0
        self.state.status = ListStatus.FAILED
        self.state.error = message
        return True

    def _load_tags(self) -> None:
        try:
            self.state.tags = self._tag_index.load()
        except StoreError as exc:
            logger.warning("Failed to load tag index: %s", exc)
            self.state.tags = []

    def _fetch(self) -> FetchTicket:
        self._sequence += 1
        query = build_list_query(
            self.state.search_term,
            self.state.selected_tag,
            self.state.current_page,
            self.state.page_size,
        )
        ticket = FetchTicket(sequence=self._sequence, query=query)
        self.state.status = ListStatus.LOADING
        self.state.error = None
        logger.debug(
            "Fetch #%d: search=%r tag=%r page=%d",
            ticket.sequence,
            self.state.search_term,
            self.state.selected_tag,
            self.state.current_page,
        )
        self._schedule(ticket)
        return ticket
