"""
Record store abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Optional, Protocol

from sqlalchemy import (
    JSON,
    Column,
    Float,
    ForeignKey,
    String,
    Text,
    create_engine,
    delete,
    func,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from qna.query import QuestionFilters, RowQuery

QUESTION_FIELDS = ("title", "body", "tags")
ANSWER_FIELDS = ("author", "body")


class StoreError(Exception):
    """A read or write rejected by the record store."""


class RecordStore(Protocol):
    """Interface for the hosted question/answer tables."""

    def select_questions(self, query: RowQuery) -> list["QuestionRecord"]:
        ...

    def count_questions(self, filters: QuestionFilters) -> int:
        ...

    def list_tag_sets(self) -> list[Optional[list[str]]]:
        ...

    def get_question(self, question_id: str) -> Optional["QuestionRecord"]:
        ...

    def insert_question(
        self,
        title: str,
        body: str,
        author: str,
        tags: Optional[list[str]] = None,
        created_at: Optional[float] = None,
    ) -> "QuestionRecord":
        ...

    def update_question(
        self, question_id: str, patch: dict
    ) -> Optional["QuestionRecord"]:
        ...

    def list_answers(self, question_id: str) -> list["AnswerRecord"]:
        ...

    def insert_answer(
        self,
        question_id: str,
        author: str,
        body: str,
        created_at: Optional[float] = None,
    ) -> "AnswerRecord":
        ...

    def insert_answers(
        self, question_id: str, answers: list[dict]
    ) -> list["AnswerRecord"]:
        ...

    def update_answer(self, answer_id: str, patch: dict) -> Optional["AnswerRecord"]:
        ...

    def delete_answer(self, answer_id: str) -> bool:
        ...

    def delete_all(self) -> tuple[int, int]:
        ...


@dataclass
class QuestionRecord:
    id: str
    title: str
    body: str
    author: str
    tags: Optional[list[str]] = None
    created_at: Optional[float] = field(default_factory=lambda: time.time())
    answer_count: Optional[int] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "author": self.author,
            "tags": list(self.tags or []),
            "created_at": self.created_at,
            "answer_count": self.answer_count,
        }


@dataclass
class AnswerRecord:
    id: str
    question_id: str
    author: str
    body: str
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "question_id": self.question_id,
            "author": self.author,
            "body": self.body,
            "created_at": self.created_at,
        }


def _check_patch(patch: dict, allowed: Iterable[str]) -> dict:
    unknown = set(patch) - set(allowed)
    if unknown:
        raise StoreError(f"Unknown column(s): {', '.join(sorted(unknown))}")
    return patch


def _check_answers(answers: list[dict]) -> list[dict]:
    for answer in answers:
        _check_patch(answer, ANSWER_FIELDS + ("created_at",))
        if not isinstance(answer.get("body", ""), str):
            raise StoreError("Answer body must be text")
    return answers


def _sort_value(record: QuestionRecord, name: str):
    value = getattr(record, name)
    if value is None:
        return 0.0 if name == "created_at" else ""
    return value


class InMemoryRecordStore:
    """Simple in-memory store for development and tests."""

    def __init__(self):
        self.questions: Dict[str, QuestionRecord] = {}
        self.answers: Dict[str, AnswerRecord] = {}

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.questions.clear()
        self.answers.clear()

    def _with_count(self, record: QuestionRecord) -> QuestionRecord:
        count = sum(1 for a in self.answers.values() if a.question_id == record.id)
        tags = list(record.tags) if record.tags is not None else None
        return replace(record, tags=tags, answer_count=count)

    def select_questions(self, query: RowQuery) -> list[QuestionRecord]:
        matched = [q for q in self.questions.values() if query.filters.matches(q)]
        # Stable sorts applied from the least significant key.
        for key in reversed(query.order):
            matched.sort(key=lambda q: _sort_value(q, key.field), reverse=key.descending)
        start = query.row_range.start
        page = matched[start : start + query.row_range.limit]
        return [self._with_count(q) for q in page]

    def count_questions(self, filters: QuestionFilters) -> int:
        return sum(1 for q in self.questions.values() if filters.matches(q))

    def list_tag_sets(self) -> list[Optional[list[str]]]:
        return [list(q.tags) if q.tags is not None else None for q in self.questions.values()]

    def get_question(self, question_id: str) -> Optional[QuestionRecord]:
        record = self.questions.get(question_id)
        return self._with_count(record) if record else None

    def insert_question(
        self,
        title: str,
        body: str,
        author: str,
        tags: Optional[list[str]] = None,
        created_at: Optional[float] = None,
    ) -> QuestionRecord:
        record = QuestionRecord(
            id=uuid.uuid4().hex,
            title=title,
            body=body,
            author=author,
            tags=list(tags) if tags is not None else None,
            created_at=created_at if created_at is not None else time.time(),
        )
        self.questions[record.id] = record
        return self._with_count(record)

    def update_question(self, question_id: str, patch: dict) -> Optional[QuestionRecord]:
        _check_patch(patch, QUESTION_FIELDS)
        record = self.questions.get(question_id)
        if not record:
            return None
        for key, value in patch.items():
            setattr(record, key, list(value) if key == "tags" and value is not None else value)
        return self._with_count(record)

    def list_answers(self, question_id: str) -> list[AnswerRecord]:
        answers = [a for a in self.answers.values() if a.question_id == question_id]
        answers.sort(key=lambda a: (a.created_at, a.id))
        return [replace(a) for a in answers]

    def insert_answer(
        self,
        question_id: str,
        author: str,
        body: str,
        created_at: Optional[float] = None,
    ) -> AnswerRecord:
        if question_id not in self.questions:
            raise StoreError(f"Question {question_id} does not exist")
        record = AnswerRecord(
            id=uuid.uuid4().hex,
            question_id=question_id,
            author=author,
            body=body,
            created_at=created_at if created_at is not None else time.time(),
        )
        self.answers[record.id] = record
        return replace(record)

    def insert_answers(self, question_id: str, answers: list[dict]) -> list[AnswerRecord]:
        """Insert all answers or none of them."""
        _check_answers(answers)
        if question_id not in self.questions:
            raise StoreError(f"Question {question_id} does not exist")
        now = time.time()
        records = [
            AnswerRecord(
                id=uuid.uuid4().hex,
                question_id=question_id,
                author=answer.get("author", ""),
                body=answer.get("body", ""),
                created_at=(
                    answer["created_at"]
                    if answer.get("created_at") is not None
                    else now + i * 1e-6
                ),
            )
            for i, answer in enumerate(answers)
        ]
        for record in records:
            self.answers[record.id] = record
        return [replace(r) for r in records]

    def update_answer(self, answer_id: str, patch: dict) -> Optional[AnswerRecord]:
        _check_patch(patch, ANSWER_FIELDS)
        record = self.answers.get(answer_id)
        if not record:
            return None
        for key, value in patch.items():
            setattr(record, key, value)
        return replace(record)

    def delete_answer(self, answer_id: str) -> bool:
        return self.answers.pop(answer_id, None) is not None

    def delete_all(self) -> tuple[int, int]:
        counts = (len(self.answers), len(self.questions))
        self.reset()
        return counts


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresRecordStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresRecordStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _answer_count(self):
        return (
            select(func.count(AnswerRow.id))
            .where(AnswerRow.question_id == QuestionRow.id)
            .correlate(QuestionRow)
            .scalar_subquery()
        )

    def _apply_filters(self, stmt, filters: QuestionFilters):
        if filters.title_contains is not None:
            pattern = f"%{_escape_like(filters.title_contains)}%"
            stmt = stmt.where(QuestionRow.title.ilike(pattern, escape="\\"))
        if filters.tag is not None:
            has_tag = (
                select(QuestionTagRow.question_id)
                .where(
                    QuestionTagRow.question_id == QuestionRow.id,
                    QuestionTagRow.tag == filters.tag,
                )
                .exists()
            )
            stmt = stmt.where(has_tag)
        return stmt

    def _to_question_record(
        self, row: "QuestionRow", answer_count: Optional[int] = None
    ) -> QuestionRecord:
        return QuestionRecord(
            id=row.id,
            title=row.title,
            body=row.body,
            author=row.author,
            tags=list(row.tags) if row.tags is not None else None,
            created_at=row.created_at,
            answer_count=answer_count,
        )

    def _to_answer_record(self, row: "AnswerRow") -> AnswerRecord:
        return AnswerRecord(
            id=row.id,
            question_id=row.question_id,
            author=row.author,
            body=row.body,
            created_at=row.created_at,
        )

    def _replace_tags(self, session: Session, question_id: str, tags) -> None:
        session.execute(delete(QuestionTagRow).where(QuestionTagRow.question_id == question_id))
        for tag in dict.fromkeys(tags or []):
            session.add(QuestionTagRow(question_id=question_id, tag=tag))

    def select_questions(self, query: RowQuery) -> list[QuestionRecord]:
        stmt = select(QuestionRow, self._answer_count().label("answer_count"))
        stmt = self._apply_filters(stmt, query.filters)
        for key in query.order:
            column = getattr(QuestionRow, key.field)
            stmt = stmt.order_by(column.desc() if key.descending else column.asc())
        stmt = stmt.offset(query.row_range.start).limit(query.row_range.limit)
        try:
            with self.Session() as session:
                rows = session.execute(stmt).all()
                return [self._to_question_record(row, count) for row, count in rows]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def count_questions(self, filters: QuestionFilters) -> int:
        stmt = self._apply_filters(select(func.count()).select_from(QuestionRow), filters)
        try:
            with self.Session() as session:
                return session.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def list_tag_sets(self) -> list[Optional[list[str]]]:
        try:
            with self.Session() as session:
                tags = session.execute(select(QuestionRow.tags)).scalars().all()
                return [list(t) if t is not None else None for t in tags]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def get_question(self, question_id: str) -> Optional[QuestionRecord]:
        stmt = select(QuestionRow, self._answer_count().label("answer_count")).where(
            QuestionRow.id == question_id
        )
        try:
            with self.Session() as session:
                result = session.execute(stmt).first()
                if not result:
                    return None
                row, count = result
                return self._to_question_record(row, count)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def insert_question(
        self,
        title: str,
        body: str,
        author: str,
        tags: Optional[list[str]] = None,
        created_at: Optional[float] = None,
    ) -> QuestionRecord:
        try:
            with self.Session() as session:
                row = QuestionRow(
                    id=uuid.uuid4().hex,
                    title=title,
                    body=body,
                    author=author,
                    tags=list(tags) if tags is not None else None,
                    created_at=created_at if created_at is not None else time.time(),
                )
                session.add(row)
                self._replace_tags(session, row.id, tags)
                session.commit()
                session.refresh(row)
                return self._to_question_record(row, 0)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def update_question(self, question_id: str, patch: dict) -> Optional[QuestionRecord]:
        _check_patch(patch, QUESTION_FIELDS)
        try:
            with self.Session() as session:
                row = session.get(QuestionRow, question_id)
                if not row:
                    return None
                for key, value in patch.items():
                    if key == "tags":
                        value = list(value) if value is not None else None
                        self._replace_tags(session, question_id, value)
                    setattr(row, key, value)
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return self.get_question(question_id)

    def list_answers(self, question_id: str) -> list[AnswerRecord]:
        stmt = (
            select(AnswerRow)
            .where(AnswerRow.question_id == question_id)
            .order_by(AnswerRow.created_at.asc(), AnswerRow.id.asc())
        )
        try:
            with self.Session() as session:
                return [self._to_answer_record(row) for row in session.execute(stmt).scalars()]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def insert_answer(
        self,
        question_id: str,
        author: str,
        body: str,
        created_at: Optional[float] = None,
    ) -> AnswerRecord:
        try:
            with self.Session() as session:
                if not session.get(QuestionRow, question_id):
                    raise StoreError(f"Question {question_id} does not exist")
                row = AnswerRow(
                    id=uuid.uuid4().hex,
                    question_id=question_id,
                    author=author,
                    body=body,
                    created_at=created_at if created_at is not None else time.time(),
                )
                session.add(row)
                session.commit()
                session.refresh(row)
                return self._to_answer_record(row)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def insert_answers(self, question_id: str, answers: list[dict]) -> list[AnswerRecord]:
        """Insert all answers in one transaction."""
        _check_answers(answers)
        now = time.time()
        try:
            with self.Session() as session:
                if not session.get(QuestionRow, question_id):
                    raise StoreError(f"Question {question_id} does not exist")
                rows = [
                    AnswerRow(
                        id=uuid.uuid4().hex,
                        question_id=question_id,
                        author=answer.get("author", ""),
                        body=answer.get("body", ""),
                        created_at=(
                            answer["created_at"]
                            if answer.get("created_at") is not None
                            else now + i * 1e-6
                        ),
                    )
                    for i, answer in enumerate(answers)
                ]
                session.add_all(rows)
                session.commit()
                return [self._to_answer_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def update_answer(self, answer_id: str, patch: dict) -> Optional[AnswerRecord]:
        _check_patch(patch, ANSWER_FIELDS)
        try:
            with self.Session() as session:
                row = session.get(AnswerRow, answer_id)
                if not row:
                    return None
                for key, value in patch.items():
                    setattr(row, key, value)
                session.commit()
                session.refresh(row)
                return self._to_answer_record(row)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def delete_answer(self, answer_id: str) -> bool:
        try:
            with self.Session() as session:
                deleted = session.execute(delete(AnswerRow).where(AnswerRow.id == answer_id))
                session.commit()
                return bool(deleted.rowcount)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def delete_all(self) -> tuple[int, int]:
        # Answers first because of the foreign key.
        try:
            with self.Session() as session:
                answers = session.execute(delete(AnswerRow)).rowcount or 0
                session.execute(delete(QuestionTagRow))
                questions = session.execute(delete(QuestionRow)).rowcount or 0
                session.commit()
                return answers, questions
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc


Base = declarative_base()


class QuestionRow(Base):
    __tablename__ = "questions"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=False, default="")
    author = Column(String, nullable=False, default="")
    tags = Column(JSON(none_as_null=True), nullable=True)
    created_at = Column(Float, nullable=False, index=True)


class QuestionTagRow(Base):
    __tablename__ = "question_tags"

    question_id = Column(String, ForeignKey("questions.id"), primary_key=True)
    tag = Column(String, primary_key=True, index=True)


class AnswerRow(Base):
    __tablename__ = "answers"

    id = Column(String, primary_key=True)
    question_id = Column(String, ForeignKey("questions.id"), nullable=False, index=True)
    author = Column(String, nullable=False, default="")
    body = Column(Text, nullable=False, default="")
    created_at = Column(Float, nullable=False)
