"""
Pydantic schemas for the Q&A FastAPI backend.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from qna.tags import normalize_tags


class QuestionListItemResponse(BaseModel):
    id: str
    title: str
    author: str
    tags: list[str]
    created_at: str
    answer_count: int


class PaginationResponse(BaseModel):
    current_page: int
    page_size: int
    total_count: int
    page_count: int
    visible: bool
    previous_enabled: bool
    next_enabled: bool
    pages: list[int]


class QuestionListResponse(BaseModel):
    items: list[QuestionListItemResponse]
    total_count: int
    page: int
    page_size: int
    search: str
    tag: Optional[str] = None
    pagination: PaginationResponse


class TagListResponse(BaseModel):
    tags: list[str]


class QuestionResponse(BaseModel):
    id: str
    title: str
    body: str
    author: str
    tags: list[str]
    created_at: Optional[float] = None
    answer_count: Optional[int] = None


class AnswerResponse(BaseModel):
    id: str
    question_id: str
    author: str
    body: str
    created_at: float


class QuestionDetailResponse(BaseModel):
    question: QuestionResponse
    answers: list[AnswerResponse]


class AskQuestionRequest(BaseModel):
    title: str = Field(..., max_length=300)
    body: str = ""
    author: str = Field(default="", max_length=100)
    tags: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: list[str]) -> list[str]:
        return normalize_tags(value)


class UpdateQuestionRequest(BaseModel):
    title: Optional[str] = Field(default=None, max_length=300)
    body: Optional[str] = None
    tags: Optional[list[str]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return normalize_tags(value) if value is not None else None


class AnswerRequest(BaseModel):
    author: str = Field(default="", max_length=100)
    body: str = Field(..., min_length=1)


class UpdateAnswerRequest(BaseModel):
    body: str = Field(..., min_length=1)
