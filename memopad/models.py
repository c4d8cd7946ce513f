"""Pydantic models for request/response schemas."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from memopad.config import settings

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class MemoWriteRequest(BaseModel):
    title: str = Field(default="", max_length=settings.max_title_length)
    content: str = Field(default="", max_length=settings.max_content_length)

    @field_validator("content", mode="before")
    @classmethod
    def none_content_is_empty(cls, v: str | None) -> str:
        return "" if v is None else v


class MemoResponse(BaseModel):
    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime


class MemoListResponse(BaseModel):
    memos: list[MemoResponse]
    total: int


class UserWriteRequest(BaseModel):
    name: str = Field(max_length=200)
    email: str = Field(max_length=320)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not _EMAIL_RE.match(v):
            raise ValueError("Enter a valid email address")
        return v


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int


class TextChangeRequest(BaseModel):
    text: str = Field(default="", max_length=settings.max_content_length)
    cursor: int = Field(default=0, description="Cursor offset reported by the input control")


class KeyDownRequest(BaseModel):
    text: str = Field(default="", max_length=settings.max_content_length)
    selection_start: int = 0
    selection_end: int | None = None
    key: str = Field(default="Tab", max_length=32)
    shift: bool = False


class EditResponse(BaseModel):
    text: str
    selection_start: int
    selection_end: int
    handled: bool = Field(description="Whether the engine changed the buffer or selection")


class PreviewRequest(BaseModel):
    content: str = Field(default="", max_length=settings.max_content_length)


class PreviewResponse(BaseModel):
    html: str
    text: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str

