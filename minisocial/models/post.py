"""Post, comment and author snapshot models"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from .user import Session


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so feed ordering can compare them"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def new_post_id() -> str:
    return f"p_{uuid4().hex}"


def new_comment_id() -> str:
    return f"c_{uuid4().hex}"


class AuthorSnapshot(BaseModel):
    """Identity fields copied at creation time, not a live reference"""
    id: str
    name: str
    avatar_ref: str = ""

    @classmethod
    def from_session(cls, session: Session) -> "AuthorSnapshot":
        return cls(id=session.id, name=session.name, avatar_ref=session.avatar_ref)


class Comment(BaseModel):
    id: str = Field(default_factory=new_comment_id)
    user: AuthorSnapshot
    text: str = Field(..., min_length=1)
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Post(BaseModel):
    """Feed post. Likes hold user ids with set semantics, kept in like order."""
    id: str = Field(default_factory=new_post_id)
    author: AuthorSnapshot
    text: str = ""
    image_ref: str = ""
    created_at: datetime
    likes: List[str] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("text", "image_ref", mode="before")
    @classmethod
    def _none_as_empty_string(cls, value):
        return "" if value is None else value

    @field_validator("likes", mode="before")
    @classmethod
    def _dedupe_likes(cls, value):
        if value is None:
            return []
        seen = []
        for user_id in value:
            if user_id not in seen:
                seen.append(user_id)
        return seen

    @field_validator("comments", mode="before")
    @classmethod
    def _none_as_no_comments(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _has_text_or_image(self) -> "Post":
        if not self.text and not self.image_ref:
            raise ValueError("Post must have text or an image")
        return self

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def comment_count(self) -> int:
        return len(self.comments)

    def is_liked_by(self, user_id: str) -> bool:
        return user_id in self.likes
