"""User and session data models"""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, Field


def new_user_id() -> str:
    return f"u_{uuid4().hex}"


class User(BaseModel):
    """Registered user. Password is kept as entered; this is a local demo."""
    id: str = Field(default_factory=new_user_id)
    name: str
    email: str  # lowercased, unique
    password_secret: str
    avatar_ref: str = ""
    
    class Config:
        frozen = True

    def to_session(self) -> "Session":
        return Session(id=self.id, name=self.name, email=self.email, avatar_ref=self.avatar_ref)


class Session(BaseModel):
    """Public projection of the logged-in user"""
    id: str
    name: str
    email: str
    avatar_ref: str = ""
    
    class Config:
        frozen = True
