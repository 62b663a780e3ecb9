"""MiniSocial data models"""

from .user import User, Session
from .post import AuthorSnapshot, Comment, Post

__all__ = ["User", "Session", "AuthorSnapshot", "Comment", "Post"]
