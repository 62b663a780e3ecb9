"""
Post store: the feed's posts with their likes and comments.

Posts are persisted newest-first as a single list under the ``posts`` key.
Every operation re-reads the list before acting, so the store reflects
writes made by other processes; concurrent writers overwrite each other.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError

from ..core.feed_query import SortMode, query
from ..models.post import AuthorSnapshot, Comment, Post, utcnow
from ..models.user import Session
from ..storage.json_storage import JsonStorage
from ..utils.exceptions import (
    EmptyCommentError,
    EmptyPostError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

POSTS_KEY = "posts"


class PostStore:
    """Authoritative ordered collection of posts"""

    def __init__(self, storage: JsonStorage, clock: Callable[[], datetime] = utcnow):
        self.storage = storage
        self.clock = clock
        self.posts: List[Post] = []
        self.reload()

    def reload(self) -> List[Post]:
        """Replace the in-memory posts with what is persisted."""
        raw = self.storage.load(POSTS_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Posts blob is not a list, ignoring it")
            raw = []
        posts: List[Post] = []
        for i, item in enumerate(raw):
            try:
                posts.append(Post(**item))
            except (TypeError, ValidationError) as e:
                logger.warning("Skipping invalid post record", index=i, error=str(e))
        self.posts = posts
        return self.posts

    def _save(self) -> None:
        self.storage.save(POSTS_KEY, [p.model_dump(mode="json") for p in self.posts])

    def _find(self, post_id: str) -> Post:
        for post in self.posts:
            if post.id == post_id:
                return post
        raise NotFoundError(post_id)

    def list_posts(self) -> List[Post]:
        return list(self.reload())

    def get_post(self, post_id: str) -> Optional[Post]:
        self.reload()
        try:
            return self._find(post_id)
        except NotFoundError:
            return None

    def create_post(self, session: Optional[Session], text: str, image_ref: str = "") -> Post:
        """Publish a post as the session's user, placed first in the feed."""
        if session is None:
            raise NotAuthenticatedError("Please login first")
        text = (text or "").strip()
        image_ref = image_ref or ""
        if not text and not image_ref:
            raise EmptyPostError()

        self.reload()
        post = Post(
            author=AuthorSnapshot.from_session(session),
            text=text,
            image_ref=image_ref,
            created_at=self.clock(),
        )
        self.posts.insert(0, post)
        self._save()
        logger.info("Post created", post_id=post.id, author_id=session.id, has_image=bool(image_ref))
        return post

    def delete_post(self, session: Optional[Session], post_id: str) -> None:
        """Remove a post. Only its author may delete it."""
        self.reload()
        post = self._find(post_id)
        if session is None or session.id != post.author.id:
            logger.warning(
                "Delete rejected, not the author",
                post_id=post_id,
                user_id=session.id if session else None,
            )
            raise NotAuthorizedError("Only the post author can delete this post")
        self.posts = [p for p in self.posts if p.id != post_id]
        self._save()
        logger.info("Post deleted", post_id=post_id, author_id=session.id)

    def toggle_like(self, session: Optional[Session], post_id: str) -> Post:
        """Like the post, or remove the like if the session already liked it."""
        if session is None:
            raise NotAuthenticatedError("Login to like")
        self.reload()
        post = self._find(post_id)
        if session.id in post.likes:
            post.likes.remove(session.id)
            liked = False
        else:
            post.likes.append(session.id)
            liked = True
        self._save()
        logger.info("Like toggled", post_id=post_id, user_id=session.id, liked=liked)
        return post

    def add_comment(self, session: Optional[Session], post_id: str, text: str) -> Comment:
        """Append a comment by the session's user to the post."""
        if session is None:
            raise NotAuthenticatedError("Login to comment")
        text = (text or "").strip()
        if not text:
            raise EmptyCommentError()
        self.reload()
        post = self._find(post_id)
        comment = Comment(
            user=AuthorSnapshot.from_session(session),
            text=text,
            created_at=self.clock(),
        )
        post.comments.append(comment)
        self._save()
        logger.info("Comment added", post_id=post_id, comment_id=comment.id, user_id=session.id)
        return comment

    def feed(self, search_term: str = "", sort_mode: str = SortMode.LATEST) -> List[Post]:
        """Reload and return the posts to display."""
        return query(self.reload(), search_term, sort_mode)

    @staticmethod
    def is_liked_by(post: Post, session: Optional[Session]) -> bool:
        return session is not None and post.is_liked_by(session.id)
