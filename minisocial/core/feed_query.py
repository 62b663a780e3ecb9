"""Feed filtering and ordering"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List

from ..models.post import Post
from ..utils.exceptions import InvalidSortModeError


class SortMode(str, Enum):
    LATEST = "latest"
    OLDEST = "oldest"
    MOST_LIKED = "mostLiked"


def matches(post: Post, needle: str) -> bool:
    """Case-insensitive substring match on post text or author name"""
    if not needle:
        return True
    text = (post.text or "").lower()
    author = (post.author.name if post.author else "").lower()
    return needle in text or needle in author


def query(posts: Iterable[Post], search_term: str = "", sort_mode: str = SortMode.LATEST) -> List[Post]:
    """
    Return the posts to display, filtered by search_term and ordered by sort_mode.

    Sorting is stable, so posts that tie keep their relative order from the
    input. The input is never modified.
    """
    try:
        mode = SortMode(sort_mode)
    except ValueError:
        raise InvalidSortModeError(str(sort_mode))

    needle = (search_term or "").strip().lower()
    shown = [p for p in posts if matches(p, needle)]

    if mode is SortMode.LATEST:
        shown.sort(key=lambda p: p.created_at, reverse=True)
    elif mode is SortMode.OLDEST:
        shown.sort(key=lambda p: p.created_at)
    else:
        shown.sort(key=lambda p: len(p.likes or []), reverse=True)
    return shown
