"""
FastAPI routes for the MiniSocial feed.

Prefixes: /auth and /posts

The routes are a thin presentation layer: they call the identity and
post stores and return the re-read state. There is one session per
process, mirroring the single browser profile the feed was built for.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from pydantic import BaseModel

from minisocial.app import MiniSocialApp
from minisocial.core.feed_query import SortMode
from minisocial.models.post import AuthorSnapshot, Comment, Post
from minisocial.models.user import Session
from minisocial.services.post_store import PostStore
from minisocial.utils.exceptions import (
    DuplicateEmailError,
    EmptyCommentError,
    EmptyPostError,
    InvalidCredentialsError,
    MiniSocialError,
    MissingFieldsError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
)


auth_router = APIRouter(prefix="/auth", tags=["auth"])
posts_router = APIRouter(prefix="/posts", tags=["posts"])

ERROR_STATUS = {
    DuplicateEmailError: status.HTTP_400_BAD_REQUEST,
    MissingFieldsError: status.HTTP_400_BAD_REQUEST,
    EmptyPostError: status.HTTP_400_BAD_REQUEST,
    EmptyCommentError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    NotAuthenticatedError: status.HTTP_401_UNAUTHORIZED,
    NotAuthorizedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


class PostView(BaseModel):
    """Post as rendered in the feed"""
    id: str
    author: AuthorSnapshot
    text: str
    image_ref: str
    created_at: str
    like_count: int
    comment_count: int
    liked: bool
    comments: List[Comment]


def _http_error(exc: MiniSocialError) -> HTTPException:
    code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=str(exc))


def get_social_app(request: Request) -> MiniSocialApp:
    return request.app.state.social


def _post_to_view(post: Post, session: Optional[Session]) -> PostView:
    return PostView(
        id=post.id,
        author=post.author,
        text=post.text,
        image_ref=post.image_ref,
        created_at=post.created_at.isoformat(),
        like_count=post.like_count,
        comment_count=post.comment_count,
        liked=PostStore.is_liked_by(post, session),
        comments=post.comments,
    )


@auth_router.post("/signup", response_model=Session, status_code=status.HTTP_201_CREATED)
async def signup(
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    avatar_ref: str = Form(""),
    social: MiniSocialApp = Depends(get_social_app),
) -> Session:
    """Register and log in a new user."""
    try:
        return social.identity.sign_up(name=name, email=email, password=password, avatar_ref=avatar_ref)
    except MiniSocialError as e:
        raise _http_error(e)


@auth_router.post("/login", response_model=Session)
async def login(
    email: str = Form(""),
    password: str = Form(""),
    social: MiniSocialApp = Depends(get_social_app),
) -> Session:
    try:
        return social.identity.log_in(email=email, password=password)
    except MiniSocialError as e:
        raise _http_error(e)


@auth_router.post("/logout")
async def logout(social: MiniSocialApp = Depends(get_social_app)) -> Dict[str, str]:
    social.identity.log_out()
    return {"status": "success"}


@auth_router.get("/me", response_model=Session)
async def me(social: MiniSocialApp = Depends(get_social_app)) -> Session:
    session = social.identity.current_session()
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return session


@posts_router.get("", response_model=List[PostView])
async def list_feed(
    q: str = Query(""),
    sort: Optional[SortMode] = Query(None),
    social: MiniSocialApp = Depends(get_social_app),
) -> List[PostView]:
    """
    Feed for display.

    Query params:
        q: case-insensitive search over post text and author name
        sort: latest | oldest | mostLiked (defaults to feed.default_sort)
    """
    session = social.identity.current_session()
    sort_mode = sort or social.config.feed.default_sort
    return [_post_to_view(p, session) for p in social.posts.feed(q, sort_mode)]


@posts_router.post("", response_model=PostView, status_code=status.HTTP_201_CREATED)
async def create_post(
    text: str = Form(""),
    image_ref: str = Form(""),
    social: MiniSocialApp = Depends(get_social_app),
) -> PostView:
    session = social.identity.current_session()
    try:
        post = social.posts.create_post(session, text, image_ref)
    except MiniSocialError as e:
        raise _http_error(e)
    return _post_to_view(post, session)


@posts_router.delete("/{post_id}")
async def delete_post(post_id: str, social: MiniSocialApp = Depends(get_social_app)) -> Dict[str, Any]:
    session = social.identity.current_session()
    try:
        social.posts.delete_post(session, post_id)
    except MiniSocialError as e:
        raise _http_error(e)
    return {"status": "success"}


@posts_router.post("/{post_id}/like", response_model=PostView)
async def toggle_like(post_id: str, social: MiniSocialApp = Depends(get_social_app)) -> PostView:
    session = social.identity.current_session()
    try:
        post = social.posts.toggle_like(session, post_id)
    except MiniSocialError as e:
        raise _http_error(e)
    return _post_to_view(post, session)


@posts_router.post("/{post_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    text: str = Form(""),
    social: MiniSocialApp = Depends(get_social_app),
) -> Comment:
    session = social.identity.current_session()
    try:
        return social.posts.add_comment(session, post_id, text)
    except MiniSocialError as e:
        raise _http_error(e)
