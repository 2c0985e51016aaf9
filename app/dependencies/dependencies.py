# app/dependencies/dependencies.py

"""Application dependencies: authentication, repositories and services."""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, settings
from app.db import get_session
from app.errors.auth import InactiveUserError, InvalidTokenError, UserAuthenticationError
from app.managers.token_manager import decode_access_token
from app.models import UserDB
from app.repositories import BlogRepository, CommentRepository, UserRepository
from app.repositories.blog import SortOrder
from app.services import BlogService, MediaService
from app.utils.helpers import host, parse_positive_int, split_csv

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=settings.TOKEN_URL, auto_error=False)

# Commits before the response is sent
SessionDep = Annotated[AsyncSession, Depends(get_session, scope="function")]


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserDB:
    """
    Get current authenticated user using user_id from token claims.

    Parameters
    ----------
    token : str | None
        Bearer token.
    session : AsyncSession
        Database session.

    Returns
    -------
    UserDB
        Current authenticated user.

    Raises
    ------
    UserAuthenticationError
        If the token is missing, invalid, or its user no longer exists.
    """
    if not token:
        raise UserAuthenticationError("Not authenticated")

    token_data = decode_access_token(token)
    if not token_data or not token_data.user_id:
        raise InvalidTokenError

    user = await UserRepository(session).get_by_id(token_data.user_id)
    if not user:
        raise InactiveUserError

    return user


async def get_optional_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserDB | None:
    """
    Resolve the caller when a valid bearer token is present.

    Returns
    -------
    UserDB | None
        The user, or None for anonymous callers and unusable tokens.
    """
    if not token:
        return None
    token_data = decode_access_token(token)
    if not token_data or not token_data.user_id:
        return None
    return await UserRepository(session).get_by_id(token_data.user_id)


UserDBDep = Annotated[UserDB, Depends(get_current_user)]
OptionalUserDep = Annotated[UserDB | None, Depends(get_optional_user)]


def get_viewer_id(request: Request, user: OptionalUserDep) -> str:
    """Identify a viewer by user id when logged in, else by client address."""
    return str(user.uuid) if user else host(request)


ViewerDep = Annotated[str, Depends(get_viewer_id)]


def get_blog_repository(session: SessionDep) -> BlogRepository:
    """
    Resolve the `BlogRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    BlogRepository
        Repository instance bound to the session.
    """
    return BlogRepository(session)


def get_comment_repository(session: SessionDep) -> CommentRepository:
    return CommentRepository(session)


@lru_cache
def get_media_service() -> MediaService:
    """Build the media service once for the configured storage backend."""
    return MediaService()


BlogRepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]
CommentRepoDep = Annotated[CommentRepository, Depends(get_comment_repository)]
MediaDep = Annotated[MediaService, Depends(get_media_service)]


def get_blog_service(
    blogs: BlogRepoDep,
    comments: CommentRepoDep,
    media: MediaDep,
) -> BlogService:
    return BlogService(blogs, comments, media)


BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]


@dataclass(frozen=True)
class BlogListQuery:
    """
    Query container for blog listing and filters.

    Parameters
    ----------
    tags : list[str]
        Tags to filter by (any match).
    title : str | None
        Case-insensitive title fragment.
    sort_by : SortOrder
        "mostViewed", "mostLiked" or "newest".
    page : int
        1-based page number.
    limit : int
        Page size.
    """

    tags: list[str] = field(default_factory=list)
    title: str | None = None
    sort_by: SortOrder = "newest"
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT


def get_blog_list_query(
    tags: Annotated[str | None, Query(description="Comma-separated tags")] = None,
    title: Annotated[str | None, Query(description="Title fragment")] = None,
    sort_by: Annotated[
        str | None,
        Query(alias="sortBy", description="mostViewed, mostLiked, or newest (default)"),
    ] = None,
    page: Annotated[str | None, Query(description="Page number (default 1)")] = None,
    limit: Annotated[
        str | None,
        Query(description=f"Page size (default {DEFAULT_PAGE_LIMIT}, max {MAX_PAGE_LIMIT})"),
    ] = None,
) -> BlogListQuery:
    """
    Dependency to construct `BlogListQuery` from query parameters.

    Unparseable or non-positive ``page`` / ``limit`` values fall back to
    their defaults instead of failing the request.

    Returns
    -------
    BlogListQuery
        Aggregated query parameters object.
    """
    sort: SortOrder = "newest"
    if sort_by == "mostViewed":
        sort = "mostViewed"
    elif sort_by == "mostLiked":
        sort = "mostLiked"

    return BlogListQuery(
        tags=split_csv(tags),
        title=title or None,
        sort_by=sort,
        page=parse_positive_int(page, DEFAULT_PAGE),
        limit=min(parse_positive_int(limit, DEFAULT_PAGE_LIMIT), MAX_PAGE_LIMIT),
    )


BlogQueryListDep = Annotated[BlogListQuery, Depends(get_blog_list_query)]
