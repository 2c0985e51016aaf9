# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    BlogListQuery,
    BlogQueryListDep,
    BlogRepoDep,
    BlogServiceDep,
    CommentRepoDep,
    MediaDep,
    OptionalUserDep,
    UserDBDep,
    ViewerDep,
    get_blog_list_query,
    get_blog_repository,
    get_blog_service,
    get_comment_repository,
    get_current_user,
    get_media_service,
    get_optional_user,
    get_viewer_id,
)

__all__ = [
    "BlogListQuery",
    "BlogQueryListDep",
    "BlogRepoDep",
    "BlogServiceDep",
    "CommentRepoDep",
    "MediaDep",
    "OptionalUserDep",
    "UserDBDep",
    "ViewerDep",
    "get_blog_list_query",
    "get_blog_repository",
    "get_blog_service",
    "get_comment_repository",
    "get_current_user",
    "get_media_service",
    "get_optional_user",
    "get_viewer_id",
]
