from app.schemas.auth import TokenData
from app.schemas.blog import (
    AuthorProfile,
    AuthorSummary,
    BlogCreate,
    BlogDetail,
    BlogDetailEnvelope,
    BlogEnvelope,
    BlogListEnvelope,
    BlogListItem,
    BlogResponse,
    BlogUpdate,
    CommentResponse,
    MessageEnvelope,
    ReactionEnvelope,
    ReactionRequest,
)
from app.schemas.media import MediaAsset

__all__ = [
    "AuthorProfile",
    "AuthorSummary",
    "BlogCreate",
    "BlogDetail",
    "BlogDetailEnvelope",
    "BlogEnvelope",
    "BlogListEnvelope",
    "BlogListItem",
    "BlogResponse",
    "BlogUpdate",
    "CommentResponse",
    "MediaAsset",
    "MessageEnvelope",
    "ReactionEnvelope",
    "ReactionRequest",
    "TokenData",
]
