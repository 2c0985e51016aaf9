from app.configs.settings import (
    AUTHOR_POSTS_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    Settings,
    settings,
)

__all__ = [
    "AUTHOR_POSTS_LIMIT",
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_LIMIT",
    "MAX_PAGE_LIMIT",
    "Settings",
    "settings",
]
