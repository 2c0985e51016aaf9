"""Utility helper functions."""

from app.utils.helpers import (
    get_summary,
    host,
    parse_positive_int,
    split_csv,
    today_str,
)

__all__ = [
    "get_summary",
    "host",
    "parse_positive_int",
    "split_csv",
    "today_str",
]
