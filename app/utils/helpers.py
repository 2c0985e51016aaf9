from collections.abc import MutableMapping
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute, Match, Route


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return today's date as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def parse_positive_int(value: str | None, default: int) -> int:
    """
    Parse a query-string integer, falling back to a default.

    Args:
        value: Raw query value (may be missing or non-numeric)
        default: Value used when parsing fails or the result is not positive

    Returns:
        int: Parsed positive integer or the default

    Example:
        >>> parse_positive_int("3", 1)
        3
        >>> parse_positive_int("abc", 10)
        10
    """
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated value, keeping every member as sent."""
    if not value:
        return []
    return value.split(",")
