"""Shared validators for user-supplied identifiers.

These run before any asynchronous work so that empty or malformed input is
rejected with :class:`InputInvalidError` instead of reaching the catalog.
"""

from __future__ import annotations

import re
from typing import Final
from urllib.parse import parse_qs, urlparse

from chill_player.domain.shared.exceptions import InputInvalidError
from chill_player.domain.shared.messages import ErrorMessages

VIDEO_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z0-9_-]{11}$")
PLAYLIST_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z0-9_-]+$")
URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https?://", re.IGNORECASE)


def validate_non_empty_string(value: str | None, field_name: str = "value") -> str:
    """Validate that a string is not empty or whitespace-only.

    Args:
        value: The string to validate.
        field_name: Name of the field for error messages.

    Returns:
        The stripped string.

    Raises:
        InputInvalidError: If the string is empty or whitespace-only.
    """
    if value is None or not value.strip():
        raise InputInvalidError(
            ErrorMessages.FIELD_CANNOT_BE_EMPTY.format(field_name=field_name), field=field_name
        )
    return value.strip()


def validate_search_query(query: str | None) -> str:
    if query is None or not query.strip():
        raise InputInvalidError(ErrorMessages.EMPTY_SEARCH_QUERY, field="query")
    return query.strip()


def is_url(value: str) -> bool:
    return bool(URL_PATTERN.match(value))


def validate_item_id(value: str | None) -> str:
    """Validate a video id or URL.

    Bare ids must look like an 11-character video id; URLs are accepted as
    given and left for the catalog to interpret.
    """
    if value is None or not value.strip():
        raise InputInvalidError(ErrorMessages.EMPTY_ITEM_ID, field="item_id")

    value = value.strip()
    if is_url(value) or VIDEO_ID_PATTERN.match(value):
        return value
    raise InputInvalidError(ErrorMessages.INVALID_ITEM_ID.format(value=value), field="item_id")


def validate_playlist_id(value: str | None) -> str:
    """Validate a playlist id or URL, returning the bare playlist id.

    URLs must carry a ``list=`` query parameter.
    """
    if value is None or not value.strip():
        raise InputInvalidError(ErrorMessages.EMPTY_PLAYLIST_ID, field="playlist_id")

    value = value.strip()
    if is_url(value):
        list_ids = parse_qs(urlparse(value).query).get("list", [])
        if list_ids and PLAYLIST_ID_PATTERN.match(list_ids[0]):
            return list_ids[0]
    elif PLAYLIST_ID_PATTERN.match(value):
        return value

    raise InputInvalidError(
        ErrorMessages.INVALID_PLAYLIST_ID.format(value=value), field="playlist_id"
    )


def validate_discord_snowflake(value: int) -> int:
    """Validate that *value* fits a Discord snowflake (1 … 2^64-1)."""
    if not isinstance(value, int) or isinstance(value, bool) or not 0 < value < 2**64:
        raise ValueError(f"Invalid Discord snowflake: {value!r}")
    return value
