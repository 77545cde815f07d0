"""Tests for reply utility functions: format_duration, truncate and URL helpers."""

from __future__ import annotations

import pytest

from chill_player.utils.reply import (
    format_duration,
    playlist_url,
    thumbnail_url,
    truncate,
    watch_url,
)


class TestFormatDuration:
    def test_minutes_seconds(self):
        assert format_duration(90) == "1:30"

    def test_hours(self):
        assert format_duration(3725) == "1:02:05"

    def test_zero(self):
        assert format_duration(0) == "0:00"

    def test_float_truncated(self):
        assert format_duration(61.9) == "1:01"

    @pytest.mark.parametrize("value", [None, -1])
    def test_unknown(self, value):
        assert format_duration(value) is None


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_exact_length_unchanged(self):
        assert truncate("hello", 5) == "hello"

    def test_long_text_gets_ellipsis(self):
        result = truncate("hello world", 6)
        assert result == "hello…"
        assert len(result) == 6


class TestUrls:
    def test_watch_url_from_id(self):
        assert watch_url("dQw4w9WgXcQ") == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    def test_watch_url_passthrough(self):
        url = "https://youtu.be/dQw4w9WgXcQ"
        assert watch_url(url) == url

    def test_playlist_url_from_id(self):
        assert playlist_url("PLabc") == "https://www.youtube.com/playlist?list=PLabc"

    def test_thumbnail_only_for_video_ids(self):
        assert thumbnail_url("dQw4w9WgXcQ") == "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
        assert thumbnail_url("not-an-id") is None
