from __future__ import annotations

import datetime as dt

from blogsite.utils import join_url, parse_int, rfc822_date


def test_rfc822_date_uses_english_names():
    assert rfc822_date(dt.date(2026, 1, 21)) == "Wed, 21 Jan 2026 00:00:00 +0000"
    assert rfc822_date(dt.date(2025, 12, 30)) == "Tue, 30 Dec 2025 00:00:00 +0000"


def test_join_url():
    assert join_url("https://blog.example/", "/posts/a.html") == "https://blog.example/posts/a.html"
    assert join_url("https://blog.example", "") == "https://blog.example"


def test_parse_int():
    assert parse_int(None, 4) == 4
    assert parse_int(" 8 ", 4) == 8
    assert parse_int("many", 4) == 4
