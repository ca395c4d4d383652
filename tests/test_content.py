from __future__ import annotations

import datetime as dt

import pytest

from blogsite.content import (
    count_words,
    normalize_list_spacing,
    parse_featured,
    parse_front_matter,
    parse_post_date,
    parse_tags,
    parse_title,
    reading_time,
    slugify,
    summarize,
)
from blogsite.errors import InvalidDate, InvalidFieldType, MalformedFrontMatter


def test_parse_front_matter_splits_metadata_and_body():
    text = '---\ntitle: "Welcome"\ndate: 2026-01-21\ntags: [a, b]\nfeatured: true\n---\n# Heading\n\nBody'
    meta, body = parse_front_matter(text)
    assert meta == {
        "title": "Welcome",
        "date": dt.date(2026, 1, 21),
        "tags": ["a", "b"],
        "featured": True,
    }
    assert body == "# Heading\n\nBody"


def test_parse_front_matter_keeps_unknown_keys_and_lowercases():
    meta, _ = parse_front_matter("\ufeff---\nTitle: X\nseries: deep-dive\n---\n")
    assert meta == {"title": "X", "series": "deep-dive"}


def test_parse_front_matter_empty_block():
    meta, body = parse_front_matter("---\n---\nbody")
    assert meta == {}
    assert body == "body"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "title: no delimiters\n",
        "---\ntitle: never closed\n",
        "--- \ntitle: x\n----\nbody",
        "---\n- a list\n- not a mapping\n---\n",
        "---\ntitle: [unclosed\n---\n",
    ],
)
def test_parse_front_matter_rejects_malformed_blocks(text):
    with pytest.raises(MalformedFrontMatter):
        parse_front_matter(text)


def test_parse_front_matter_impossible_yaml_date():
    with pytest.raises(InvalidDate):
        parse_front_matter("---\ndate: 2026-13-45\n---\n")


@pytest.mark.parametrize(
    "value, expected",
    [(None, False), (True, True), (False, False), ("yes", True), ("Off", False), (1, True), (0, False)],
)
def test_parse_featured(value, expected):
    assert parse_featured(value) is expected


@pytest.mark.parametrize("value", ["maybe", 2, [True], {"a": 1}])
def test_parse_featured_rejects_non_booleans(value):
    with pytest.raises(InvalidFieldType) as excinfo:
        parse_featured(value)
    assert excinfo.value.field == "featured"


def test_parse_tags_variants():
    assert parse_tags(None) == ()
    assert parse_tags(["laravel", " php ", "", None, "Laravel"]) == ("laravel", "php")
    assert parse_tags("aws, kubernetes") == ("aws", "kubernetes")
    assert parse_tags("[aws, 'k8s']") == ("aws", "k8s")
    assert parse_tags([2026]) == ("2026",)


@pytest.mark.parametrize("value", [{"a": 1}, 5, [["nested"]]])
def test_parse_tags_rejects_bad_types(value):
    with pytest.raises(InvalidFieldType):
        parse_tags(value)


def test_parse_post_date():
    assert parse_post_date("2026-01-21") == dt.date(2026, 1, 21)
    assert parse_post_date(dt.date(2026, 1, 21)) == dt.date(2026, 1, 21)
    assert parse_post_date(dt.datetime(2026, 1, 21, 8, 30)) == dt.date(2026, 1, 21)
    assert parse_post_date("2026-01-21T08:30:00") == dt.date(2026, 1, 21)


@pytest.mark.parametrize("value", [None, "", "yesterday", "2026-02-30", 20260121])
def test_parse_post_date_rejects(value):
    with pytest.raises(InvalidDate):
        parse_post_date(value)


def test_parse_title():
    assert parse_title("  Hello ") == "Hello"
    assert parse_title(2026) == "2026"
    for bad in (None, "", "   ", ["x"], True):
        with pytest.raises(InvalidFieldType):
            parse_title(bad)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("welcome-to-my-blog", "welcome-to-my-blog"),
        ("Welcome To My Blog", "welcome-to-my-blog"),
        ("snake_case_name", "snake-case-name"),
        ("  --C++ & Rust--  ", "c-rust"),
        ("!!!", "post"),
    ],
)
def test_slugify(text, expected):
    assert slugify(text) == expected


def test_normalize_list_spacing_leaves_fences_alone():
    text = "Intro line\n- item\n```\ntext\n- not a list\n```\n>> quoted"
    assert normalize_list_spacing(text) == "Intro line\n\n- item\n```\ntext\n- not a list\n```\n> quoted"


def test_word_count_and_reading_time():
    assert count_words("It's a test, with 6 words") == 6
    assert count_words("日本語") == 3
    assert reading_time(0) == "1 min read"
    assert reading_time(401) == "3 min read"


def test_summarize():
    assert summarize("  short\n text ") == "short text"
    assert summarize("word " * 100, limit=10) == "word word..."
