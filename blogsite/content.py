from __future__ import annotations

import datetime as dt
import html as html_lib
import math
import re

import yaml

from .errors import InvalidDate, InvalidFieldType, MalformedFrontMatter

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
DOUBLE_QUOTE_RE = re.compile(r"^(?P<indent>[ \t]*)>>(?!>)(?P<rest>.*)$")
CJK_RE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af]")
WORD_RE = re.compile(r"[A-Za-z0-9]+(?:'[A-Za-z0-9]+)?")

DELIMITER = "---"
WORDS_PER_MINUTE = 200
TRUE_VALUES = {"true", "yes", "on", "1"}
FALSE_VALUES = {"false", "no", "off", "0"}


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    text = text.strip("-_").replace("_", "-")
    return text or "post"


def parse_list(value: str) -> list[str]:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1]
        items = [item.strip().strip("'\"") for item in inner.split(",")]
    else:
        items = [item.strip() for item in value.split(",")]
    return [item for item in items if item]


def parse_front_matter(text: str) -> tuple[dict, str]:
    """Split ``text`` into its YAML metadata and the Markdown body.

    The file must open with a ``---`` line and the block must be closed by
    another ``---`` line. Keys are lower-cased; keys this package does not
    know about are kept so callers can pass them along.
    """
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != DELIMITER:
        raise MalformedFrontMatter("missing opening '---' delimiter")

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            end = i
            break
    if end is None:
        raise MalformedFrontMatter("missing closing '---' delimiter")

    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise MalformedFrontMatter(f"invalid YAML: {exc}") from exc
    except ValueError as exc:
        # PyYAML builds date objects eagerly, so 2026-13-45 fails here
        raise InvalidDate(str(exc)) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontMatter("front matter must be a mapping")

    meta = {str(key).strip().lower(): value for key, value in data.items()}
    body = "\n".join(lines[end + 1 :])
    return meta, body


def parse_title(value: object) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidFieldType("title", "expected a non-empty string")
    title = str(value).strip()
    if not title:
        raise InvalidFieldType("title", "expected a non-empty string")
    return title


def parse_excerpt(value: object, field: str = "excerpt") -> str:
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidFieldType(field, f"expected a string, got {type(value).__name__}")
    return str(value).strip()


def parse_featured(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
    raise InvalidFieldType("featured", f"expected a boolean, got {value!r}")


def parse_tags(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items = parse_list(value)
    elif isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if isinstance(item, (dict, list)):
                raise InvalidFieldType("tags", "tags must be plain strings")
            if item is None:
                continue
            items.append(str(item).strip())
    else:
        raise InvalidFieldType("tags", f"expected a list of strings, got {type(value).__name__}")

    tags: list[str] = []
    seen = set()
    for item in items:
        key = item.casefold()
        if not item or key in seen:
            continue
        seen.add(key)
        tags.append(item)
    return tuple(tags)


def parse_post_date(value: object) -> dt.date:
    if value is None or value == "":
        raise InvalidDate("missing date")
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        date_value = value.strip()
        try:
            if "T" in date_value or " " in date_value:
                return dt.datetime.fromisoformat(date_value).date()
            return dt.date.fromisoformat(date_value)
        except ValueError:
            pass
    raise InvalidDate(f"unparseable date {value!r}")


def normalize_list_spacing(text: str) -> str:
    lines = text.splitlines()
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        quote_match = DOUBLE_QUOTE_RE.match(line)
        if quote_match:
            rest = quote_match.group("rest").lstrip()
            if rest:
                line = f'{quote_match.group("indent")}> {rest}'
            else:
                line = f'{quote_match.group("indent")}>'
        list_match = LIST_MARKER_RE.match(line)
        if list_match:
            if not list_match.group("indent"):
                if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                    out.append("")
        out.append(line)
    return "\n".join(out)


def count_words(text: str) -> int:
    text = html_lib.unescape(text)
    cjk_count = len(CJK_RE.findall(text))
    text = CJK_RE.sub(" ", text)
    word_count = len(WORD_RE.findall(text))
    return cjk_count + word_count


def reading_time(words: int) -> str:
    minutes = max(1, math.ceil(words / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def summarize(text: str, limit: int = 200) -> str:
    summary = " ".join(text.split())
    if len(summary) > limit:
        return summary[:limit].rstrip() + "..."
    return summary
