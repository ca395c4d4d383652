from __future__ import annotations

import datetime as dt
from email.utils import format_datetime


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base
    return f"{base}/{path}"


def rfc822_date(value: dt.date) -> str:
    value = dt.datetime.combine(value, dt.time(), tzinfo=dt.timezone.utc)
    return format_datetime(value)