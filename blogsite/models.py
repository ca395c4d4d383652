from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Post:
    """One blog article, built once per run from its source file."""

    slug: str
    title: str
    date: dt.date
    body_markdown: str
    body_html: str
    source: Path
    excerpt: str = ""
    tags: tuple[str, ...] = ()
    featured: bool = False
    cover_image: str = ""
    words: int = 0
    reading_time: str = ""
    extra: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    @property
    def sort_key(self) -> tuple[int, str]:
        return (-self.date.toordinal(), self.slug)

    def has_tag(self, tag: str) -> bool:
        wanted = tag.casefold()
        return any(item.casefold() == wanted for item in self.tags)


@dataclass(frozen=True)
class SkippedFile:
    path: Path
    reason: str


@dataclass
class LoadReport:
    skipped: list[SkippedFile] = field(default_factory=list)

    def add(self, path: Path, reason: str) -> None:
        self.skipped.append(SkippedFile(path, reason))

    def __len__(self) -> int:
        return len(self.skipped)


@dataclass(frozen=True)
class TagGroup:
    """Posts sharing one tag, compared case-insensitively.

    ``slug`` names the tag's page and is unique across the site even when two
    tags slugify to the same text.
    """

    name: str
    slug: str
    posts: tuple[Post, ...]
