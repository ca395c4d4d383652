from __future__ import annotations

import html
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Optional

from .cache import RenderCache, hash_bytes
from .content import (
    count_words,
    normalize_list_spacing,
    parse_excerpt,
    parse_featured,
    parse_front_matter,
    parse_post_date,
    parse_tags,
    parse_title,
    reading_time,
    slugify,
    summarize,
)
from .errors import DuplicateSlugError, InputDirectoryError, PostError, PostNotFound
from .models import LoadReport, Post, TagGroup
from .render import render_markdown, strip_tags

logger = logging.getLogger(__name__)

KNOWN_FIELDS = {"title", "date", "excerpt", "tags", "featured", "slug", "cover_image", "coverimage"}


def list_post_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        raise InputDirectoryError(f"input directory not found: {directory}")
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise InputDirectoryError(f"cannot read input directory {directory}: {exc}") from exc
    return sorted(
        (path for path in entries if path.suffix == ".md" and path.is_file()),
        key=lambda p: p.name,
    )


def load_post(path: Path, cache: Optional[RenderCache] = None) -> Post:
    """Parse and render one source file, raising PostError when it is unusable."""
    try:
        raw = path.read_bytes()
        stat = path.stat()
    except OSError as exc:
        raise PostError(f"cannot read file: {exc}") from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PostError(f"not valid UTF-8: {exc}") from exc

    meta, body = parse_front_matter(text)
    title = parse_title(meta.get("title"))
    date = parse_post_date(meta.get("date"))
    tags = parse_tags(meta.get("tags"))
    featured = parse_featured(meta.get("featured"))
    excerpt = parse_excerpt(meta.get("excerpt"))
    cover_image = parse_excerpt(meta.get("cover_image", meta.get("coverimage")), "cover_image")
    explicit_slug = str(meta.get("slug") or "").strip()
    slug = slugify(explicit_slug or path.stem)

    body_html = None
    digest = hash_bytes(raw)
    if cache is not None:
        body_html = cache.get(path.name, stat.st_mtime, digest)
    if body_html is None:
        body_html = render_markdown(normalize_list_spacing(body))
        if cache is not None:
            cache.put(path.name, stat.st_mtime, digest, body_html)

    text_only = html.unescape(strip_tags(body_html))
    words = count_words(text_only)
    if not excerpt:
        excerpt = summarize(text_only)
    extra = {key: value for key, value in meta.items() if key not in KNOWN_FIELDS}

    return Post(
        slug=slug,
        title=title,
        date=date,
        body_markdown=body,
        body_html=body_html,
        source=path,
        excerpt=excerpt,
        tags=tags,
        featured=featured,
        cover_image=cover_image,
        words=words,
        reading_time=reading_time(words),
        extra=MappingProxyType(extra),
    )


class PostRepository:
    """Read-only view over every post loaded from a content directory."""

    def __init__(self, posts: list[Post], report: Optional[LoadReport] = None) -> None:
        self.report = report if report is not None else LoadReport()
        by_slug: dict[str, Post] = {}
        for post in posts:
            if post.slug in by_slug:
                raise DuplicateSlugError(post.slug, by_slug[post.slug].source, post.source)
            by_slug[post.slug] = post
        self._by_slug = by_slug
        self._posts = tuple(sorted(posts, key=lambda p: p.sort_key))

    @classmethod
    def load_all(
        cls, directory: Path, workers: int = 0, cache: Optional[RenderCache] = None
    ) -> PostRepository:
        directory = Path(directory)
        post_files = list_post_files(directory)
        if workers <= 0:
            workers = os.cpu_count() or 1
        workers = max(1, min(workers, 32, len(post_files) or 1))

        def parse(path: Path) -> tuple[Path, Optional[Post], str]:
            try:
                return path, load_post(path, cache), ""
            except PostError as exc:
                return path, None, str(exc)

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(parse, post_files))
        else:
            results = [parse(path) for path in post_files]

        report = LoadReport()
        posts = []
        for path, post, reason in results:
            if post is None:
                logger.warning("Skipping %s: %s", path.name, reason)
                report.add(path, reason)
            else:
                posts.append(post)

        if cache is not None:
            cache.prune({path.name for path in post_files})
        logger.info("Loaded %d posts from %s (%d skipped)", len(posts), directory, len(report))
        return cls(posts, report)

    def __len__(self) -> int:
        return len(self._posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def all(self) -> tuple[Post, ...]:
        return self._posts

    def by_slug(self, slug: str) -> Post:
        try:
            return self._by_slug[slug]
        except KeyError:
            raise PostNotFound(slug) from None

    def by_tag(self, tag: str) -> tuple[Post, ...]:
        return tuple(post for post in self._posts if post.has_tag(tag))

    def featured(self) -> tuple[Post, ...]:
        return tuple(post for post in self._posts if post.featured)

    def tags(self) -> list[TagGroup]:
        """Group posts by tag, ignoring case, ordered by the folded tag.

        The displayed name is the first spelling seen in default post order.
        Page slugs come from ``slugify``; a tag whose slug is already taken
        gets a numeric suffix, so ``C#`` and ``C++`` keep separate pages.
        """
        names: dict[str, str] = {}
        groups: dict[str, list[Post]] = {}
        for post in self._posts:
            for tag in post.tags:
                key = tag.casefold()
                names.setdefault(key, tag)
                group = groups.setdefault(key, [])
                if not group or group[-1] is not post:
                    group.append(post)

        used: set[str] = set()
        result = []
        for key in sorted(groups):
            base = slugify(names[key])
            slug = base
            counter = 2
            while slug in used:
                slug = f"{base}-{counter}"
                counter += 1
            used.add(slug)
            result.append(TagGroup(names[key], slug, tuple(groups[key])))
        return result


def load_all(directory: Path, workers: int = 0) -> list[Post]:
    return list(PostRepository.load_all(directory, workers=workers).all())
