from __future__ import annotations

from pathlib import Path


class SiteError(Exception):
    """Base class for every error raised while building the site."""


class PostError(SiteError):
    """A single post could not be loaded. The build skips it and goes on."""


class MalformedFrontMatter(PostError):
    pass


class InvalidFieldType(PostError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class InvalidDate(PostError):
    pass


class RenderError(PostError):
    pass


class InputDirectoryError(SiteError):
    pass


class OutputDirectoryError(SiteError):
    pass


class ConfigError(SiteError):
    pass


class DuplicateSlugError(SiteError):
    def __init__(self, slug: str, first: Path, second: Path) -> None:
        super().__init__(f"duplicate slug {slug!r} in {first.name} and {second.name}")
        self.slug = slug
        self.first = first
        self.second = second


class PostNotFound(SiteError, KeyError):
    def __init__(self, slug: str) -> None:
        super().__init__(slug)
        self.slug = slug

    def __str__(self) -> str:
        return f"no post with slug {self.slug!r}"
