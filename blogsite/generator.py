from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import SiteSettings
from .errors import ConfigError, OutputDirectoryError
from .models import SkippedFile
from .pages import (
    build_featured,
    build_index,
    build_posts,
    build_rss,
    build_sitemap,
    build_tag_pages,
    build_tags_overview,
    footer_year,
)
from .render import copy_static, read_template
from .repository import PostRepository

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass
class BuildResult:
    output_dir: Path
    posts: int
    pages: list[Path] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)


def load_base_template(templates_dir: Optional[Path]) -> str:
    path = (templates_dir or DEFAULT_TEMPLATES_DIR) / "base.html"
    try:
        return read_template(path)
    except OSError as exc:
        raise ConfigError(f"cannot read template {path}: {exc}") from exc


def check_output_location(repository: PostRepository, output_dir: Path) -> None:
    target = output_dir.resolve()
    if Path.cwd().resolve().is_relative_to(target):
        raise OutputDirectoryError(f"refusing to replace {output_dir}: it contains the working directory")
    for post in repository:
        if post.source.resolve().is_relative_to(target):
            raise OutputDirectoryError(f"refusing to replace {output_dir}: it contains the input posts")
    if target.exists() and not target.is_dir():
        raise OutputDirectoryError(f"output path is not a directory: {output_dir}")


def write_site(
    repository: PostRepository, staging: Path, settings: SiteSettings, base_template: str
) -> list[Path]:
    posts = repository.all()
    featured = repository.featured()
    tag_groups = repository.tags()
    year = footer_year(posts)

    written = []
    written += build_posts(base_template, staging, posts, tag_groups, settings, year)
    written += build_index(base_template, staging, posts, tag_groups, settings)
    written += build_featured(base_template, staging, featured, tag_groups, settings, year)
    written += build_tag_pages(base_template, staging, tag_groups, settings, year)
    written += build_tags_overview(base_template, staging, tag_groups, settings, year)
    written += build_rss(staging, posts, settings)
    written += build_sitemap(staging, posts, tag_groups, settings)

    static_dir = settings.static_dir
    if static_dir is not None:
        if static_dir.is_dir():
            copy_static(static_dir, staging)
        else:
            logger.warning("Static directory not found: %s", static_dir)
    return [path.relative_to(staging) for path in written]


def swap_into_place(staging: Path, output_dir: Path) -> None:
    if not output_dir.exists():
        staging.rename(output_dir)
        return
    backup = output_dir.with_name(f".{output_dir.name}-old-{staging.name}")
    output_dir.rename(backup)
    try:
        staging.rename(output_dir)
    except OSError:
        backup.rename(output_dir)
        raise
    shutil.rmtree(backup, ignore_errors=True)


def generate_all(
    repository: PostRepository, output_dir: Path, settings: Optional[SiteSettings] = None
) -> BuildResult:
    """Write the whole site for ``repository`` into ``output_dir``.

    Pages are rendered into a sibling temporary directory which replaces
    ``output_dir`` only once everything has been written, so a failed build
    leaves the previous output untouched.
    """
    settings = settings or SiteSettings()
    output_dir = Path(output_dir)
    base_template = load_base_template(settings.templates_dir)
    check_output_location(repository, output_dir)

    parent = output_dir.resolve().parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{output_dir.name}-", dir=parent))
        staging.chmod(0o755)
    except OSError as exc:
        raise OutputDirectoryError(f"cannot create output directory in {parent}: {exc}") from exc

    try:
        pages = write_site(repository, staging, settings, base_template)
        swap_into_place(staging, output_dir)
    except OSError as exc:
        raise OutputDirectoryError(f"cannot write output directory {output_dir}: {exc}") from exc
    finally:
        if staging.exists():
            shutil.rmtree(staging, ignore_errors=True)

    logger.info("Wrote %d pages to %s", len(pages), output_dir)
    return BuildResult(
        output_dir=output_dir,
        posts=len(repository),
        pages=pages,
        skipped=list(repository.report.skipped),
    )
