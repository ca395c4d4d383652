from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .cache import RenderCache
from .config import DEFAULT_SITE_DESCRIPTION, DEFAULT_SITE_NAME, FEED_LIMIT, SiteSettings, load_config
from .errors import ConfigError, SiteError
from .generator import generate_all
from .log import setup_logging
from .repository import PostRepository
from .utils import parse_int

logger = logging.getLogger(__name__)


def build_site(args: argparse.Namespace) -> int:
    setup_logging(args.log_level)
    settings = SiteSettings.from_args(args)
    cache_file = (args.cache_file or "").strip()
    cache = RenderCache(Path(cache_file)) if cache_file else None

    start = time.perf_counter()
    try:
        repository = PostRepository.load_all(Path(args.input), workers=settings.workers, cache=cache)
        result = generate_all(repository, Path(args.output), settings)
    except SiteError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        return 1

    if cache is not None:
        try:
            cache.save()
        except OSError as exc:
            logger.warning("Could not write cache file %s: %s", cache.path, exc)

    elapsed = time.perf_counter() - start
    print(
        f"Built {result.posts} posts ({len(result.skipped)} skipped) "
        f"into {result.output_dir} in {elapsed:.2f}s."
    )
    for skipped in result.skipped:
        print(f"  skipped {skipped.path.name}: {skipped.reason}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)
    try:
        config = load_config(Path(pre_args.config))
    except ConfigError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        return 1

    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    def cfg_int(key: str, default: int) -> int:
        return parse_int(config.get(key), default)

    parser = argparse.ArgumentParser(prog="blogsite", description="Markdown blog static site generator.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build the site from a directory of Markdown posts.")
    build.add_argument(
        "--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON)."
    )
    build.add_argument("--input", default=cfg_str("input", "posts"), help="Directory containing Markdown posts.")
    build.add_argument("--output", default=cfg_str("output", "dist"), help="Output directory for the site.")
    build.add_argument("--static", default=cfg_str("static", ""), help="Directory of static assets to copy.")
    build.add_argument(
        "--templates",
        default=cfg_str("templates", ""),
        help="Directory holding a base.html that replaces the bundled template.",
    )
    build.add_argument("--site-name", default=cfg_str("site_name", DEFAULT_SITE_NAME), help="Site title.")
    build.add_argument(
        "--site-description",
        default=cfg_str("site_description", DEFAULT_SITE_DESCRIPTION),
        help="Site description.",
    )
    build.add_argument(
        "--site-url",
        default=cfg_str("site_url", ""),
        help="Public site URL; enables rss.xml and sitemap.xml.",
    )
    build.add_argument(
        "--feed-limit",
        default=cfg_int("feed_limit", FEED_LIMIT),
        type=int,
        help="Maximum number of posts in the RSS feed.",
    )
    build.add_argument(
        "--build-workers",
        default=cfg_int("build_workers", 0),
        type=int,
        help="Number of worker threads for parsing/rendering (0 = auto).",
    )
    build.add_argument(
        "--cache-file",
        default=cfg_str("cache_file", ""),
        help="Path to a JSON render cache reused between builds.",
    )
    build.add_argument(
        "--log-level",
        default=cfg_str("log_level", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity.",
    )
    build.set_defaults(func=build_site)

    args = parser.parse_args(argv)
    return args.func(args)
