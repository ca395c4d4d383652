from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError
from .utils import parse_int

DEFAULT_SITE_NAME = "Markdown Blog"
DEFAULT_SITE_DESCRIPTION = "Notes and tutorials."
FEED_LIMIT = 20


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config must be a mapping: {path}")
    return data


@dataclass(frozen=True)
class SiteSettings:
    site_name: str = DEFAULT_SITE_NAME
    site_description: str = DEFAULT_SITE_DESCRIPTION
    site_url: str = ""
    static_dir: Optional[Path] = None
    templates_dir: Optional[Path] = None
    workers: int = 0
    feed_limit: int = FEED_LIMIT

    @classmethod
    def from_args(cls, args: object) -> SiteSettings:
        static_value = (getattr(args, "static", "") or "").strip()
        templates_value = (getattr(args, "templates", "") or "").strip()
        return cls(
            site_name=getattr(args, "site_name", DEFAULT_SITE_NAME),
            site_description=getattr(args, "site_description", DEFAULT_SITE_DESCRIPTION),
            site_url=(getattr(args, "site_url", "") or "").strip(),
            static_dir=Path(static_value) if static_value else None,
            templates_dir=Path(templates_value) if templates_value else None,
            workers=parse_int(getattr(args, "build_workers", 0), 0),
            feed_limit=parse_int(getattr(args, "feed_limit", FEED_LIMIT), FEED_LIMIT),
        )
