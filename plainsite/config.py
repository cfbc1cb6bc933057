from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import ConfigError
from .utils import parse_bool, parse_int

INDEX_LIMIT = 7


def load_config(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Can't read config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return data


@dataclass(frozen=True)
class SiteConfig:
    """Site-wide settings, read once and shared by every build stage."""

    site_title: str = ""
    site_description: str = ""
    root: Path = Path(".")
    templates_dir: Path = Path("templates")
    public_dir: Path = Path("public")
    common_dir: Path = Path("templates/common")
    blog_dir: Path = Path("templates/blog")
    index_limit: int = INDEX_LIMIT
    list_link_label: str = "Before Days"
    build_workers: int = 1
    keep_going: bool = False
    clean: bool = False
    quiet: bool = False


def resolve_workers(value: object) -> int:
    workers = parse_int(value, 0)
    if workers <= 0:
        workers = os.cpu_count() or 1
    return max(1, min(workers, 32))


def site_config_from_mapping(data: dict, root: Path) -> SiteConfig:
    def resolve(value: object, default: str, base: Path) -> Path:
        path = Path(str(value) if value else default)
        if not path.is_absolute():
            path = base / path
        return path

    templates_dir = resolve(data.get("templates"), "templates", root)
    return SiteConfig(
        site_title=str(data.get("site_title") or ""),
        site_description=str(data.get("site_description") or ""),
        root=root,
        templates_dir=templates_dir,
        public_dir=resolve(data.get("public"), "public", root),
        common_dir=resolve(data.get("common"), "common", templates_dir),
        blog_dir=resolve(data.get("blog"), "blog", templates_dir),
        index_limit=max(0, parse_int(data.get("index_limit"), INDEX_LIMIT)),
        list_link_label=str(data.get("list_link_label") or "Before Days"),
        build_workers=resolve_workers(data.get("build_workers")),
        keep_going=parse_bool(data.get("keep_going")),
        clean=parse_bool(data.get("clean")),
        quiet=parse_bool(data.get("quiet")),
    )
