from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .config import INDEX_LIMIT, SiteConfig, load_config, site_config_from_mapping
from .entries import BuildResult, build_entries
from .errors import SiteError
from .pages import build_index, build_list, collect_blog_entries
from .render import load_common_templates
from .utils import clean_output_dir, list_files, parse_bool, parse_int


def build_site(config: SiteConfig) -> BuildResult:
    templates_dir = config.templates_dir
    if not templates_dir.is_dir():
        raise SiteError(f"Templates directory not found: {templates_dir}")

    if config.clean:
        clean_output_dir(config.public_dir, config.root)

    common = load_common_templates(config.common_dir)
    sources = list_files(templates_dir, exclude=config.common_dir)
    result = build_entries(sources, config, common)

    failed = {failure.path for failure in result.failures}
    blog_entries = collect_blog_entries(config, skip=failed)
    build_index(config, common, blog_entries)
    build_list(config, common, blog_entries)
    return result


def parse_args(argv: Optional[Sequence[str]] = None) -> tuple[argparse.Namespace, Path]:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config_path = Path(pre_args.config).resolve()
    config = load_config(config_path)

    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    def cfg_bool(key: str, default: bool) -> bool:
        value = config.get(key)
        return default if value is None else parse_bool(value)

    def cfg_int(key: str, default: int) -> int:
        return parse_int(config.get(key), default)

    parser = argparse.ArgumentParser(description="Build a static site from plain text entries.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--site-title", default=cfg_str("site_title", ""), help="Site title.")
    parser.add_argument(
        "--site-description",
        default=cfg_str("site_description", ""),
        help="Description used on the latest entries page.",
    )
    parser.add_argument(
        "--templates",
        default=cfg_str("templates", "templates"),
        help="Directory containing entry sources.",
    )
    parser.add_argument("--public", default=cfg_str("public", "public"), help="Output directory for the site.")
    parser.add_argument(
        "--common",
        default=cfg_str("common", "common"),
        help="Shared fragments directory, relative to the templates directory.",
    )
    parser.add_argument(
        "--blog",
        default=cfg_str("blog", "blog"),
        help="Dated entries directory, relative to the templates directory.",
    )
    parser.add_argument(
        "--index-limit",
        default=cfg_int("index_limit", INDEX_LIMIT),
        type=int,
        help="Number of entries on the latest entries page.",
    )
    parser.add_argument(
        "--list-link-label",
        default=cfg_str("list_link_label", "Before Days"),
        help="Label of the link from the latest entries page to the list page.",
    )
    parser.add_argument(
        "--build-workers",
        default=cfg_int("build_workers", 0),
        type=int,
        help="Number of worker threads for building entries (0 = auto).",
    )
    parser.add_argument(
        "--keep-going",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("keep_going", False),
        help="Keep building other entries after an entry fails.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", False),
        help="Remove the output directory before building.",
    )
    parser.add_argument(
        "--quiet",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("quiet", False),
        help="Do not report each built entry.",
    )
    return parser.parse_args(argv), config_path


def config_from_args(args: argparse.Namespace, config_path: Path) -> SiteConfig:
    return site_config_from_mapping(
        {
            "site_title": args.site_title,
            "site_description": args.site_description,
            "templates": args.templates,
            "public": args.public,
            "common": args.common,
            "blog": args.blog,
            "index_limit": args.index_limit,
            "list_link_label": args.list_link_label,
            "keep_going": args.keep_going,
            "clean": args.clean,
            "build_workers": args.build_workers,
            "quiet": args.quiet,
        },
        config_path.parent,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        args, config_path = parse_args(argv)
        config = config_from_args(args, config_path)
        start = time.perf_counter()
        result = build_site(config)
    except SiteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {config.public_dir}")
    if not result.ok:
        print(f"{len(result.failures)} file(s) failed to build.", file=sys.stderr)
        sys.exit(1)
