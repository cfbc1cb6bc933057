from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .config import SiteConfig
from .content import Entry, is_source_file, normalize_newlines, output_rel_path, page_url, transform
from .errors import BuildIOError
from .extract import EXTRACTORS, add_page_link, parse_title
from .render import CommonTemplates, compose, copy_file, slurp, write_text


@dataclass
class BuildResult:
    entries: list[Entry] = field(default_factory=list)
    assets: list[Path] = field(default_factory=list)
    failures: list[BuildIOError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def new_entry(source: Path, config: SiteConfig) -> Entry:
    rel = output_rel_path(source, config.templates_dir)
    return Entry(source=source, path=page_url(rel), output=config.public_dir / rel)


def build_entry(source: Path, config: SiteConfig, common: CommonTemplates) -> Entry:
    """Run one source file through every stage and write its page.

    The stages share one Entry and must run in this order: the page link is
    added after the title is read, and the meta block needs the extracted
    title and description.
    """
    entry = new_entry(source, config)
    entry.raw = normalize_newlines(slurp(source))
    entry.content = transform(entry.raw)

    parse_title(entry, config.site_title)
    entry.content = add_page_link(entry.content, entry.path)

    for extractor in EXTRACTORS:
        extractor(entry)

    write_text(entry.output, compose(entry, common))
    return entry


def copy_asset(source: Path, config: SiteConfig) -> Path:
    dest = config.public_dir / output_rel_path(source, config.templates_dir)
    copy_file(source, dest)
    return dest


def build_file(
    source: Path, config: SiteConfig, common: CommonTemplates
) -> Union[Entry, Path, BuildIOError]:
    try:
        if is_source_file(source):
            return build_entry(source, config, common)
        return copy_asset(source, config)
    except BuildIOError as exc:
        if not config.keep_going:
            raise
        return exc


def build_entries(
    sources: list[Path],
    config: SiteConfig,
    common: CommonTemplates,
    workers: Optional[int] = None,
) -> BuildResult:
    workers = config.build_workers if workers is None else workers
    workers = min(workers, len(sources)) if sources else 1

    def run(source: Path) -> Union[Entry, Path, BuildIOError]:
        return build_file(source, config, common)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(run, sources))
    else:
        outcomes = [run(source) for source in sources]

    result = BuildResult()
    for source, outcome in zip(sources, outcomes):
        if isinstance(outcome, BuildIOError):
            print(f"Failed {source}: {outcome}", file=sys.stderr)
            result.failures.append(outcome)
        elif isinstance(outcome, Entry):
            if not config.quiet:
                print(f"Built {source} -> {outcome.output}")
            result.entries.append(outcome)
        else:
            result.assets.append(outcome)
    return result
