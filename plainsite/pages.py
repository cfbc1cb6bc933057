from __future__ import annotations

from pathlib import Path
from typing import Collection, Optional

from .config import SiteConfig
from .content import Entry, is_source_file, normalize_newlines, transform
from .entries import new_entry
from .extract import add_page_link, parse_title
from .render import CommonTemplates, build_meta, compose, compose_document, compose_entry, slurp, write_text
from .utils import is_hidden

INDEX_FILE = "index.html"
LIST_FILE = "list.html"
LIST_URL = f"/{LIST_FILE}"
NO_TITLE = "No title"


def collect_blog_entries(config: SiteConfig, skip: Collection[Path] = ()) -> list[Entry]:
    """Dated blog entries, newest first.

    The sort key is the whole file name, so entries sharing a date come out
    in reverse name order. Files without a ``YYYYMMDD`` prefix are skipped, and
    so is anything in ``skip`` (sources that already failed to build).
    """
    blog_dir = config.blog_dir
    if not blog_dir.is_dir():
        return []
    entries = []
    for path in blog_dir.iterdir():
        if not path.is_file() or is_hidden(path) or not is_source_file(path):
            continue
        if path in skip:
            continue
        entry = new_entry(path, config)
        if entry.date is None:
            continue
        entries.append(entry)
    entries.sort(key=lambda entry: entry.source.name, reverse=True)
    return entries


def load_content(entry: Entry) -> str:
    return transform(normalize_newlines(slurp(entry.source)))


def build_index_fragment(entry: Entry) -> str:
    content = add_page_link(load_content(entry), entry.path)
    content = f'<div style="text-align:right;color:#999">{entry.date.stamp()}</div>\n{content}\n'
    return compose_entry(content)


def render_index(entries: list[Entry], config: SiteConfig, common: CommonTemplates) -> str:
    fragments = [build_index_fragment(entry) for entry in entries[: config.index_limit]]
    content = "\n".join(fragments)
    content += (
        f'\n<div style="text-align:center"><a href="{LIST_URL}">{config.list_link_label}</a></div>'
    )

    page = Entry(source=config.public_dir / INDEX_FILE, path="/", content=content)
    page.title = config.site_title
    page.description = config.site_description
    return compose_document(
        content,
        meta=build_meta(common.meta, page),
        header=common.header,
        side=common.side,
        footer=common.footer,
    )


def list_label(entry: Entry, site_title: str = "") -> str:
    fresh = Entry(source=entry.source, content=load_content(entry))
    parse_title(fresh, site_title)
    return NO_TITLE if fresh.title is None else fresh.title


def render_list_content(entries: list[Entry], site_title: str = "") -> str:
    lines = ["<h2>Entries</h2>\n", "<ul>\n"]
    previous_year = None
    for entry in entries:
        date = entry.date
        if previous_year is None or date.year != previous_year:
            lines.append(
                '  <li style="list-style:none;">\n'
                f"    <b>{date.year}</b>\n"
                "  </li>\n"
            )
        previous_year = date.year
        lines.append(
            '  <li style="list-style:none">\n'
            f'    {date.short()} <a href="{entry.path}">{list_label(entry, site_title)}</a>\n'
            "  </li>\n"
        )
    lines.append("</ul>\n")
    return "".join(lines)


def render_list(entries: list[Entry], config: SiteConfig, common: CommonTemplates) -> str:
    page = Entry(
        source=config.public_dir / LIST_FILE,
        path=LIST_URL,
        content=render_list_content(entries, config.site_title),
        title=f"Entries - {config.site_title}",
        description=f"Entries of {config.site_title}",
    )
    return compose(page, common)


def build_index(config: SiteConfig, common: CommonTemplates, entries: Optional[list[Entry]] = None) -> Path:
    if entries is None:
        entries = collect_blog_entries(config)
    path = config.public_dir / INDEX_FILE
    write_text(path, render_index(entries, config, common))
    return path


def build_list(config: SiteConfig, common: CommonTemplates, entries: Optional[list[Entry]] = None) -> Path:
    if entries is None:
        entries = collect_blog_entries(config)
    path = config.public_dir / LIST_FILE
    write_text(path, render_list(entries, config, common))
    return path
