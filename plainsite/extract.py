"""First-match metadata scanning over transformed entry HTML.

These are pattern scans, not a parse: only the first candidate counts and a
field that already holds a value is never replaced.
"""
from __future__ import annotations

import re
from typing import Callable, Optional

from .content import Entry

TITLE_RE = re.compile(r'class="title"[^>]*?>([^<]*?)<')
DESCRIPTION_RE = re.compile(r'class="description"[^>]*?>([^<]*?)<')
KEYWORDS_RE = re.compile(r'class="keywords"[^>]*?>([^<]*?)<')
FIRST_P_RE = re.compile(r"<\s?p\b[^>]*?>(.*?)<\s?/\s?p\s?>", re.DOTALL)
FIRST_IMG_SRC_RE = re.compile(r'<\s*img\b.*?\bsrc\s*=\s*"([^"]*?)"', re.DOTALL)
TAG_RE = re.compile(r"<.*?>")


def strip_tags(html_text: str) -> str:
    return TAG_RE.sub("", html_text)


def find_page_title(html_text: str) -> Optional[str]:
    match = TITLE_RE.search(html_text)
    return match.group(1) if match else None


def join_titles(page_title: str, site_title: str) -> str:
    if page_title and site_title:
        return f"{page_title} - {site_title}"
    return page_title or site_title or ""


def parse_title(entry: Entry, site_title: str = "") -> None:
    page_title = find_page_title(entry.content)
    if page_title is not None:
        entry.set_once("title", join_titles(page_title, site_title))


def parse_description(entry: Entry) -> None:
    match = DESCRIPTION_RE.search(entry.content)
    if match:
        entry.set_once("description", match.group(1))


def parse_description_from_first_p(entry: Entry) -> None:
    if entry.description is not None:
        return
    match = FIRST_P_RE.search(entry.content)
    if match:
        entry.set_once("description", strip_tags(match.group(1)).strip())


def parse_keywords(entry: Entry) -> None:
    match = KEYWORDS_RE.search(entry.content)
    if match:
        entry.set_once("keywords", match.group(1))


def parse_first_img_src(entry: Entry) -> None:
    match = FIRST_IMG_SRC_RE.search(entry.content)
    if match:
        entry.set_once("image", match.group(1))


EXTRACTORS: tuple[Callable[[Entry], None], ...] = (
    parse_description,
    parse_description_from_first_p,
    parse_keywords,
    parse_first_img_src,
)


def extract_metadata(entry: Entry, site_title: str = "") -> Entry:
    parse_title(entry, site_title)
    for extractor in EXTRACTORS:
        extractor(entry)
    return entry


def add_page_link(html_text: str, path: str) -> str:
    """Link the first title-marked element to ``path``."""

    def repl(match: re.Match) -> str:
        return f'class="title"><a href="{path}">{match.group(1)}</a><'

    return TITLE_RE.sub(repl, html_text, count=1)
