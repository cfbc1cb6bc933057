from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional

INLINE_TAGS = (
    "span", "em", "strong", "abbr", "acronym", "dfn", "q", "cite", "sup", "sub",
    "code", "var", "kbd", "samp", "bdo", "font", "big", "small", "b", "i", "s",
    "strike", "u", "tt", "a", "label", "object", "applet", "iframe", "button",
    "textarea", "select", "basefont", "img", "br", "input", "script", "map",
)
INLINE_TAG_RE = re.compile(r"^<(?:%s)\b" % "|".join(INLINE_TAGS))
RAW_LINE_RE = re.compile(r"^[ \t<]")
PRE_START_RE = re.compile(r"^<pre\b")
PRE_END_RE = re.compile(r"^</pre\b")
NEWLINE_RE = re.compile(r"\r\n|\r|\n")
ENTRY_DATE_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})")
SOURCE_MARKER_RE = re.compile(r"\.[^.]+\.html$")
SOURCE_SUFFIX = ".html"


class EntryDate(NamedTuple):
    year: str
    month: str
    day: str

    def stamp(self) -> str:
        return f"{self.year}/{self.month}/{self.day}"

    def short(self) -> str:
        return f"{self.month.removeprefix('0')}/{self.day.removeprefix('0')}"


def parse_entry_date(name: str) -> Optional[EntryDate]:
    match = ENTRY_DATE_RE.match(name)
    if not match:
        return None
    return EntryDate(*match.groups())


def is_source_file(path: Path) -> bool:
    return path.name.endswith(SOURCE_SUFFIX)


def output_name(name: str) -> str:
    """``post.tmpl.html`` is published as ``post.html``."""
    return SOURCE_MARKER_RE.sub(SOURCE_SUFFIX, name)


def output_rel_path(source: Path, templates_dir: Path) -> Path:
    rel = source.relative_to(templates_dir)
    if is_source_file(source):
        rel = rel.with_name(output_name(rel.name))
    return rel


def page_url(rel_output: Path) -> str:
    url = "/" + rel_output.as_posix()
    if url == "/index.html":
        return "/"
    return url


@dataclass
class Entry:
    source: Path
    path: str = ""
    output: Optional[Path] = None
    raw: str = ""
    content: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    image: Optional[str] = None

    def set_once(self, field: str, value: str) -> bool:
        if getattr(self, field) is not None:
            return False
        setattr(self, field, value)
        return True

    @property
    def date(self) -> Optional[EntryDate]:
        return parse_entry_date(self.source.name)


def normalize_newlines(text: str) -> str:
    return NEWLINE_RE.sub("\n", text)


def split_lines(text: str) -> list[str]:
    lines = normalize_newlines(text).split("\n")
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def wrap_paragraph(line: str) -> str:
    return f"<p>\n  {line}\n</p>\n"


def transform(text: str) -> str:
    """Turn an entry's plain lines into HTML.

    Lines are wrapped in ``<p>`` unless they already start with block markup
    or whitespace. Inside ``<pre>`` nothing is wrapped and angle brackets are
    escaped; an unclosed ``<pre>`` runs to the end of the text.
    """
    out: list[str] = []
    in_pre = False
    for line in split_lines(text):
        if PRE_END_RE.match(line):
            in_pre = False
        if in_pre:
            out.append(line.replace(">", "&gt;").replace("<", "&lt;") + "\n")
        elif INLINE_TAG_RE.match(line):
            out.append(wrap_paragraph(line))
        elif RAW_LINE_RE.match(line):
            out.append(line + "\n")
        elif line:
            out.append(wrap_paragraph(line))
        if PRE_START_RE.match(line):
            in_pre = True
    return "".join(out)
