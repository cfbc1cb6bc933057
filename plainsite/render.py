from __future__ import annotations

import re
import shutil
from dataclasses import dataclass, fields
from pathlib import Path

import markdown

from .content import Entry
from .errors import BuildIOError, CommonTemplateError

SLOT_RE = re.compile(r"\{\{(\w+)\}\}")

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    {{meta}}
  </head>
  <body>
    <div class="container">
      <div class="header">
        {{header}}
      </div>
      <div class="main">
        {{content}}
        <div class="side">
          {{side}}
        </div>
      </div>
      <div class="footer">
        {{footer}}
      </div>
    </div>
  </body>
</html>
"""

ENTRY_TEMPLATE = """<div class="entry">
  <div class="top">
    {{top}}
  </div>
  <div class="content">
    {{content}}
  </div>
  <div class="bottom">
    {{bottom}}
  </div>
</div>
"""


def slurp(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildIOError("read file", path, exc) from exc


def write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise BuildIOError("write file", path, exc) from exc


def copy_file(source: Path, dest: Path) -> None:
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
    except OSError as exc:
        raise BuildIOError("copy file", source, exc) from exc


def render_template(template: str, **context: str) -> str:
    """Fill ``{{name}}`` slots in one pass; unknown slots become empty.

    Substituted values are never scanned again, so entry text containing
    ``{{...}}`` comes through untouched.
    """

    def repl(match: re.Match) -> str:
        value = context.get(match.group(1))
        return "" if value is None else value

    return SLOT_RE.sub(repl, template)


@dataclass(frozen=True)
class CommonTemplates:
    meta: str = ""
    header: str = ""
    footer: str = ""
    side: str = ""
    top: str = ""
    bottom: str = ""


def read_fragment(common_dir: Path, name: str) -> str:
    html_path = common_dir / f"{name}.html"
    md_path = common_dir / f"{name}.md"
    try:
        if html_path.exists():
            return slurp(html_path)
        if md_path.exists():
            md = markdown.Markdown(extensions=["fenced_code", "tables"])
            return md.convert(slurp(md_path))
    except BuildIOError as exc:
        raise CommonTemplateError("read common template", exc.path, exc.reason) from exc
    raise CommonTemplateError("find common template", html_path, "No such file")


def load_common_templates(common_dir: Path) -> CommonTemplates:
    values = {field.name: read_fragment(common_dir, field.name) for field in fields(CommonTemplates)}
    return CommonTemplates(**values)


def attr(value: str) -> str:
    return value.replace('"', "&quot;")


def build_meta(common_meta: str, entry: Entry) -> str:
    meta = common_meta
    if entry.title is not None:
        meta += f"\n<title>{entry.title}</title>\n"
    if entry.description is not None:
        meta += f'\n<meta name="description" content="{attr(entry.description)}">\n'
    if entry.keywords is not None:
        meta += f'\n<meta name="keywords" content="{attr(entry.keywords)}">\n'
    if entry.image is not None:
        meta += f'\n<meta property="og:image" content="{attr(entry.image)}">\n'
    return meta


def compose_entry(content: str, top: str = "", bottom: str = "") -> str:
    return render_template(ENTRY_TEMPLATE, top=top, content=content, bottom=bottom)


def compose_document(
    content: str, meta: str = "", header: str = "", side: str = "", footer: str = ""
) -> str:
    return render_template(
        DOCUMENT_TEMPLATE, meta=meta, header=header, content=content, side=side, footer=footer
    )


def compose(entry: Entry, common: CommonTemplates) -> str:
    body = compose_entry(entry.content, common.top, common.bottom)
    return compose_document(
        body,
        meta=build_meta(common.meta, entry),
        header=common.header,
        side=common.side,
        footer=common.footer,
    )
