from __future__ import annotations

from pathlib import Path

import pytest

from plainsite.content import Entry
from plainsite.errors import BuildIOError, CommonTemplateError
from plainsite.render import (
    CommonTemplates,
    build_meta,
    compose,
    compose_document,
    compose_entry,
    load_common_templates,
    render_template,
    slurp,
    write_text,
)


def test_render_template_fills_missing_slots_with_empty_string() -> None:
    assert render_template("[{{a}}|{{b}}]", a="x") == "[x|]"


def test_render_template_does_not_rescan_substituted_values() -> None:
    assert render_template("{{a}}{{b}}", a="{{b}}", b="x") == "{{b}}x"


def test_compose_with_empty_slots_is_balanced(assert_balanced) -> None:
    entry = Entry(source=Path("x.html"))
    document = compose(entry, CommonTemplates())
    assert document.startswith("<!DOCTYPE html>")
    assert "<title>" not in document
    assert_balanced(document)


def test_compose_places_slots_in_skeleton(assert_balanced) -> None:
    common = CommonTemplates(
        meta='<meta charset="UTF-8">',
        header="<h1>Header</h1>",
        footer="<small>Footer</small>",
        side="<ul><li>Side</li></ul>",
        top="<em>top</em>",
        bottom="<em>bottom</em>",
    )
    entry = Entry(source=Path("x.html"), content="<p>\n  Body\n</p>\n", title="T - S", description="D")
    document = compose(entry, common)
    order = [
        '<meta charset="UTF-8">',
        "<title>T - S</title>",
        '<meta name="description" content="D">',
        "<h1>Header</h1>",
        "<em>top</em>",
        "Body",
        "<em>bottom</em>",
        "<ul><li>Side</li></ul>",
        "<small>Footer</small>",
    ]
    positions = [document.index(fragment) for fragment in order]
    assert positions == sorted(positions)
    assert_balanced(document)


def test_build_meta_appends_only_set_fields() -> None:
    entry = Entry(source=Path("x.html"))
    assert build_meta("<base>", entry) == "<base>"

    entry.description = 'Say "hi"'
    entry.keywords = "a, b"
    entry.image = "/lead.png"
    meta = build_meta("", entry)
    assert '<meta name="description" content="Say &quot;hi&quot;">' in meta
    assert '<meta name="keywords" content="a, b">' in meta
    assert '<meta property="og:image" content="/lead.png">' in meta
    assert "<title>" not in meta


def test_compose_entry_and_document_are_independent() -> None:
    fragment = compose_entry("BODY")
    assert fragment.startswith('<div class="entry">')
    assert '<div class="top">\n    \n  </div>' in fragment
    document = compose_document(fragment)
    assert document.count('<div class="entry">') == 1


def test_load_common_templates(site) -> None:
    common = load_common_templates(site.common_dir)
    assert common.header == "<!-- common header -->"
    assert common.bottom == "<!-- common bottom -->"


def test_markdown_fragment_is_used_when_html_is_missing(site) -> None:
    (site.common_dir / "side.html").unlink()
    (site.common_dir / "side.md").write_text("# Links\n\n- one\n", encoding="utf-8")
    common = load_common_templates(site.common_dir)
    assert "<h1>Links</h1>" in common.side
    assert "<li>one</li>" in common.side


def test_missing_common_fragment_raises(site) -> None:
    (site.common_dir / "footer.html").unlink()
    with pytest.raises(CommonTemplateError) as excinfo:
        load_common_templates(site.common_dir)
    assert "footer.html" in str(excinfo.value)


def test_slurp_error_names_the_path(tmp_path: Path) -> None:
    missing = tmp_path / "nope.html"
    with pytest.raises(BuildIOError) as excinfo:
        slurp(missing)
    assert str(missing) in str(excinfo.value)
    assert excinfo.value.path == missing


def test_write_text_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "page.html"
    write_text(target, "héllo")
    assert target.read_text(encoding="utf-8") == "héllo"
