from __future__ import annotations

from html.parser import HTMLParser
from pathlib import Path
from typing import Callable

import pytest

from plainsite.config import SiteConfig, site_config_from_mapping
from plainsite.render import CommonTemplates, load_common_templates

COMMON_NAMES = ("meta", "header", "footer", "side", "top", "bottom")
VOID_TAGS = {"meta", "link", "br", "img", "input", "hr"}


@pytest.fixture
def site(tmp_path: Path) -> SiteConfig:
    common_dir = tmp_path / "templates" / "common"
    common_dir.mkdir(parents=True)
    for name in COMMON_NAMES:
        (common_dir / f"{name}.html").write_text(f"<!-- common {name} -->", encoding="utf-8")
    return site_config_from_mapping(
        {"site_title": "My Site", "build_workers": 1, "quiet": True},
        tmp_path,
    )


@pytest.fixture
def common(site: SiteConfig) -> CommonTemplates:
    return load_common_templates(site.common_dir)


@pytest.fixture
def write_source(site: SiteConfig) -> Callable[[str, str], Path]:
    def write(rel: str, text: str) -> Path:
        path = site.templates_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return write


class TagBalance(HTMLParser):
    def __init__(self) -> None:
        super().__init__()
        self.stack: list[str] = []
        self.errors: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag not in VOID_TAGS:
            self.stack.append(tag)

    def handle_endtag(self, tag):
        if not self.stack or self.stack.pop() != tag:
            self.errors.append(tag)


@pytest.fixture
def assert_balanced() -> Callable[[str], None]:
    def check(document: str) -> None:
        parser = TagBalance()
        parser.feed(document)
        parser.close()
        assert parser.errors == []
        assert parser.stack == []

    return check
