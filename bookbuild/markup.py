"""Page sources -> parsed page trees (Markdown conversion + template)."""

from __future__ import annotations

import re

import markdown
from bs4 import BeautifulSoup

from .config import SiteConfig
from .errors import ConfigurationError, ParseError
from .external import run_command
from .page import PARSER, Page, parse_fragment


MARKDOWN_EXTENSIONS = ["extra", "sane_lists", "smarty"]

HTML_ELEMENT_RE = re.compile(r"<html[\s>]", re.IGNORECASE)


def markdown_to_html(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS, output_format="html")


def source_to_html(page: Page, config: SiteConfig) -> str:
    try:
        text = page.source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"cannot read {page.page_file}: {e}") from e
    ext = page.source.suffix.lstrip(".").lower()
    command = config.preprocessors.get(ext)
    if command:
        return run_command(command, stdin=text, what=f"{page.page_file}: preprocessor", cwd=config.root)
    if ext == "md":
        return markdown_to_html(text)
    return text


def is_complete_document(html_text: str) -> bool:
    return bool(HTML_ELEMENT_RE.search(html_text))


def assemble(page: Page, html_text: str, template: str, content_selector: str) -> None:
    """Set `page.soup`: the page itself if complete, else the template with the page inside."""
    if is_complete_document(html_text):
        page.soup = BeautifulSoup(html_text, PARSER)
        return

    page.soup = BeautifulSoup(template, PARSER)
    container = page.select_one(content_selector)
    if container is None:
        raise ConfigurationError(f"template has no element matching {content_selector!r}")
    container.clear()
    for node in parse_fragment(html_text):
        container.append(node)
