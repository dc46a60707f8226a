"""
Page model: one source file, its parsed tree, and where it is written.

Thin adapter over BeautifulSoup so steps only deal with selectors and
markup strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from bs4 import BeautifulSoup, Doctype, NavigableString, Tag
from bs4.element import PageElement
from soupsieve import SelectorSyntaxError

from .errors import ConfigurationError


PARSER = "html.parser"


def parse_fragment(markup: str) -> list[PageElement]:
    """Parse `markup` into detached nodes, in document order."""
    frag = BeautifulSoup(markup, PARSER)
    return [node.extract() for node in list(frag.contents)]


@dataclass
class Page:
    source: Path
    page_file: str  # posix path relative to the site dir
    page_id: str
    target: Path
    target_rel: str  # posix path relative to the build dir
    soup: BeautifulSoup | None = None

    @property
    def tree(self) -> BeautifulSoup:
        if self.soup is None:
            raise RuntimeError(f"page not loaded: {self.page_file}")
        return self.soup

    def select(self, selector: str) -> list[Tag]:
        try:
            return list(self.tree.select(selector))
        except SelectorSyntaxError as e:
            raise ConfigurationError(f"invalid selector {selector!r}: {e}") from e

    def select_one(self, selector: str) -> Tag | None:
        try:
            return self.tree.select_one(selector)
        except SelectorSyntaxError as e:
            raise ConfigurationError(f"invalid selector {selector!r}: {e}") from e

    def require(self, selector: str, *, step: str) -> Tag:
        """Like select_one, but a missing element is a template defect."""
        node = self.select_one(selector)
        if node is None:
            raise ConfigurationError(f"{step}: no element matches {selector!r} in {self.page_file}")
        return node

    def new_tag(self, name: str, **attrs: str) -> Tag:
        return self.tree.new_tag(name, attrs=attrs)

    def render(self, doctype: str) -> str:
        for node in list(self.tree.contents):
            if isinstance(node, Doctype):
                node.extract()
        body = str(self.tree).lstrip("\n")
        if doctype:
            return f"{doctype}\n{body}"
        return body


# ── Tree edits ───────────────────────────────────────────────────


def append_child(container: Tag, markup: str) -> None:
    for node in parse_fragment(markup):
        container.append(node)


def prepend_child(container: Tag, markup: str) -> None:
    for i, node in enumerate(parse_fragment(markup)):
        container.insert(i, node)


def insert_after(anchor: Tag, markup: str) -> None:
    last: PageElement = anchor
    for node in parse_fragment(markup):
        last.insert_after(node)
        last = node


def insert_before(anchor: Tag, markup: str) -> None:
    for node in parse_fragment(markup):
        anchor.insert_before(node)


def replace_content(container: Tag, markup: str) -> None:
    container.clear()
    append_child(container, markup)


def replace_element(anchor: Tag, markup: str) -> None:
    insert_before(anchor, markup)
    anchor.decompose()


def delete(node: Tag) -> None:
    node.decompose()


def is_empty(node: Tag) -> bool:
    """True when `node` holds nothing but whitespace."""
    for child in node.contents:
        if isinstance(child, Tag) or (isinstance(child, NavigableString) and child.strip()):
            return False
    return True


INSERT_ACTIONS = {
    "insert_after": insert_after,
    "insert_before": insert_before,
    "prepend_child": prepend_child,
    "append_child": append_child,
    "replace_content": replace_content,
    "replace_element": replace_element,
}
