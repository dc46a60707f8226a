"""
Heading table of contents.

Collects h{min_level}..h{max_level} from the page content, makes sure each
has an id, and builds a (nested) list of links wrapped in <div id="toc">.
A page without headings still gets the empty wrapper; pair this step with a
`delete_element` step (`only_if_empty: true`) to drop it.
"""

from __future__ import annotations

import re
import unicodedata

from bs4 import Tag
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..context import BuildContext
from ..page import INSERT_ACTIONS, Page


SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
SLUG_DASH_RE = re.compile(r"[-\s]+")


class TocOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    selector: str = "h1"
    action: str = "insert_after"
    min_level: int = 2
    max_level: int = 6
    container_id: str = "toc"
    toc_list_class: str = "toc"
    toc_class_levels: bool = False
    numbered_list: bool = False
    heading_links: bool = False
    heading_link_text: str = "#"
    heading_link_class: str = ""
    use_heading_slug: bool = False

    @field_validator("action")
    @classmethod
    def known_action(cls, value: str) -> str:
        # The anchor heading has to stay in the page.
        if value not in INSERT_ACTIONS or value == "replace_element":
            raise ValueError(f"unsupported action {value!r}")
        return value

    @model_validator(mode="after")
    def level_range(self) -> TocOptions:
        if not 1 <= self.min_level <= self.max_level <= 6:
            raise ValueError(f"need 1 <= min_level <= max_level <= 6, got {self.min_level}..{self.max_level}")
        return self


def slugify(text: str) -> str:
    s = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    s = SLUG_STRIP_RE.sub("", s).strip().lower()
    return SLUG_DASH_RE.sub("-", s).strip("-") or "section"


def _assign_ids(headings: list[Tag], opts: TocOptions, page: Page) -> list[str]:
    own = {id(h) for h in headings}
    taken = {t["id"] for t in page.tree.find_all(id=True) if id(t) not in own}
    ids: list[str] = []
    for n, h in enumerate(headings, start=1):
        hid = h.get("id")
        if not hid:
            base = slugify(h.get_text(" ", strip=True)) if opts.use_heading_slug else f"toc-heading-{n}"
            hid = base
            k = 2
            while hid in taken:
                hid = f"{base}-{k}"
                k += 1
            h["id"] = hid
        taken.add(hid)
        ids.append(hid)
    return ids


def _new_list(page: Page, opts: TocOptions, level: int) -> Tag:
    lst = page.new_tag("ol" if opts.numbered_list else "ul")
    classes = []
    if opts.toc_list_class:
        classes.append(opts.toc_list_class)
        if opts.toc_class_levels:
            classes.append(f"{opts.toc_list_class}-{level}")
    if classes:
        lst["class"] = classes
    return lst


def _build_list(page: Page, opts: TocOptions, entries: list[tuple[int, str, str]]) -> Tag:
    root = _new_list(page, opts, opts.min_level)
    # [level, list tag, last <li> in that list]
    stack: list[list] = [[opts.min_level, root, None]]
    for level, hid, text in entries:
        while len(stack) > 1 and level < stack[-1][0]:
            stack.pop()
        while level > stack[-1][0]:
            host = stack[-1][2]
            if host is None:
                host = page.new_tag("li")
                stack[-1][1].append(host)
                stack[-1][2] = host
            sub = _new_list(page, opts, stack[-1][0] + 1)
            host.append(sub)
            stack.append([stack[-1][0] + 1, sub, None])
        li = page.new_tag("li")
        a = page.new_tag("a", href=f"#{hid}")
        a.string = text
        li.append(a)
        stack[-1][1].append(li)
        stack[-1][2] = li
    return root


def table_of_contents(page: Page, opts: TocOptions, ctx: BuildContext) -> None:
    anchor = page.require(opts.selector, step="toc")

    scope = page.select_one(ctx.settings.default_content_selector) or page.tree
    levels = [f"h{n}" for n in range(opts.min_level, opts.max_level + 1)]
    headings = [h for h in scope.find_all(levels) if h is not anchor]

    wrapper = page.new_tag("div", id=opts.container_id)
    if headings:
        ids = _assign_ids(headings, opts, page)
        entries = [
            (int(h.name[1]), hid, h.get_text(" ", strip=True)) for h, hid in zip(headings, ids)
        ]
        wrapper.append(_build_list(page, opts, entries))

        if opts.heading_links:
            for h, hid in zip(headings, ids):
                link = page.new_tag("a", href=f"#{hid}")
                if opts.heading_link_class:
                    link["class"] = [opts.heading_link_class]
                link.string = opts.heading_link_text
                h.insert(0, link)

    INSERT_ACTIONS[opts.action](anchor, str(wrapper))
