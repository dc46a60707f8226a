from __future__ import annotations

import html

from pydantic import BaseModel, ConfigDict

from ..context import BuildContext
from ..page import Page


class TitleOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    selector: str = "h1"
    default: str = ""
    prepend: str = ""
    append: str = ""


def page_title(page: Page, opts: TitleOptions, ctx: BuildContext) -> None:
    """Use the first heading's text as the page <title>."""
    head = page.require("head", step="title")

    source = page.select_one(opts.selector)
    text = source.get_text(" ", strip=True) if source is not None else ""
    if text:
        # Options may carry entities such as &mdash;
        title = html.unescape(opts.prepend) + text + html.unescape(opts.append)
    else:
        title = html.unescape(opts.default)

    title_tag = head.find("title")
    if title_tag is None:
        title_tag = page.new_tag("title")
        head.append(title_tag)
    title_tag.string = title
