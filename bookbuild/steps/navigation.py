"""
Chapter listing and previous/next navigation.

Both read the ChapterIndex from the build context; neither touches it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from .. import templating
from ..context import BuildContext
from ..errors import ConfigurationError
from ..page import Page, append_child, prepend_child


CHAPTER_ITEM_TMPL = '<li><a href="/{{ id }}/">{{ title }}</a></li>'

NAV_TMPL = (
    '<hr> <div class="chapters-navigation">'
    '<div>{% if prev %} <a class="prev" href="/{{ prev.id }}/">← Previous</a> {% endif %}</div>'
    '<div> <a class="up" href="/">↑ Contents</a> </div>'
    '<div>{% if next %} <a class="next" href="/{{ next.id }}/">Next →</a> {% endif %}</div>'
    '</div> <hr>'
)


def _compiles(template: str) -> str:
    try:
        templating.compile_template(template)
    except ConfigurationError as e:
        raise ValueError(str(e)) from e
    return template


class ChaptersIndexOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    selector: str = "#chapters-index"
    # Rendered once per chapter with `id`, `title`, `ordinal`.
    template: str = CHAPTER_ITEM_TMPL

    @field_validator("template")
    @classmethod
    def template_compiles(cls, value: str) -> str:
        return _compiles(value)


class ChaptersNavigationOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    selector: str = "body"
    # Rendered with `prev`, `next` (None at either end), `current`,
    # `position` (1-based), `total` and `chapters`.
    template: str = NAV_TMPL

    @field_validator("template")
    @classmethod
    def template_compiles(cls, value: str) -> str:
        return _compiles(value)


def chapters_index(page: Page, opts: ChaptersIndexOptions, ctx: BuildContext) -> None:
    container = page.require(opts.selector, step="chapters-index")
    for rec in ctx.chapters:
        item = templating.render(opts.template, id=rec.id, title=rec.title, ordinal=rec.ordinal)
        append_child(container, item)


def chapters_navigation(page: Page, opts: ChaptersNavigationOptions, ctx: BuildContext) -> None:
    current = ctx.chapters.find(page.page_id)
    if current is None:
        # Not a chapter (e.g. the index page).
        return

    container = page.require(opts.selector, step="chapters-navigation")
    prev_rec, next_rec = ctx.chapters.neighbors(current)
    nav_bar = templating.render(
        opts.template,
        prev=prev_rec,
        next=next_rec,
        current=current,
        position=ctx.chapters.position(current),
        total=len(ctx.chapters),
        chapters=ctx.chapters.records,
    )
    prepend_child(container, nav_bar)
    append_child(container, nav_bar)
