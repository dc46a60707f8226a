"""
Footnotes: move every `.footnote` element into the footnotes container and
leave a numbered link in its place.

    <span class="footnote">A</span>
becomes
    <sup><a class="footnote-ref" id="footnote-ref-1" href="#footnote-1">1</a></sup>
with
    <p class="footnote-entry" id="footnote-1"><a href="#footnote-ref-1">1</a> <span class="footnote">A</span></p>
appended to the container.

`footnotes-cleanup` drops the container when a page ended up with no links,
so pages don't get an empty "Notes" section.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from ..context import BuildContext
from ..errors import ConfigurationError
from ..page import Page, delete


class FootnotesOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    selector: str = "div#footnotes"
    footnote_selector: str = ".footnote"
    footnote_link_class: str = "footnote-ref"
    back_links: bool = True
    link_id_template: str = "footnote-ref-{n}"
    note_id_template: str = "footnote-{n}"

    @field_validator("link_id_template", "note_id_template")
    @classmethod
    def numbered(cls, value: str) -> str:
        if "{n}" not in value:
            raise ValueError(f"must contain {{n}}, got {value!r}")
        return value


class FootnotesCleanupOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    footnote_link_selector: str
    footnotes_container_selector: str


def _is_ref(node, opts: FootnotesOptions) -> bool:
    if not opts.footnote_link_class or node.name != "a":
        return False
    return opts.footnote_link_class in node.get("class", [])


def footnotes(page: Page, opts: FootnotesOptions, ctx: BuildContext) -> None:
    container = page.select_one(opts.selector)
    # Links left by an earlier run are not notes.
    notes = [n for n in page.select(opts.footnote_selector) if not _is_ref(n, opts)]
    if container is not None:
        # Already relocated notes stay where they are.
        notes = [n for n in notes if not any(p is container for p in n.parents)]
    if not notes:
        return
    if container is None:
        raise ConfigurationError(
            f"footnotes: {len(notes)} footnote(s) but no element matches {opts.selector!r} in {page.page_file}"
        )

    for n, note in enumerate(notes, start=1):
        link_id = opts.link_id_template.format(n=n)
        note_id = opts.note_id_template.format(n=n)

        ref = page.new_tag("a", href=f"#{note_id}", id=link_id)
        if opts.footnote_link_class:
            ref["class"] = [opts.footnote_link_class]
        ref.string = str(n)
        sup = page.new_tag("sup")
        sup.append(ref)
        note.replace_with(sup)

        entry = page.new_tag("p", id=note_id)
        entry["class"] = ["footnote-entry"]
        if opts.back_links:
            back = page.new_tag("a", href=f"#{link_id}")
            back.string = str(n)
            entry.append(back)
            entry.append(" ")
        entry.append(note)
        container.append(entry)


def footnotes_cleanup(page: Page, opts: FootnotesCleanupOptions, ctx: BuildContext) -> None:
    if page.select(opts.footnote_link_selector):
        return
    container = page.require(opts.footnotes_container_selector, step="footnotes-cleanup")
    delete(container)
