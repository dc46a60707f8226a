"""Shared fixtures: chapter indexes, in-memory pages, build contexts, tiny sites."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from bookbuild.chapters import ChapterIndex, ChapterRecord, normalize_page_id
from bookbuild.config import Settings
from bookbuild.context import BuildContext
from bookbuild.page import PARSER, Page
from bookbuild.report import Reporter


BOOK_CHAPTERS = [
    {"id": "preface", "title": "Preface"},
    {"id": "arithmetic", "title": "Arithmetic"},
    {"id": "functions", "title": "Functions"},
]

TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head><meta charset="utf-8"><title></title></head>
  <body>
    <main id="content"></main>
    <div id="footnotes"><h2>Notes</h2></div>
  </body>
</html>
"""


def index_of(*ids: str) -> ChapterIndex:
    return ChapterIndex(
        tuple(ChapterRecord(id=i, title=i.title(), ordinal=n) for n, i in enumerate(ids, start=1))
    )


@pytest.fixture
def chapters() -> ChapterIndex:
    return ChapterIndex(
        tuple(ChapterRecord(id=c["id"], title=c["title"], ordinal=n) for n, c in enumerate(BOOK_CHAPTERS, start=1))
    )


@pytest.fixture
def make_page():
    def _make(body: str, page_file: str = "01_arithmetic.md", head: str = "<title></title>") -> Page:
        stem = Path(page_file).stem
        page_id = "index" if stem == "index" else normalize_page_id(stem)
        target_rel = "index.html" if stem == "index" else f"{page_id}/index.html"
        page = Page(
            source=Path(page_file),
            page_file=page_file,
            page_id=page_id,
            target=Path("build") / target_rel,
            target_rel=target_rel,
        )
        page.soup = BeautifulSoup(f"<html><head>{head}</head><body>{body}</body></html>", PARSER)
        return page

    return _make


@pytest.fixture
def make_ctx(tmp_path, chapters):
    def _make(index: ChapterIndex | None = None, **settings) -> BuildContext:
        return BuildContext(
            settings=Settings(**settings),
            chapters=chapters if index is None else index,
            root=tmp_path,
            reporter=Reporter(verbose=False),
        )

    return _make


@pytest.fixture
def ctx(make_ctx) -> BuildContext:
    return make_ctx()


SITE_YAML = """\
settings:
  strict: true
  build_dir: build
  site_dir: book
  default_template_file: templates/main.html
  chapters_file: chapters.json

steps:
  page-title:
    widget: title
    default: The Book
    append: " &mdash; The Book"
  footnotes:
    widget: footnotes
  footnotes-cleanup:
    widget: footnotes-cleanup
    after: footnotes
    footnote_link_selector: a.footnote-ref
    footnotes_container_selector: div#footnotes
  table-of-contents:
    widget: toc
    exclude_page: index.md
    numbered_list: true
    use_heading_slug: true
  cleanup-table-of-contents:
    widget: delete_element
    after: table-of-contents
    selector: div#toc
    only_if_empty: true
  shout-code:
    widget: preprocess_element
    selector: .language-ocaml
    command: tr a-z A-Z
  chapters-index:
    widget: chapters-index
    page: index.md
  chapter-navigation:
    widget: chapters-navigation
    exclude_page: index.html
"""


@pytest.fixture
def site(tmp_path) -> Path:
    """A three-chapter book with an index page and one static asset."""
    root = tmp_path / "site"
    (root / "book").mkdir(parents=True)
    (root / "templates").mkdir()
    (root / "templates" / "main.html").write_text(TEMPLATE, encoding="utf-8")
    (root / "chapters.json").write_text(json.dumps(BOOK_CHAPTERS), encoding="utf-8")
    (root / "site.yaml").write_text(SITE_YAML, encoding="utf-8")

    pages = {
        "index.md": """\
            # The Book

            <ul id="chapters-index"></ul>
            """,
        "00_preface.md": """\
            # Preface

            Read this first.
            """,
        "01_arithmetic.md": """\
            # Arithmetic

            ## Integers

            Plain ints.<span class="footnote">A</span> More.<span class="footnote">B</span>

            ```ocaml
            let x = 1
            ```
            """,
        "02_functions.md": """\
            # Functions

            ## Definitions

            Functions are values.
            """,
        "style.css": "body { color: black; }\n",
    }
    for name, text in pages.items():
        (root / "book" / name).write_text(textwrap.dedent(text), encoding="utf-8")
    return root
