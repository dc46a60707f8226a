"""
Build driver: site dir -> build dir.

For each page source (sorted, so output never depends on directory order):
  1. convert to HTML (preprocessor command or in-process Markdown)
  2. insert into the page template
  3. run the configured steps in order
  4. write `<build_dir>/<target>`
Everything else under the site dir is copied verbatim.

The chapter index and the template text are read once, before any page.
"""

from __future__ import annotations

import posixpath
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .chapters import ChapterIndex, load_chapters, normalize_page_id
from .config import SiteConfig
from .context import BuildContext
from .errors import BuildError, ConfigurationError, MetadataError, PageError
from .markup import assemble, source_to_html
from .page import Page
from .report import Reporter


@dataclass
class BuildResult:
    written: list[Path] = field(default_factory=list)
    assets: list[Path] = field(default_factory=list)
    failures: list[PageError] = field(default_factory=list)
    metadata_errors: list[MetadataError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.metadata_errors


def copy_file(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)


# ── Discovery ────────────────────────────────────────────────────


def make_page(config: SiteConfig, source: Path) -> Page:
    rel = source.relative_to(config.site_dir)
    parent = rel.parent.as_posix()
    parent = "" if parent == "." else parent
    stem = source.stem
    index_page = config.settings.index_page

    if stem == index_page:
        page_id = parent or index_page
        target_rel = posixpath.join(parent, "index.html")
    else:
        name = normalize_page_id(stem)
        page_id = posixpath.join(parent, name)
        target_rel = posixpath.join(parent, name, "index.html")

    return Page(
        source=source,
        page_file=rel.as_posix(),
        page_id=page_id,
        target=config.build_dir / target_rel,
        target_rel=target_rel,
    )


def discover(config: SiteConfig) -> tuple[list[Page], list[Path]]:
    """Return (pages, asset paths relative to the site dir)."""
    site_dir = config.site_dir
    if not site_dir.is_dir():
        raise ConfigurationError(f"site directory not found: {site_dir}")
    build_dir = config.build_dir
    exts = {e.lower().lstrip(".") for e in config.settings.page_file_extensions}

    pages: list[Page] = []
    assets: list[Path] = []
    for path in sorted(site_dir.rglob("*")):
        rel = path.relative_to(site_dir)
        if any(part.startswith(".") for part in rel.parts):
            continue
        if path == build_dir or build_dir in path.parents:
            continue
        if not path.is_file():
            continue
        if path.suffix.lstrip(".").lower() in exts:
            pages.append(make_page(config, path))
        else:
            assets.append(rel)

    seen: dict[str, Page] = {}
    for page in pages:
        other = seen.get(page.target_rel)
        if other is not None:
            raise ConfigurationError(
                f"{other.page_file} and {page.page_file} both map to {page.target_rel} (id {page.page_id!r})"
            )
        seen[page.target_rel] = page
    return pages, assets


# ── Per page ─────────────────────────────────────────────────────


def process_page(page: Page, config: SiteConfig, template: str, ctx: BuildContext) -> str:
    html_text = source_to_html(page, config)
    assemble(page, html_text, template, config.settings.default_content_selector)
    for step in config.steps:
        if not step.applies_to(page.page_file, page.target_rel):
            continue
        step.step_type.run(page, step.options, ctx)
    return page.render(config.settings.doctype)


def check_chapters(chapters: ChapterIndex, pages: list[Page]) -> list[MetadataError]:
    page_ids = {p.page_id for p in pages}
    return [
        MetadataError(f"chapter {rec.id!r} ({rec.title}) has no matching page")
        for rec in chapters
        if rec.id not in page_ids
    ]


def build(config: SiteConfig, reporter: Reporter | None = None) -> BuildResult:
    """Build the whole site. ConfigurationError propagates; page failures are collected."""
    settings = config.settings
    reporter = reporter or Reporter(settings.verbose)

    chapters_file = config.chapters_file
    chapters = load_chapters(chapters_file) if chapters_file else ChapterIndex(())

    template_file = config.template_file
    if not template_file.is_file():
        raise ConfigurationError(f"template not found: {template_file}")
    template = template_file.read_text(encoding="utf-8")

    ctx = BuildContext(settings=settings, chapters=chapters, root=config.root, reporter=reporter)
    pages, assets = discover(config)
    reporter.info(f"Found {len(pages)} pages, {len(chapters)} chapters")

    result = BuildResult()
    for page in pages:
        try:
            output = process_page(page, config, template, ctx)
        except ConfigurationError:
            raise
        except BuildError as e:
            err = PageError(page.page_file, e)
            reporter.error(str(err))
            result.failures.append(err)
            continue
        finally:
            # Trees are not needed once serialized.
            page.soup = None

        page.target.parent.mkdir(parents=True, exist_ok=True)
        page.target.write_text(output, encoding="utf-8")
        result.written.append(page.target)
        reporter.info(f"  ✓ {page.page_file} → {page.target_rel}")

    for rel in assets:
        dst = config.build_dir / rel
        copy_file(config.site_dir / rel, dst)
        result.assets.append(dst)
    if assets:
        reporter.info(f"  ✓ {len(assets)} static files copied")

    for err in check_chapters(chapters, pages):
        reporter.error(str(err))
        result.metadata_errors.append(err)

    reporter.info(f"\nDone. {len(result.written)} pages built.")
    return result
