"""
Site configuration: `site.yaml` -> SiteConfig.

Layout:
  settings:       build-wide Settings (paths, strict/verbose, doctype, ...)
  preprocessors:  {extension: shell command} for page sources
  steps:          {name: {widget: <type>, <filters>, <options>}}, in run order

Everything is validated here, so a typo fails the build before any page is
touched rather than halfway through it.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from .errors import ConfigurationError
from .models import StrTuple, describe
from .steps import STEP_TYPES, StepType


DEFAULT_CONFIG = "site.yaml"

FILTER_KEYS = ("page", "exclude_page", "section", "exclude_section", "after")

# extension -> shell command
PREPROCESSORS = TypeAdapter(dict[str, str], config=ConfigDict(strict=True))


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    strict: bool = False
    verbose: bool = False
    build_dir: str = "build"
    site_dir: str = "book"
    default_content_selector: str = "#content"
    default_template_file: str = "templates/main.html"
    index_page: str = "index"
    page_file_extensions: StrTuple = Field(("html", "md"), min_length=1)
    doctype: str = "<!DOCTYPE html>"
    # None: no chapter metadata, every page is a non-chapter page.
    chapters_file: str | None = None

    @model_validator(mode="after")
    def separate_dirs(self) -> Settings:
        if posixpath.normpath(self.build_dir) == posixpath.normpath(self.site_dir):
            raise ValueError("build_dir and site_dir must differ")
        return self


class StepSpec(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    name: str
    widget: str
    options: Any
    page: StrTuple = ()
    exclude_page: StrTuple = ()
    section: StrTuple = ()
    exclude_section: StrTuple = ()
    after: StrTuple = ()

    @property
    def step_type(self) -> StepType:
        return STEP_TYPES[self.widget]

    def applies_to(self, page_file: str, target_rel: str) -> bool:
        """Filters match the site-relative source path or the build-relative output path."""
        names = (page_file, target_rel)
        if self.page and not any(n in self.page for n in names):
            return False
        if any(n in self.exclude_page for n in names):
            return False
        if self.section and not any(_in_section(page_file, s) for s in self.section):
            return False
        if any(_in_section(page_file, s) for s in self.exclude_section):
            return False
        return True


def _in_section(page_file: str, section: str) -> bool:
    prefix = section.strip("/")
    return not prefix or page_file == prefix or page_file.startswith(prefix + "/")


@dataclass(frozen=True)
class SiteConfig:
    root: Path
    settings: Settings = field(default_factory=Settings)
    preprocessors: dict[str, str] = field(default_factory=dict)
    steps: tuple[StepSpec, ...] = ()

    def path(self, rel: str) -> Path:
        return (self.root / rel).resolve()

    @property
    def site_dir(self) -> Path:
        return self.path(self.settings.site_dir)

    @property
    def build_dir(self) -> Path:
        return self.path(self.settings.build_dir)

    @property
    def template_file(self) -> Path:
        return self.path(self.settings.default_template_file)

    @property
    def chapters_file(self) -> Path | None:
        if self.settings.chapters_file is None:
            return None
        return self.path(self.settings.chapters_file)


# ── Steps ────────────────────────────────────────────────────────


def _parse_step(name: str, raw: Any) -> StepSpec:
    where = f"steps.{name}"
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{where}: expected a mapping")
    raw = dict(raw)

    widget = raw.pop("widget", None)
    if not isinstance(widget, str):
        raise ConfigurationError(f"{where}: missing 'widget'")
    if widget not in STEP_TYPES:
        known = ", ".join(sorted(STEP_TYPES))
        raise ConfigurationError(f"{where}: unknown widget {widget!r} (known: {known})")

    filters = {key: raw.pop(key) for key in FILTER_KEYS if key in raw}
    try:
        options = STEP_TYPES[widget].options.model_validate(raw)
        return StepSpec.model_validate({"name": name, "widget": widget, "options": options, **filters})
    except ValidationError as e:
        raise ConfigurationError(describe(e, where)) from e


def order_steps(steps: list[StepSpec]) -> tuple[StepSpec, ...]:
    """Declaration order, except that a step always runs after its `after` steps."""
    names = {s.name for s in steps}
    for s in steps:
        for dep in s.after:
            if dep not in names:
                raise ConfigurationError(f"steps.{s.name}.after: no step named {dep!r}")

    ordered: list[StepSpec] = []
    done: set[str] = set()
    pending = list(steps)
    while pending:
        for i, s in enumerate(pending):
            if all(dep in done for dep in s.after):
                ordered.append(s)
                done.add(s.name)
                del pending[i]
                break
        else:
            cycle = ", ".join(s.name for s in pending)
            raise ConfigurationError(f"steps: circular 'after' dependencies among: {cycle}")
    return tuple(ordered)


# ── Loading ──────────────────────────────────────────────────────


def parse_config(data: Any, root: Path) -> SiteConfig:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("site config: expected a mapping at the top level")

    unknown = sorted(str(k) for k in data if k not in ("settings", "preprocessors", "steps"))
    if unknown:
        raise ConfigurationError(f"site config: unknown section(s): {', '.join(unknown)}")

    try:
        settings = Settings.model_validate(data.get("settings") or {})
    except ValidationError as e:
        raise ConfigurationError(describe(e, "settings")) from e

    try:
        preprocessors = PREPROCESSORS.validate_python(data.get("preprocessors") or {})
    except ValidationError as e:
        raise ConfigurationError(describe(e, "preprocessors")) from e

    raw_steps = data.get("steps") or {}
    if not isinstance(raw_steps, dict):
        raise ConfigurationError("steps: expected a mapping of step name -> options")
    steps = [_parse_step(str(name), raw) for name, raw in raw_steps.items()]

    return SiteConfig(
        root=Path(root).resolve(),
        settings=settings,
        preprocessors={k.lstrip("."): v for k, v in preprocessors.items()},
        steps=order_steps(steps),
    )


def load_config(path: Path) -> SiteConfig:
    """Load `site.yaml`. A missing file means all defaults, rooted at its directory."""
    path = Path(path)
    if not path.is_file():
        return parse_config({}, path.parent)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"cannot read site config {path}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path}: invalid YAML: {e}") from e
    return parse_config(data, path.parent)
