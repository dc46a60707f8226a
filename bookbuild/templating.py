"""Jinja2 rendering for the HTML fragments steps insert."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import jinja2

from .errors import ConfigurationError


_ENV = jinja2.Environment(
    autoescape=True,
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=False,
)


@lru_cache(maxsize=None)
def compile_template(source: str) -> jinja2.Template:
    try:
        return _ENV.from_string(source)
    except jinja2.TemplateSyntaxError as e:
        raise ConfigurationError(f"bad template {source!r}: {e}") from e


def render(source: str, **env: Any) -> str:
    try:
        return compile_template(source).render(**env)
    except jinja2.UndefinedError as e:
        raise ConfigurationError(f"template {source!r}: {e}") from e
