"""
Page transformation steps ("widgets").

Each step is `fn(page, options, ctx)` and mutates `page` in place. The key
used here is the `widget:` value in site.yaml.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel

from .elements import (
    DeleteElementOptions,
    PreprocessElementOptions,
    delete_element,
    preprocess_element,
)
from .footnotes import FootnotesCleanupOptions, FootnotesOptions, footnotes, footnotes_cleanup
from .navigation import (
    ChaptersIndexOptions,
    ChaptersNavigationOptions,
    chapters_index,
    chapters_navigation,
)
from .title import TitleOptions, page_title
from .toc import TocOptions, table_of_contents


@dataclass(frozen=True)
class StepType:
    options: type[BaseModel]
    run: Callable[..., Any]


STEP_TYPES: dict[str, StepType] = {
    "title": StepType(TitleOptions, page_title),
    "footnotes": StepType(FootnotesOptions, footnotes),
    "footnotes-cleanup": StepType(FootnotesCleanupOptions, footnotes_cleanup),
    "toc": StepType(TocOptions, table_of_contents),
    "delete_element": StepType(DeleteElementOptions, delete_element),
    "preprocess_element": StepType(PreprocessElementOptions, preprocess_element),
    "chapters-index": StepType(ChaptersIndexOptions, chapters_index),
    "chapters-navigation": StepType(ChaptersNavigationOptions, chapters_navigation),
}
