from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .chapters import ChapterIndex
from .report import Reporter

if TYPE_CHECKING:
    from .config import Settings


@dataclass(frozen=True)
class BuildContext:
    """Shared, read-only state handed to every step."""

    settings: Settings
    chapters: ChapterIndex
    root: Path
    reporter: Reporter
