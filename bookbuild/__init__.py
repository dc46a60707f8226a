"""Static site build for the book: page assembly plus chapter/footnote/TOC steps."""

from .chapters import ChapterIndex, ChapterRecord, load_chapters
from .config import SiteConfig, load_config
from .errors import (
    BuildError,
    ConfigurationError,
    ExternalToolError,
    MetadataError,
    PageError,
    ParseError,
)
from .pipeline import BuildResult, build

__all__ = [
    "BuildError",
    "BuildResult",
    "ChapterIndex",
    "ChapterRecord",
    "ConfigurationError",
    "ExternalToolError",
    "MetadataError",
    "PageError",
    "ParseError",
    "SiteConfig",
    "build",
    "load_chapters",
    "load_config",
]

__version__ = "0.1.0"
