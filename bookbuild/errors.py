"""Build errors.

ConfigurationError aborts the whole build. MetadataError and ExternalToolError
are reported per page; the build keeps going and fails at the end.
"""

from __future__ import annotations


class BuildError(Exception):
    pass


class ConfigurationError(BuildError):
    """Bad site config, or a page template missing a required element."""


class ParseError(BuildError):
    pass


class MetadataError(ParseError):
    """Malformed chapter file, or a chapter with no matching page."""


class ExternalToolError(BuildError):
    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stderr.strip():
            msg = f"{msg}\n{self.stderr.rstrip()}"
        return msg


class PageError(BuildError):
    def __init__(self, page_file: str, cause: BuildError) -> None:
        super().__init__(f"{page_file}: {cause}")
        self.page_file = page_file
        self.cause = cause
