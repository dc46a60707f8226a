from __future__ import annotations

import sys


class Reporter:
    """Progress on stdout (when verbose), problems on stderr."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self.warnings = 0
        self.errors = 0

    def info(self, msg: str) -> None:
        if self.verbose:
            print(msg)

    def warning(self, msg: str) -> None:
        self.warnings += 1
        print(f"warning: {msg}", file=sys.stderr)

    def error(self, msg: str) -> None:
        self.errors += 1
        print(f"error: {msg}", file=sys.stderr)
