"""
Build the book site.

  bookbuild                    # uses ./site.yaml
  bookbuild --config other.yaml --quiet

Exit status: 0 on success, 1 if some page or chapter failed, 2 if the
configuration (site.yaml, template, chapter metadata) is unusable.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from .config import DEFAULT_CONFIG, load_config
from .errors import ConfigurationError, MetadataError
from .pipeline import build
from .report import Reporter


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="bookbuild", description="Build the book site.")
    ap.add_argument("--config", default=DEFAULT_CONFIG, help=f"Site config (default: {DEFAULT_CONFIG})")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Report every page")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report problems")
    args = ap.parse_args(argv)

    try:
        config = load_config(Path(args.config))
        if args.verbose or args.quiet:
            config = replace(config, settings=config.settings.model_copy(update={"verbose": args.verbose}))
        reporter = Reporter(config.settings.verbose)
        result = build(config, reporter)
    except (ConfigurationError, MetadataError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if not result.ok:
        problems = len(result.failures) + len(result.metadata_errors)
        print(f"Build failed: {problems} problem(s).", file=sys.stderr)
        return 1
    return 0
