"""Command-line front door for awsome.

Parses the (flag-free) command line, checks that a terminal is attached,
then hands over to the interactive browser runtime.
"""

from __future__ import annotations

import argparse
import os
import sys

from . import __version__
from .runtime import run_browser


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="awsome",
        description=(
            "Browse AWS resources (EC2, S3, IAM, CloudWatch, DynamoDB) in the terminal. "
            "Credentials come from the standard AWS chain; profile, region and "
            "favorites are read from the awsome config file."
        ),
        epilog=f"awsome {__version__}",
    )


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and launch the browser; exit 1 when not on a TTY."""
    build_parser().parse_args(argv)
    if not (os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())):
        print("awsome: an interactive terminal is required (stdin/stdout is not a TTY)", file=sys.stderr)
        raise SystemExit(1)
    run_browser()


if __name__ == "__main__":
    main()
