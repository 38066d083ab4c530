"""Command-line interface for the tz lookup-table generator.

WHY: The usual job is "rebuild ./tz from the configured tzdata release"
with no arguments at all. The CLI wires the download, the core
pipeline, and the atomic writer behind that single command, and is the
only place where failures become exit codes.

HOW: Uses argparse with defaults taken from config. Downloads the
archive with TzdataClient via asyncio.run() unless --archive names a
local file, then runs write_lookup_table(). Status messages go to
stderr; logging is configured once here.

RULES:
- No flags required; every flag only overrides a config default
- Status output goes to stderr (not stdout)
- Exit 0 on success, 1 on any TzLookupError or OSError, 130 on Ctrl-C
- One "Error: <stage>: <message>" line per failure
- The output file is replaced atomically or left untouched
"""

from __future__ import annotations

import argparse
import asyncio
import io
import logging
import sys
import threading
from pathlib import Path
from typing import IO, List, Optional

from tzlookup.config import (
    LEGACY_ORDERING,
    OUTPUT_FILENAME,
    REGIONS,
    TZDATA_BASE_URL,
    TZDATA_RELEASE,
)
from tzlookup.download.client import TzdataClient
from tzlookup.errors import TzLookupError
from tzlookup.pipeline import write_lookup_table


def _status(msg: str) -> None:
    """Print a status message to stderr.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _error(stage: str, exc: BaseException) -> None:
    print("Error: {}: {}".format(stage, exc), file=sys.stderr, flush=True)


async def _download(base_url: str, release: str) -> bytes:
    async with TzdataClient(base_url=base_url, release=release) as client:
        return await client.fetch_archive(on_status=_status)


def _open_source(args: argparse.Namespace) -> IO[bytes]:
    """Return a binary stream over the archive, local or downloaded."""
    if args.archive:
        source = open(args.archive, "rb")
        _status("Reading {}...".format(args.archive))
        return source
    return io.BytesIO(asyncio.run(_download(args.base_url, args.release)))


def _run(args: argparse.Namespace) -> int:
    """Execute download → build → write and return the process exit code."""
    output = Path(args.output)
    cancel = threading.Event()

    try:
        try:
            source = _open_source(args)
        except OSError as e:
            _error("input", e)
            return 1

        with source:
            _status("Building lookup table...")
            count = write_lookup_table(
                source,
                output,
                regions=REGIONS,
                legacy_ordering=args.legacy_ordering,
                strict=args.strict,
                cancel_event=cancel,
            )
    except KeyboardInterrupt:
        cancel.set()
        _status("\nCancelled by user.")
        return 130
    except TzLookupError as e:
        _error(e.stage, e)
        return 1
    except OSError as e:
        _error("output", e)
        return 1

    _status("Done! Wrote {} zone(s) to {}".format(count, output))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="tzlookup",
        description="Build a flat zone/UTC-offset lookup table from an IANA tzdata release.",
    )

    parser.add_argument(
        "--archive",
        default=None,
        help="Read a local tzdata .tar.gz instead of downloading one.",
    )

    parser.add_argument(
        "--output",
        default=OUTPUT_FILENAME,
        help="Lookup table path (default: %(default)s).",
    )

    parser.add_argument(
        "--release",
        default=TZDATA_RELEASE,
        help="tzdata release to download (default: %(default)s).",
    )

    parser.add_argument(
        "--base-url",
        default=TZDATA_BASE_URL,
        help="Directory URL holding tzdata release archives (default: %(default)s).",
    )

    parser.add_argument(
        "--legacy-ordering",
        action=argparse.BooleanOptionalAction,
        default=LEGACY_ORDERING,
        help="Reproduce the historic (lossy) insertion order (default: %(default)s).",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on malformed zone headers or offsets instead of skipping them.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Always exits via sys.exit with the run's exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_run(args))


if __name__ == "__main__":
    main()
