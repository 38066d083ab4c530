"""Streaming tar/gzip reader that yields lines from the region files.

WHY: A tzdata release is a gzip-compressed tarball holding dozens of
files, of which only the seven region files define zones. The parser is
stateful across lines, so it needs those lines in strict archive order.

HOW: tarfile opens the source in stream mode ("r|gz"), which walks
entries front to back without seeking. Entries outside the allow-list
are skipped without reading their bodies. Allowed entries are read with
a bounded readline() scanner and yielded as SourceLine objects.

RULES:
- Lines come out in (archive-entry order, then within-entry order)
- Only regular files whose name is in the allow-list are read
- Line terminators (\\n and \\r\\n) are stripped, nothing else is
- A line longer than MAX_LINE_BYTES is a LineScanError
- Invalid UTF-8 is replaced with U+FFFD and logged, never fatal
- Invalid gzip/tar framing is an ArchiveDecodeError; no resync is attempted
"""

from __future__ import annotations

import logging
import tarfile
import zlib
from collections.abc import Iterable, Iterator
from typing import IO

from tzlookup.core.models import SourceLine
from tzlookup.errors import TzLookupError

logger = logging.getLogger(__name__)

# Largest line the scanner accepts, matching a 64 KiB scan buffer.
MAX_LINE_BYTES = 64 * 1024


class ArchiveDecodeError(TzLookupError):
    """Raised when the source is not a readable gzip-compressed tar stream."""

    stage = "decode"


class LineScanError(TzLookupError):
    """Raised when a region file cannot be split into text lines.

    RULES:
    - region and line_number identify the offending line
    """

    stage = "scan"

    def __init__(self, region: str, line_number: int, reason: str) -> None:
        self.region = region
        self.line_number = line_number
        super().__init__("{}:{}: {}".format(region, line_number, reason))


def iter_region_lines(
    source: IO[bytes],
    regions: Iterable[str],
) -> Iterator[SourceLine]:
    """Yield every line of every allowed region file in the archive.

    WHY: This is the only entry point the pipeline needs from the
    archive; everything downstream works on lines.

    HOW: Opens ``source`` as a streaming gzip tarball and iterates its
    members. For each allowed regular file, scans its body line by line.

    RULES:
    - The generator is lazy; it can only be restarted by re-reading source
    - Decoding faults abort the walk with ArchiveDecodeError

    Args:
        source: Binary file object positioned at the start of the archive.
        regions: Entry names to read; all others are skipped.

    Returns:
        Iterator of SourceLine in archive order.
    """
    allowed = frozenset(regions)
    total = 0
    try:
        with tarfile.open(fileobj=source, mode="r|gz") as archive:
            for member in archive:
                if member.name not in allowed or not member.isfile():
                    logger.debug("Skipping archive entry %s", member.name)
                    continue

                logger.debug("Reading region file %s (%d bytes)", member.name, member.size)
                body = archive.extractfile(member)
                if body is None:
                    continue
                for line in _scan_lines(body, member.name):
                    total += 1
                    yield line
    except (tarfile.TarError, EOFError, OSError, zlib.error) as exc:
        raise ArchiveDecodeError("cannot read tzdata archive: {}".format(exc)) from exc

    logger.info("Extracted %d lines from region files", total)


def _scan_lines(body: IO[bytes], region: str) -> Iterator[SourceLine]:
    """Split one archive entry into SourceLine objects.

    RULES:
    - A final line without a trailing newline is still yielded
    - Bodies are decoded as UTF-8; undecodable bytes become U+FFFD and
      are logged, so a stray byte in a comment does not stop the run
    """
    line_number = 0
    while True:
        raw = body.readline(MAX_LINE_BYTES + 1)
        if not raw:
            return
        line_number += 1

        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        elif len(raw) > MAX_LINE_BYTES:
            raise LineScanError(
                region, line_number,
                "line exceeds {} bytes".format(MAX_LINE_BYTES),
            )

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("%s:%d: invalid UTF-8 replaced: %s", region, line_number, exc)
            text = raw.decode("utf-8", errors="replace")

        yield SourceLine(region=region, line_number=line_number, text=text)
