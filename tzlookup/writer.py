"""Lookup-table persistence.

WHY: A run either produces the whole table or leaves the previous one
alone. Writing straight into the destination would leave a truncated
file behind if anything failed half-way.

HOW: write_atomic() writes every line into a temporary file in the
destination's directory, then renames it over the destination with
os.replace(), which is atomic on the same filesystem.

RULES:
- Every line is written as "<line>\\n", UTF-8
- The destination is replaced only after the temp file is complete
- The table gets ordinary new-file permissions (0o666 minus umask)
- On failure the temp file is removed and OSError becomes OutputError
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from tzlookup.errors import TzLookupError

logger = logging.getLogger(__name__)


class OutputError(TzLookupError):
    """Raised when the lookup table cannot be written."""

    stage = "output"


def _default_mode() -> int:
    """Return 0o666 masked by the process umask, as for a newly created file."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_lines(sink: TextIO, lines: Iterable[str]) -> int:
    """Write each line plus a newline to ``sink``; return the line count."""
    count = 0
    for line in lines:
        sink.write(line + "\n")
        count += 1
    return count


def write_atomic(path: str | Path, lines: Iterable[str]) -> int:
    """Replace ``path`` with ``lines`` in one atomic rename.

    Args:
        path: Destination file. Its directory must already exist.
        lines: Formatted table lines, without trailing newlines.

    Returns:
        Number of lines written.
    """
    path = Path(path)
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=".{}.".format(path.name), suffix=".tmp", dir=path.parent,
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            count = write_lines(f, lines)
        os.chmod(tmp_name, _default_mode())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise OutputError("cannot write {}: {}".format(path, exc)) from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning("Failed to remove temp file: %s", tmp_name)

    logger.info("Wrote %d lines to %s", count, path)
    return count
