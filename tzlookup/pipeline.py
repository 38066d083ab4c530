"""Staged extract → parse → order pipeline.

WHY: The extractor and the parser are both sequential, but they need
not wait for each other: decompression can run ahead while the parser
works through earlier lines. Callers want one function that turns an
archive into a table and reports failures as exceptions.

HOW: Two worker threads connected by unbounded queue.Queue handoffs:
  extractor thread — iter_region_lines() → line queue
  parser thread    — line queue → ZoneParser → record queue
The calling thread drains the record queue into an OrderedTable, so
the sort stage collects everything before any output is produced.

RULES:
- One worker per stage; strict FIFO between stages
- A worker fault is put on its outbound queue and re-raised in the
  consumer, so the caller sees the original exception
- The optional cancel event is checked once per line; when set, the
  run stops with PipelineCancelled
- Both workers are stopped and joined before the call returns, whether
  it succeeds or fails
- Nothing is written by this module except via write_lookup_table()
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import IO, Any, Optional

from tzlookup.config import REGIONS
from tzlookup.core.extractor import iter_region_lines
from tzlookup.core.ordering import OrderedTable
from tzlookup.core.parser import ZoneParser
from tzlookup.errors import PipelineCancelled
from tzlookup.writer import write_atomic

logger = logging.getLogger(__name__)


class _EndOfStream:
    """Queue sentinel: the producing stage finished normally."""


class _Failure:
    """Queue sentinel carrying the exception that stopped a stage."""

    def __init__(self, exc: BaseException) -> None:
        self.exc = exc


_END = _EndOfStream()


class _Stopped(Exception):
    """Raised inside a worker when the consumer has stopped reading."""


def _drain(q: queue.Queue) -> Iterator[Any]:
    """Yield items from ``q`` until the end sentinel; re-raise stage faults."""
    while True:
        item = q.get()
        if item is _END:
            return
        if isinstance(item, _Failure):
            raise item.exc
        yield item


def _start_stage(name: str, produce: Callable[[], Iterable[Any]], out: queue.Queue) -> threading.Thread:
    """Run ``produce`` on a daemon thread, forwarding its items to ``out``."""

    def _run() -> None:
        logger.debug("Stage %s started", name)
        try:
            for item in produce():
                out.put(item)
        except Exception as exc:
            out.put(_Failure(exc))
            logger.debug("Stage %s failed: %s", name, exc)
            return
        out.put(_END)
        logger.debug("Stage %s finished", name)

    thread = threading.Thread(target=_run, name="tzlookup-{}".format(name), daemon=True)
    thread.start()
    return thread


def build_lookup_table(
    source: IO[bytes],
    regions: Iterable[str] = REGIONS,
    legacy_ordering: bool = False,
    strict: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> list[str]:
    """Turn a tzdata archive stream into ordered lookup-table lines.

    WHY: This is the core contract of the package: bytes in, ordered
    ``"<zone>\\t<hours> <minutes>"`` lines out.

    HOW: Starts the extractor and parser workers, then inserts every
    record the parser emits into an OrderedTable.

    RULES:
    - Faults from any stage propagate unchanged to the caller
    - No partial table is returned on failure

    Args:
        source: Binary stream of a gzip-compressed tar archive.
        regions: Archive entry names to read.
        legacy_ordering: Reproduce the historic insertion order.
        strict: Raise on malformed zone headers/offsets instead of skipping.
        cancel_event: When set, the run stops with PipelineCancelled.

    Returns:
        The ordered table lines, without trailing newlines.
    """
    allowed = frozenset(regions)
    lines: queue.Queue = queue.Queue()
    records: queue.Queue = queue.Queue()

    stop = threading.Event()

    def _check_cancel() -> None:
        if stop.is_set():
            raise _Stopped()
        if cancel_event is not None and cancel_event.is_set():
            raise PipelineCancelled("lookup table build cancelled")

    def _extract() -> Iterator[Any]:
        for line in iter_region_lines(source, allowed):
            _check_cancel()
            yield line

    parser = ZoneParser(strict=strict)

    def _parse() -> Iterator[Any]:
        for line in _drain(lines):
            _check_cancel()
            yield from parser.feed(line)
        yield from parser.finish()

    extractor = _start_stage("extract", _extract, lines)
    parse_stage = _start_stage("parse", _parse, records)

    table = OrderedTable(legacy=legacy_ordering)
    count = 0
    try:
        for record in _drain(records):
            table.insert(record.format())
            count += 1
    finally:
        # Workers must not outlive the call: they read the caller's source
        stop.set()
        parse_stage.join()
        extractor.join()

    logger.info(
        "Parsed %d zone records (%d skipped), table has %d lines",
        count, parser.skipped, len(table),
    )
    return table.lines()


def write_lookup_table(
    source: IO[bytes],
    destination: str | Path,
    regions: Iterable[str] = REGIONS,
    legacy_ordering: bool = False,
    strict: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> int:
    """Build the table from ``source`` and atomically write it to ``destination``.

    Returns:
        Number of lines written.
    """
    table = build_lookup_table(
        source,
        regions,
        legacy_ordering=legacy_ordering,
        strict=strict,
        cancel_event=cancel_event,
    )
    return write_atomic(destination, table)
