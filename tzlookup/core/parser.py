"""Zone parser: raw region lines → ZoneRecord objects.

WHY: A tzdata zone is written as a ``Zone`` header line followed by any
number of continuation lines, one per historical offset period. The
table only wants the zone name and the offset of its last period, so
the parser must carry "current zone" state across lines.

HOW: ZoneParser holds a single ZoneBlock accumulator. feed() classifies
each line (blank, comment, Rule, Zone header, or continuation) and
updates the block. A header or the end of input closes the block and
emits a record if it has both a name and an offset.

RULES:
- Lines are whitespace-trimmed; blank lines and "#" lines are dropped
- Lines starting with "Rule" are dropped (DST rules are not resolved)
- A "Zone" line starts a new block; its name is the second field, with
  the first space (if any) replaced by a tab
- Any other line is a continuation; its first field overwrites the
  block's offset text (last one wins)
- A block with a name but no continuation line is dropped, with a warning
- A header with fewer than two fields, or a final offset that is not
  hours:minutes, is skipped with a warning; with strict=True it raises
  ZoneParseError naming the region file and line instead
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from tzlookup.core.models import SourceLine, ZoneBlock, ZoneRecord
from tzlookup.core.normalizer import OffsetFormatError, parse_offset
from tzlookup.errors import TzLookupError

logger = logging.getLogger(__name__)

_COMMENT_PREFIX = "#"
_RULE_PREFIX = "Rule"
_ZONE_PREFIX = "Zone"


class ZoneParseError(TzLookupError):
    """Raised in strict mode when a zone header or offset cannot be interpreted.

    RULES:
    - region, line_number and line identify the offending source line
    """

    stage = "parse"

    def __init__(self, source: SourceLine, reason: str) -> None:
        self.region = source.region
        self.line_number = source.line_number
        self.line = source.text
        super().__init__("{}:{}: {}: {!r}".format(
            source.region, source.line_number, reason, source.text,
        ))


class ZoneParser:
    """Single-consumer state machine over region lines.

    Use feed() for every line in order, then finish() once. Both return
    the records (zero or one) closed by that call.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self.skipped = 0
        self._block = ZoneBlock()
        self._header: SourceLine | None = None

    def feed(self, source: SourceLine) -> list[ZoneRecord]:
        line = source.text.strip()
        if not line:
            return []
        if line.startswith(_COMMENT_PREFIX) or line.startswith(_RULE_PREFIX):
            return []

        fields = line.split()

        if line.startswith(_ZONE_PREFIX):
            closed = self._close()
            self._header = source
            if len(fields) < 2:
                self._fault(source, "zone header has no name")
                # Continuation lines up to the next header belong to no zone
                self._block.start("")
                return closed
            self._block.start(fields[1].replace(" ", "\t", 1))
            return closed

        # Continuation line: first column is the offset
        self._block.capture(fields[0], source)
        return []

    def finish(self) -> list[ZoneRecord]:
        """Close the last block at end of input."""
        return self._close()

    def _close(self) -> list[ZoneRecord]:
        block = self._block
        if not block.closable:
            if block.zone_name and self._header is not None:
                logger.warning(
                    "Dropping zone %s (%s:%d): no offset lines",
                    block.zone_name, self._header.region, self._header.line_number,
                )
                self.skipped += 1
            return []

        try:
            offset = parse_offset(block.offset_text)
        except OffsetFormatError as exc:
            self._fault(block.offset_source, "zone {}: {}".format(block.zone_name, exc))
            return []
        return [ZoneRecord(zone_name=block.zone_name, offset=offset)]

    def _fault(self, source: SourceLine, reason: str) -> None:
        if self.strict:
            raise ZoneParseError(source, reason)
        logger.warning(
            "Skipping %s:%d: %s: %r",
            source.region, source.line_number, reason, source.text,
        )
        self.skipped += 1


def parse_zones(lines: Iterable[SourceLine], strict: bool = False) -> Iterator[ZoneRecord]:
    """Yield one ZoneRecord per completed zone block, in header order."""
    parser = ZoneParser(strict=strict)
    for source in lines:
        yield from parser.feed(source)
    yield from parser.finish()
