"""Dataclasses passed between the extractor, parser, and sorter.

WHY: The stages hand each other lines and zone records. Typed containers
keep the region/line origin attached to each line (for error messages)
and make the record's rendered form a single, tested method.

HOW: Four dataclasses:
  SourceLine — one raw line plus the region file and line number it came from
  Offset     — the verbatim hours/minutes halves of an ``H:MM`` offset
  ZoneRecord — a closed zone block: name plus offset
  ZoneBlock  — the parser's mutable "current zone" accumulator

RULES:
- Offset fields are strings, copied verbatim (sign and padding kept)
- ZoneRecord.zone_name is never empty
- ZoneBlock is mutated in place; exactly one exists per parser
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLine:
    """A raw line from an allowed region file.

    RULES:
    - line_number is 1-based within the region file
    - text has its line terminator stripped but is otherwise untouched
    """

    region: str
    line_number: int
    text: str


@dataclass(frozen=True)
class Offset:
    """A UTC offset split into its display halves, e.g. ``-5`` and ``45``."""

    hours: str
    minutes: str

    def display(self) -> str:
        return "{} {}".format(self.hours, self.minutes)


@dataclass(frozen=True)
class ZoneRecord:
    """One emitted lookup-table entry.

    WHY: The table line format is fixed and must be produced identically
    wherever a record is rendered.

    RULES:
    - format() returns ``"<zone_name>\\t<hours> <minutes>"``
    - zone_name may itself contain a tab (see ZoneParser)
    """

    zone_name: str
    offset: Offset

    def format(self) -> str:
        return "{}\t{}".format(self.zone_name, self.offset.display())


@dataclass
class ZoneBlock:
    """The parser's in-progress zone: a name and the last offset text seen.

    RULES:
    - A block is closable only when both fields are non-empty
    - offset_source remembers where offset_text came from, for errors
    """

    zone_name: str = ""
    offset_text: str = ""
    offset_source: SourceLine | None = None

    def start(self, zone_name: str) -> None:
        self.zone_name = zone_name
        self.offset_text = ""
        self.offset_source = None

    def capture(self, offset_text: str, source: SourceLine) -> None:
        self.offset_text = offset_text
        self.offset_source = source

    @property
    def closable(self) -> bool:
        return bool(self.zone_name) and bool(self.offset_text)
