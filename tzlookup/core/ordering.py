"""Insertion-ordered lookup table.

WHY: The table must be written in a stable total order over its
formatted lines. Historic versions of this tool produced their order
with a faulty insertion loop; byte-for-byte parity with those outputs
is occasionally needed, so that behaviour is kept behind a flag.

HOW: OrderedTable receives formatted lines one at a time. In the default
mode each line is placed with bisect.insort_right, so the table is
sorted after every insert. In legacy mode the historic loop is
reproduced exactly.

RULES:
- Default: lexicographic order over the formatted line; equal lines
  keep arrival order
- Legacy: the first line seeds the table; each later line is appended
  if it is greater than any line already present, otherwise discarded
- Both modes consume input in a single sequential pass
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Iterator


class OrderedTable:
    """A list of formatted lines kept ordered as they are inserted."""

    def __init__(self, legacy: bool = False) -> None:
        self.legacy = legacy
        self._lines: list[str] = []

    def insert(self, line: str) -> None:
        if self.legacy:
            _insert_legacy(self._lines, line)
        else:
            bisect.insort_right(self._lines, line)

    def extend(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.insert(line)

    def lines(self) -> list[str]:
        """Return a copy of the current table."""
        return list(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


def _insert_legacy(table: list[str], line: str) -> None:
    """Reproduce the historic insertion loop.

    The loop scans from the front and appends ``line`` at the end as
    soon as it finds any smaller element. A line that is smaller than or
    equal to every element already present is never placed.
    """
    if not table:
        table.append(line)
        return
    for existing in table:
        if line > existing:
            table.append(line)
            break


def order_lines(lines: Iterable[str], legacy: bool = False) -> list[str]:
    """Order ``lines`` in one pass and return the resulting table.

    >>> order_lines(["b", "a", "c"])
    ['a', 'b', 'c']
    >>> order_lines(["b", "a", "c"], legacy=True)
    ['b', 'c']
    """
    table = OrderedTable(legacy=legacy)
    table.extend(lines)
    return table.lines()
