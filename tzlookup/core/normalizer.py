"""Offset text normalization: ``H:MM`` → ``H MM``.

WHY: The lookup table stores offsets as two space-separated fields so
consumers can split them without knowing the tzdata colon syntax.

HOW: Split on ":" and re-join with a single space. No numeric
validation, no padding changes, sign kept exactly as written.

RULES:
- Exactly two colon-separated fields are required
- Anything else (``"0"``, ``"-0:25:21"``, ``"Link"``) is an OffsetFormatError
"""

from __future__ import annotations

from tzlookup.core.models import Offset


class OffsetFormatError(ValueError):
    """Raised when offset text is not of the form ``hours:minutes``."""

    def __init__(self, offset_text: str) -> None:
        self.offset_text = offset_text
        super().__init__(
            "expected offset as hours:minutes, got {!r}".format(offset_text)
        )


def parse_offset(offset_text: str) -> Offset:
    """Split ``"-5:45"`` into ``Offset(hours="-5", minutes="45")``."""
    fields = offset_text.split(":")
    if len(fields) != 2:
        raise OffsetFormatError(offset_text)
    return Offset(hours=fields[0], minutes=fields[1])


def format_offset(offset_text: str) -> str:
    """Convert ``"10:00"`` to ``"10 00"`` and ``"-5:45"`` to ``"-5 45"``."""
    return parse_offset(offset_text).display()
