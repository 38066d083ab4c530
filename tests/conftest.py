"""Shared test fixtures for the tzlookup test suite.

WHY: Extractor, pipeline, and CLI tests all need small gzip-compressed
tar archives with known region files. Building them in memory keeps the
tests fast and independent of any real tzdata release.

HOW: make_archive() writes (name, text) pairs into a tar.gz held in a
BytesIO. Fixtures expose a two-region sample archive and its lines.

RULES:
- Archives are built fresh for every test (no shared mutable state)
- Entry order in the archive is the order the pairs are given
"""

import io
import tarfile
from typing import List, Optional, Tuple, Union

import pytest

from tzlookup.core.models import SourceLine


AFRICA_TEXT = """\
# Zone\tNAME\t\tSTDOFF\tRULES\tFORMAT\t[UNTIL]
Zone\tAfrica/Abidjan\t-0:16:08 -\tLMT\t1912
\t\t\t 0:00\t-\tGMT
"""

EUROPE_TEXT = """\
Rule\tEU\t1981\tmax\t-\tMar\tlastSun\t 1:00u\t1:00\tS
Zone\tEurope/Berlin\t0:53:28 -\tLMT\t1893 Apr
\t\t\t1:00\tC-Eur\tCE%sT\t1945 May 24  2:00
\t\t\t1:00\tEU\tCE%sT
"""


def make_archive(
    entries: List[Tuple[str, Union[str, bytes]]],
    directories: Optional[List[str]] = None,
) -> bytes:
    """Build a gzip-compressed tar archive from (name, text) pairs.

    Text may be given as bytes to embed content that is not valid UTF-8.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name in directories or []:
            info = tarfile.TarInfo(name)
            info.type = tarfile.DIRTYPE
            tar.addfile(info)
        for name, text in entries:
            data = text if isinstance(text, bytes) else text.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def lines_of(region: str, *texts: str) -> List[SourceLine]:
    """Wrap raw strings as SourceLine objects numbered from 1."""
    return [
        SourceLine(region=region, line_number=i, text=text)
        for i, text in enumerate(texts, start=1)
    ]


@pytest.fixture
def sample_archive():
    """Two region files plus one entry that must be ignored."""
    return make_archive([
        ("africa", AFRICA_TEXT),
        ("notes.txt", "Zone\tNot/Real\t9:00\n\t9:00\t-\tXXX\n"),
        ("europe", EUROPE_TEXT),
    ])
