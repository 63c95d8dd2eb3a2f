"""
Corpus Models — Documentation files after ignore-region filtering.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from agentcheck.core.location import Location, line_of
from agentcheck.corpus.filter import IgnoreRegion


@dataclass(frozen=True)
class DocumentFile:
    """
    One documentation file.

    `path` is relative to the corpus root, POSIX separators.
    `filtered_content` never contains text from inside an ignore region.
    """
    path: str
    raw_content: str
    filtered_content: str
    regions: tuple[IgnoreRegion, ...] = ()

    def raw_offset(self, filtered_offset: int) -> int:
        """Map an offset in filtered_content back to raw_content."""
        offset = filtered_offset
        for region in self.regions:
            if region.start > offset:
                break
            kept = len(region.separator)
            if offset < region.start + kept:
                # Inside the separator left by the region
                return region.start
            offset += region.length - kept
        return offset

    def raw_line(self, filtered_offset: int) -> int:
        """Line in the original file for an offset in filtered_content."""
        return line_of(self.raw_content, self.raw_offset(filtered_offset))

    def search(self, pattern: re.Pattern) -> Iterator[Location]:
        for m in pattern.finditer(self.filtered_content):
            yield Location(self.path, self.raw_line(m.start()), m.group(0))


@dataclass(frozen=True)
class DocumentCorpus:
    """Ordered, immutable set of DocumentFiles (discovery order)."""
    root: str
    files: tuple[DocumentFile, ...] = ()

    def __iter__(self) -> Iterator[DocumentFile]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    def get(self, path: str) -> Optional[DocumentFile]:
        for doc in self.files:
            if doc.path == path:
                return doc
        return None

    def search(self, pattern: re.Pattern) -> Iterator[Location]:
        """All matches of pattern in filtered content, file by file."""
        for doc in self.files:
            yield from doc.search(pattern)

    def first_match(self, pattern: re.Pattern) -> Optional[Location]:
        return next(self.search(pattern), None)
