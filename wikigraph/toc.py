"""
Table of contents model and heading anchor generation.
"""
import re
from dataclasses import dataclass
from typing import Set, Tuple


@dataclass(frozen=True)
class TocEntry:
    level: int
    text: str
    anchor: str


@dataclass(frozen=True)
class Toc:
    """Ordered headings of a single page."""
    entries: Tuple[TocEntry, ...] = ()

    def is_trivial(self) -> bool:
        """A TOC with fewer than two headings carries no navigational value."""
        return len(self.entries) < 2

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


class AnchorGenerator:
    """
    Produces unique, URL-safe anchors for the headings of one page.

    Examples:
        >>> anchors = AnchorGenerator()
        >>> anchors.anchor_for("Quick Sort")
        'quick-sort'
        >>> anchors.anchor_for("Quick sort")
        'quick-sort-1'
    """

    def __init__(self, fallback: str = "section"):
        self.fallback = fallback
        self._issued: Set[str] = set()

    def anchor_for(self, text: str) -> str:
        slug = slugify(text) or self.fallback
        anchor = slug
        suffix = 0
        # a suffixed anchor may equal the plain slug of another heading
        while anchor in self._issued:
            suffix += 1
            anchor = f"{slug}-{suffix}"
        self._issued.add(anchor)
        return anchor


def slugify(text: str) -> str:
    # Keep unicode letters so non-English headings stay readable
    slug = re.sub(r'[^\w\s-]', '', text.lower()).strip()
    slug = re.sub(r'[\s_]+', '-', slug)
    return re.sub(r'-{2,}', '-', slug).strip('-')
