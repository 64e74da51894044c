# readings/selection.py
from __future__ import annotations

from typing import Iterable, Optional, Set

from .catalog import CATALOG, Catalog


class ChapterSelection:
    """
    Chapter picker state for one book.

    - First pick with no anchor: select it and make it the anchor.
    - Next pick on a different chapter: select the inclusive range
      anchor..pick minus completed chapters, then drop the anchor.
    - Picking a selected chapter deselects it and drops the anchor.
    - Completed chapters (and numbers outside the book) are never selectable.
    """

    def __init__(self, book_name: str, completed: Iterable[int] = (), catalog: Catalog = CATALOG):
        self.catalog = catalog
        self.reset(book_name, completed)

    def reset(self, book_name: str, completed: Iterable[int] = ()) -> None:
        """Switch to another book: selection and anchor start over."""
        self.book_name = book_name
        self.chapters = self.catalog.chapter_count(book_name)
        self.completed: frozenset = frozenset(completed)
        self.selected: Set[int] = set()
        self.anchor: Optional[int] = None

    def is_selectable(self, chapter: int) -> bool:
        return 1 <= chapter <= self.chapters and chapter not in self.completed

    def pick(self, chapter: int) -> Set[int]:
        if not self.is_selectable(chapter):
            return set(self.selected)

        if chapter in self.selected:
            self.selected.discard(chapter)
            self.anchor = None
        elif self.anchor is None:
            self.selected.add(chapter)
            self.anchor = chapter
        else:
            lo, hi = sorted((self.anchor, chapter))
            self.selected |= {c for c in range(lo, hi + 1) if c not in self.completed}
            self.anchor = None
        return set(self.selected)

    def clear(self) -> None:
        self.selected.clear()
        self.anchor = None
