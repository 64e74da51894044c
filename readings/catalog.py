# readings/catalog.py
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional


class CatalogEntry(NamedTuple):
    name: str
    chapters: int


class Catalog:
    """
    Ordered, read-only list of books.
    The position of a book in the list is its sort order everywhere else.
    Lookups by unknown name return None / 0 instead of raising.
    """

    def __init__(self, entries: Iterable[CatalogEntry | tuple]):
        self._entries: List[CatalogEntry] = []
        self._index: Dict[str, int] = {}
        for raw in entries:
            entry = CatalogEntry(*raw)
            if entry.name in self._index:
                raise ValueError(f"duplicate book in catalog: {entry.name}")
            if entry.chapters < 1:
                raise ValueError(f"{entry.name} must have at least one chapter")
            self._index[entry.name] = len(self._entries)
            self._entries.append(entry)

    def get(self, name: str) -> Optional[CatalogEntry]:
        pos = self._index.get(name)
        return None if pos is None else self._entries[pos]

    def position(self, name: str) -> Optional[int]:
        return self._index.get(name)

    def chapter_count(self, name: str) -> int:
        entry = self.get(name)
        return entry.chapters if entry else 0

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


BIBLE_BOOKS = (
    # Old Testament
    ("Genesis", 50),
    ("Exodus", 40),
    ("Leviticus", 27),
    ("Numbers", 36),
    ("Deuteronomy", 34),
    ("Joshua", 24),
    ("Judges", 21),
    ("Ruth", 4),
    ("1 Samuel", 31),
    ("2 Samuel", 24),
    ("1 Kings", 22),
    ("2 Kings", 25),
    ("1 Chronicles", 29),
    ("2 Chronicles", 36),
    ("Ezra", 10),
    ("Nehemiah", 13),
    ("Esther", 10),
    ("Job", 42),
    ("Psalms", 150),
    ("Proverbs", 31),
    ("Ecclesiastes", 12),
    ("Song of Solomon", 8),
    ("Isaiah", 66),
    ("Jeremiah", 52),
    ("Lamentations", 5),
    ("Ezekiel", 48),
    ("Daniel", 12),
    ("Hosea", 14),
    ("Joel", 3),
    ("Amos", 9),
    ("Obadiah", 1),
    ("Jonah", 4),
    ("Micah", 7),
    ("Nahum", 3),
    ("Habakkuk", 3),
    ("Zephaniah", 3),
    ("Haggai", 2),
    ("Zechariah", 14),
    ("Malachi", 4),
    # New Testament
    ("Matthew", 28),
    ("Mark", 16),
    ("Luke", 24),
    ("John", 21),
    ("Acts", 28),
    ("Romans", 16),
    ("1 Corinthians", 16),
    ("2 Corinthians", 13),
    ("Galatians", 6),
    ("Ephesians", 6),
    ("Philippians", 4),
    ("Colossians", 4),
    ("1 Thessalonians", 5),
    ("2 Thessalonians", 3),
    ("1 Timothy", 6),
    ("2 Timothy", 4),
    ("Titus", 3),
    ("Philemon", 1),
    ("Hebrews", 13),
    ("James", 5),
    ("1 Peter", 5),
    ("2 Peter", 3),
    ("1 John", 5),
    ("2 John", 1),
    ("3 John", 1),
    ("Jude", 1),
    ("Revelation", 22),
)

CATALOG = Catalog(BIBLE_BOOKS)
