# readings/tests/test_selection.py
from readings.selection import ChapterSelection


def test_range_pick_skips_completed_chapters():
    sel = ChapterSelection("Genesis", completed={5})
    assert sel.pick(3) == {3}
    assert sel.anchor == 3
    assert sel.pick(7) == {3, 4, 6, 7}
    assert sel.anchor is None


def test_range_works_backwards_and_unions():
    sel = ChapterSelection("Genesis")
    sel.pick(10)
    sel.pick(8)
    assert sel.selected == {8, 9, 10}
    # next pick starts a new anchor; range overlaps existing selection
    sel.pick(12)
    assert sel.anchor == 12
    sel.pick(6)
    assert sel.selected == {6, 7, 8, 9, 10, 11, 12}


def test_deselect_removes_and_breaks_range_mode():
    sel = ChapterSelection("Genesis")
    sel.pick(2)
    assert sel.pick(2) == set()
    assert sel.anchor is None
    sel.pick(4)
    sel.pick(6)
    assert sel.selected == {4, 5, 6}
    sel.pick(1)
    assert sel.anchor == 1
    sel.pick(5)
    assert sel.selected == {4, 6, 1}
    assert sel.anchor is None


def test_completed_and_out_of_range_chapters_are_not_selectable():
    sel = ChapterSelection("Ruth", completed={2})   # Ruth has 4 chapters
    assert sel.pick(2) == set()
    assert sel.anchor is None
    assert sel.pick(0) == set()
    assert sel.pick(5) == set()
    sel.pick(1)
    # a completed chapter is never a range endpoint
    sel.pick(2)
    assert sel.anchor == 1
    assert sel.selected == {1}


def test_reset_on_book_change_and_clear():
    sel = ChapterSelection("Genesis")
    sel.pick(1)
    sel.reset("Exodus", completed={1})
    assert sel.book_name == "Exodus"
    assert sel.selected == set()
    assert sel.anchor is None
    assert not sel.is_selectable(1)
    sel.pick(3)
    sel.clear()
    assert sel.selected == set()
    assert sel.anchor is None
