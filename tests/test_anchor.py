"""
Tests for line-provenance anchor resolution.
"""

import pytest

from navi.core.anchor import AnchorIndex, resolve_anchor
from navi.core.search import ResultEntry, ResultView, SearchSummary, search_texts


def make_view(*positions):
    """View over (source_id, line) pairs, in the given order."""
    entries = tuple(
        ResultEntry(source_id=source, line_number=line, column=0, matched_text=f"{source}:{line}")
        for source, line in positions
    )
    summary = SearchSummary(match_count=len(entries), sources_searched=1)
    return ResultView(pattern="x", entries=entries, summary=summary)


@pytest.fixture
def view():
    return make_view(("s", 3), ("s", 10), ("s", 42))


@pytest.mark.parametrize("target,expected", [
    (1, 3),
    (3, 3),
    (9, 3),
    (10, 10),
    (11, 10),
    (41, 10),
    (42, 42),
    (99, 42),
])
def test_greatest_line_at_or_before(view, target, expected):
    assert resolve_anchor(view, target).line_number == expected


def test_before_everything_gives_first_entry(view):
    assert resolve_anchor(view, 0) is view[0]


def test_empty_view_gives_none():
    assert resolve_anchor(make_view(), 10) is None


def test_restricted_to_source():
    view = make_view(("a", 5), ("b", 8), ("a", 20))

    assert resolve_anchor(view, 9).source_id == "b"
    assert resolve_anchor(view, 9, source_id="a").line_number == 5
    assert resolve_anchor(view, 9, source_id="missing") is None


def test_equal_lines_resolve_to_later_entry():
    view = make_view(("s", 4), ("s", 4))
    assert resolve_anchor(view, 4) is view[1]


def test_unsorted_entries():
    index = AnchorIndex(make_view(("s", 30), ("s", 10), ("s", 20)).entries)

    assert index.resolve(25).line_number == 20
    assert index.resolve(5).line_number == 30
    assert len(index) == 3


def test_on_real_search():
    text = "\n".join("(defun f)" if n in (3, 10, 42) else "" for n in range(1, 50))
    view = search_texts(r"^\(defun", {"t": text})

    assert [e.line_number for e in view] == [3, 10, 42]
    assert resolve_anchor(view, 11).line_number == 10
