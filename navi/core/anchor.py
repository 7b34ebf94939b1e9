"""
Anchor resolution — Find the result entry closest to a source line

After the source is searched again (say, following an edit) the cursor
has to land somewhere sensible in the new results: on the entry with the
greatest provenance line that is still at or before the line the user
was on. Results are a sparse sample of the source, so an exact hit is
the exception, not the rule.

    lines in view: 3, 10, 42
    target 1  -> entry@3   (before everything: first entry)
    target 11 -> entry@10
    target 99 -> entry@42
"""

import bisect
from typing import List, Optional, Sequence

from .search import ResultEntry, ResultView


class AnchorIndex:
    """Line-sorted index over result entries, searched with bisect."""

    def __init__(self, entries: Sequence[ResultEntry]):
        self._entries = list(entries)
        # Stable sort keeps appearance order among equal lines
        order = sorted(range(len(self._entries)), key=lambda i: self._entries[i].provenance_line)
        self._sorted: List[ResultEntry] = [self._entries[i] for i in order]
        self._lines: List[int] = [e.provenance_line for e in self._sorted]

    def resolve(self, target_line: int) -> Optional[ResultEntry]:
        """
        Entry with the greatest provenance line <= target_line.

        Returns the first entry (appearance order) when target_line is
        before every entry, and None when the index is empty.
        """
        if not self._entries:
            return None
        position = bisect.bisect_right(self._lines, target_line)
        if position == 0:
            return self._entries[0]
        return self._sorted[position - 1]

    def __len__(self) -> int:
        return len(self._entries)


def resolve_anchor(
    view: ResultView,
    target_line: int,
    source_id: Optional[str] = None,
) -> Optional[ResultEntry]:
    """
    Resolve a source line to the closest entry at or before it.

    Args:
        view: Result view to search
        target_line: 1-based line in the source
        source_id: Restrict to entries of one source (needed when the view
            spans several sources, since their line numbers interleave)

    Returns:
        The anchored entry, or None for an empty view / unknown source
    """
    entries = view.entries if source_id is None else view.entries_for(source_id)
    return AnchorIndex(entries).resolve(target_line)
