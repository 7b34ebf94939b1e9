"""
Search — Run a pattern over source texts and materialize the results

Every call reads the sources afresh and returns a new, immutable
ResultView; nothing is cached between calls, so searching again after an
edit reflects exactly the edited text.

Each ResultEntry keeps its provenance (source id, 1-based line, 0-based
column) so a presenter can jump back to the matched location.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import EmptyPatternError, PatternCompileError, SourceUnavailableError
from .sources import InMemorySourceProvider, SourceTextProvider, TextLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultEntry:
    """One matching line."""
    source_id: str
    line_number: int
    column: int
    matched_text: str
    context_before: Tuple[str, ...] = ()
    context_after: Tuple[str, ...] = ()

    @property
    def provenance_line(self) -> int:
        return self.line_number

    def lines(self) -> List[Tuple[int, str]]:
        """(line number, text) for the match and its context."""
        first = self.line_number - len(self.context_before)
        texts = list(self.context_before) + [self.matched_text] + list(self.context_after)
        return [(first + offset, text) for offset, text in enumerate(texts)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source_id,
            "line": self.line_number,
            "column": self.column,
            "text": self.matched_text,
            "context_before": list(self.context_before),
            "context_after": list(self.context_after),
        }


@dataclass(frozen=True)
class SearchSummary:
    """Counts for one search."""
    match_count: int
    sources_searched: int
    skipped_sources: Tuple[str, ...] = ()

    @property
    def sources_skipped(self) -> int:
        return len(self.skipped_sources)

    @property
    def is_empty(self) -> bool:
        return self.match_count == 0

    def describe(self) -> str:
        """One-line summary for display."""
        noun = "match" if self.match_count == 1 else "matches"
        sources = "source" if self.sources_searched == 1 else "sources"
        text = f"{self.match_count} {noun} in {self.sources_searched} {sources}"
        if self.skipped_sources:
            text += f" ({self.sources_skipped} skipped)"
        return text


@dataclass(frozen=True)
class ResultView:
    """Materialized results of one search, in appearance order."""
    pattern: str
    entries: Tuple[ResultEntry, ...]
    summary: SearchSummary
    context_lines: int = 0
    source_ids: Tuple[str, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, index: int) -> ResultEntry:
        return self.entries[index]

    def entries_for(self, source_id: str) -> List[ResultEntry]:
        return [e for e in self.entries if e.source_id == source_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "context_lines": self.context_lines,
            "summary": {
                "matches": self.summary.match_count,
                "sources_searched": self.summary.sources_searched,
                "sources_skipped": list(self.summary.skipped_sources),
            },
            "entries": [e.to_dict() for e in self.entries],
        }


def compile_pattern(pattern: Optional[str]) -> "re.Pattern":
    """
    Compile a search pattern.

    Raises:
        EmptyPatternError: If pattern is None or ""
        PatternCompileError: If the regex is invalid
    """
    if not pattern:
        raise EmptyPatternError()
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternCompileError(pattern, str(e)) from e


def search(
    pattern: Optional[str],
    provider: SourceTextProvider,
    source_ids: Optional[Iterable[str]] = None,
    context_lines: int = 0,
) -> ResultView:
    """
    Search source texts line by line.

    Args:
        pattern: Regex string; "^" anchors at each line start
        provider: Where the texts come from
        source_ids: Sources to search (default: all the provider knows)
        context_lines: Lines of leading and trailing context per match

    Returns:
        ResultView (possibly empty)

    Raises:
        EmptyPatternError: Empty pattern; no source is read
        PatternCompileError: Invalid regex; no source is read
        ValueError: Negative context_lines
    """
    regex = compile_pattern(pattern)
    if context_lines < 0:
        raise ValueError(f"context_lines must be >= 0, got {context_lines}")

    ids = list(provider.source_ids() if source_ids is None else source_ids)
    entries: List[ResultEntry] = []
    skipped: List[str] = []
    searched = 0

    for source_id in ids:
        if not provider.is_live(source_id):
            logger.debug("Skipping disposed source %s", source_id)
            skipped.append(source_id)
            continue
        try:
            lines = provider.snapshot(source_id)
        except SourceUnavailableError as e:
            logger.debug("Skipping unavailable source: %s", e)
            skipped.append(source_id)
            continue

        searched += 1
        entries.extend(_scan_lines(regex, source_id, lines, context_lines))

    summary = SearchSummary(
        match_count=len(entries),
        sources_searched=searched,
        skipped_sources=tuple(skipped),
    )
    logger.debug("Search %r: %s", pattern, summary.describe())
    return ResultView(
        pattern=pattern,
        entries=tuple(entries),
        summary=summary,
        context_lines=context_lines,
        source_ids=tuple(ids),
    )


def search_texts(
    pattern: Optional[str],
    texts: Mapping[str, TextLike],
    context_lines: int = 0,
) -> ResultView:
    """Search in-memory texts keyed by id."""
    return search(pattern, InMemorySourceProvider(texts), context_lines=context_lines)


def _scan_lines(
    regex: "re.Pattern",
    source_id: str,
    lines: List[str],
    context_lines: int,
) -> List[ResultEntry]:
    entries = []
    for index, line in enumerate(lines):
        match = regex.search(line)
        if match is None:
            continue
        before = lines[max(0, index - context_lines):index] if context_lines else []
        after = lines[index + 1:index + 1 + context_lines] if context_lines else []
        entries.append(ResultEntry(
            source_id=source_id,
            line_number=index + 1,
            column=match.start(),
            matched_text=line,
            context_before=tuple(before),
            context_after=tuple(after),
        ))
    return entries
