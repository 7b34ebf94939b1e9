"""
Navigator — From a navigation request to a result view

Ties the pieces together:

    request (level, keyword, key)
      -> registry resolves the keyword pattern
      -> outline generator builds the level pattern
      -> combinator merges both
      -> search runs over the sources
      -> NavigationOutcome (status + view)

Resolution failures ("key q not defined for org") come back as an
outcome with a message and never start a search. A bad level is a
contract violation and raises InvalidLevel.

Usage:
    navigator = Navigator(registry, InMemorySourceProvider({"init.el": text}))
    outcome = navigator.press_key("emacs-lisp", "f")
    for entry in outcome.view:
        print(entry.line_number, entry.matched_text)

    # after the text changed, keep the cursor near line 120
    outcome, entry = navigator.refresh(outcome, anchor_line=120)
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

from .anchor import resolve_anchor
from .combinator import combine
from .errors import PatternCompileError
from .keywords import CoreKeyword, KeywordLike
from .outline import validate_level
from .registry import LookupResult, LookupStatus, PatternRegistry, RESERVED_LEVEL_KEYS
from .search import ResultEntry, ResultView, compile_pattern, search
from .sources import SourceTextProvider

logger = logging.getLogger(__name__)


class NavigationStatus(Enum):
    """Navigation outcome."""
    OK = "ok"
    NO_MATCHES = "no_matches"
    EMPTY_REQUEST = "empty_request"
    LANGUAGE_NOT_REGISTERED = "language_not_registered"
    KEYWORD_NOT_REGISTERED = "keyword_not_registered"
    KEY_NOT_BOUND = "key_not_bound"
    PATTERN_ERROR = "pattern_error"


_LOOKUP_TO_NAVIGATION = {
    LookupStatus.LANGUAGE_NOT_REGISTERED: NavigationStatus.LANGUAGE_NOT_REGISTERED,
    LookupStatus.KEYWORD_NOT_REGISTERED: NavigationStatus.KEYWORD_NOT_REGISTERED,
    LookupStatus.KEY_NOT_BOUND: NavigationStatus.KEY_NOT_BOUND,
    LookupStatus.PATTERN_ERROR: NavigationStatus.PATTERN_ERROR,
}


@dataclass(frozen=True)
class NavigationRequest:
    """
    What to show.

    Attributes:
        language: Profile name
        level: Show headings up to this level (1..8)
        keyword: Show lines matching this keyword's pattern
        key: Key pressed; digits select a level, others a keyword
        exclusive: Headings at exactly `level` only
        context_lines: Context per match (None: navigator default)
    """
    language: str
    level: Optional[int] = None
    keyword: Optional[str] = None
    key: Optional[str] = None
    exclusive: bool = False
    context_lines: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.level is None and self.keyword is None and self.key is None


@dataclass
class NavigationOutcome:
    """Result of a navigation request."""
    status: NavigationStatus
    request: NavigationRequest
    view: Optional[ResultView] = None
    pattern: Optional[str] = None
    message: str = ""
    source_ids: Optional[Tuple[str, ...]] = None

    @property
    def ok(self) -> bool:
        """A search ran (possibly with zero matches)."""
        return self.status in (NavigationStatus.OK, NavigationStatus.NO_MATCHES)


class Navigator:
    """
    Runs navigation requests against a registry and a source provider.

    Holds no results of its own: every call searches afresh.
    """

    def __init__(
        self,
        registry: PatternRegistry,
        provider: SourceTextProvider,
        default_context_lines: int = 0,
    ):
        if default_context_lines < 0:
            raise ValueError("default_context_lines must be >= 0")
        self.registry = registry
        self.provider = provider
        self.default_context_lines = default_context_lines

    def navigate(
        self,
        request: NavigationRequest,
        source_ids: Optional[Iterable[str]] = None,
    ) -> NavigationOutcome:
        """
        Resolve a request to a pattern and search with it.

        Raises:
            InvalidLevel: If the request (or a digit key) names a level
                outside 1..8
        """
        ids = tuple(source_ids) if source_ids is not None else None

        if request.is_empty:
            return NavigationOutcome(
                status=NavigationStatus.EMPTY_REQUEST,
                request=request,
                message="nothing to show: give a level, a keyword or a key",
                source_ids=ids,
            )

        level = request.level
        keyword = request.keyword
        if request.key is not None:
            if request.key in RESERVED_LEVEL_KEYS:
                level = int(request.key)
            else:
                reverse = self.registry.reverse_lookup_keyword(request.language, request.key)
                if not reverse.found:
                    return self._miss(request, reverse, ids)
                keyword = reverse.keyword

        level_regex = None
        if level is not None:
            validate_level(level)
            result = self.registry.level_pattern(request.language, level, request.exclusive)
            if not result.found:
                return self._miss(request, result, ids)
            level_regex = result.pattern

        keyword_regex = None
        if keyword is not None:
            result = self.registry.lookup(request.language, keyword)
            if not result.found:
                return self._miss(request, result, ids)
            keyword_regex = result.pattern

        pattern = combine(level_regex, keyword_regex)
        try:
            compile_pattern(pattern)
        except PatternCompileError as e:
            logger.debug("Combined pattern for %s failed: %s", request, e)
            return NavigationOutcome(
                status=NavigationStatus.PATTERN_ERROR,
                request=request,
                pattern=pattern,
                message=str(e),
                source_ids=ids,
            )

        context = request.context_lines
        if context is None:
            context = self.default_context_lines

        view = search(pattern, self.provider, ids, context_lines=context)
        status = NavigationStatus.NO_MATCHES if view.summary.is_empty else NavigationStatus.OK
        return NavigationOutcome(
            status=status,
            request=request,
            view=view,
            pattern=pattern,
            message=view.summary.describe(),
            source_ids=ids,
        )

    def show_headers(self, language: str, level: int, exclusive: bool = False,
                     source_ids: Optional[Iterable[str]] = None,
                     context_lines: Optional[int] = None) -> NavigationOutcome:
        """Headings up to (or exactly at) a level."""
        request = NavigationRequest(
            language=language, level=level, exclusive=exclusive, context_lines=context_lines
        )
        return self.navigate(request, source_ids)

    def show_keyword(self, language: str, keyword: KeywordLike,
                     source_ids: Optional[Iterable[str]] = None,
                     context_lines: Optional[int] = None) -> NavigationOutcome:
        """Lines matching a keyword's pattern."""
        request = NavigationRequest(
            language=language, keyword=_keyword_name(keyword), context_lines=context_lines
        )
        return self.navigate(request, source_ids)

    def show_headers_and_keyword(self, language: str, level: int, keyword: KeywordLike,
                                 exclusive: bool = False,
                                 source_ids: Optional[Iterable[str]] = None,
                                 context_lines: Optional[int] = None) -> NavigationOutcome:
        """Headings and keyword matches in one view."""
        request = NavigationRequest(
            language=language,
            level=level,
            keyword=_keyword_name(keyword),
            exclusive=exclusive,
            context_lines=context_lines,
        )
        return self.navigate(request, source_ids)

    def press_key(self, language: str, key: str, exclusive: bool = False,
                  source_ids: Optional[Iterable[str]] = None,
                  context_lines: Optional[int] = None) -> NavigationOutcome:
        """Dispatch a single key: "1".."8" show headings, others keywords."""
        request = NavigationRequest(
            language=language, key=key, exclusive=exclusive, context_lines=context_lines
        )
        return self.navigate(request, source_ids)

    def refresh(
        self,
        outcome: NavigationOutcome,
        anchor_line: Optional[int] = None,
        source_id: Optional[str] = None,
    ) -> Tuple[NavigationOutcome, Optional[ResultEntry]]:
        """
        Re-run a previous request against the current source text.

        The old view is discarded, not merged. With anchor_line, the entry
        of the new view closest at or before that line is returned too.

        Returns:
            (new outcome, anchored entry or None)
        """
        request = outcome.request
        if request.context_lines is None and outcome.view is not None:
            request = replace(request, context_lines=outcome.view.context_lines)
        fresh = self.navigate(request, outcome.source_ids)

        entry = None
        if anchor_line is not None and fresh.view is not None:
            entry = resolve_anchor(fresh.view, anchor_line, source_id)
        return fresh, entry

    def _miss(self, request: NavigationRequest, result: LookupResult,
              ids: Optional[Tuple[str, ...]]) -> NavigationOutcome:
        logger.debug("Navigation miss for %s: %s", request, result.message)
        return NavigationOutcome(
            status=_LOOKUP_TO_NAVIGATION[result.status],
            request=request,
            message=result.message,
            source_ids=ids,
        )


def _keyword_name(keyword: KeywordLike) -> str:
    # Left unnormalized; the registry reports bad names as a miss
    if isinstance(keyword, CoreKeyword):
        return keyword.value
    return keyword
