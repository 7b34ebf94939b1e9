"""
Core — Pattern registry, outline levels and search

This package provides the engine behind every navigation view:
- PatternRegistry: per-language keywords, keys and patterns
- level_pattern: outline heading patterns for levels 1..8
- combine: merge patterns into one flat alternation
- search: run a pattern over source texts into a ResultView
- resolve_anchor: closest result entry at or before a line
- Navigator: request -> pattern -> view, in one call

Usage:
    from navi.core import PatternRegistry, Navigator, InMemorySourceProvider
    from navi.core.languages import register_builtins

    registry = PatternRegistry()
    register_builtins(registry)

    navigator = Navigator(registry, InMemorySourceProvider({"init.el": text}))
    outcome = navigator.press_key("emacs-lisp", "f")
"""

from .errors import (
    NaviError,
    LanguageNotRegistered,
    KeywordNotRegistered,
    KeyNotBound,
    InvalidLevel,
    EmptyPatternError,
    PatternCompileError,
    SourceUnavailableError,
    ProfileConfigError,
)
from .keywords import CoreKeyword, normalize_keyword
from .expressions import PatternExpr, Raw, Quoted, Concat, AnyOf, WordsOf, KeywordRef
from .profile import LanguageProfile, HeadingStyle, heading_table
from .registry import PatternRegistry, LookupResult, LookupStatus
from .outline import level_pattern, heading_depth
from .combinator import combine, split_alternatives
from .sources import SourceTextProvider, InMemorySourceProvider, FileSourceProvider
from .search import search, search_texts, ResultEntry, ResultView, SearchSummary
from .anchor import resolve_anchor, AnchorIndex
from .navigator import Navigator, NavigationRequest, NavigationOutcome, NavigationStatus
from .loader import load_profile_file, apply_profiles

__all__ = [
    # Errors
    'NaviError', 'LanguageNotRegistered', 'KeywordNotRegistered', 'KeyNotBound',
    'InvalidLevel', 'EmptyPatternError', 'PatternCompileError',
    'SourceUnavailableError', 'ProfileConfigError',
    # Registry
    'CoreKeyword', 'normalize_keyword',
    'PatternExpr', 'Raw', 'Quoted', 'Concat', 'AnyOf', 'WordsOf', 'KeywordRef',
    'LanguageProfile', 'HeadingStyle', 'heading_table',
    'PatternRegistry', 'LookupResult', 'LookupStatus',
    # Patterns
    'level_pattern', 'heading_depth', 'combine', 'split_alternatives',
    # Search
    'SourceTextProvider', 'InMemorySourceProvider', 'FileSourceProvider',
    'search', 'search_texts', 'ResultEntry', 'ResultView', 'SearchSummary',
    'resolve_anchor', 'AnchorIndex',
    # Navigation
    'Navigator', 'NavigationRequest', 'NavigationOutcome', 'NavigationStatus',
    'load_profile_file', 'apply_profiles',
]
