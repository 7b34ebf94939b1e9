"""
navi — Outline navigation by keyword and heading level

Per-language registries of keywords ("functions", "variables", ...),
single-key bindings and search patterns, plus outline heading patterns
for levels 1..8. A navigation request becomes one combined pattern,
searched over source texts into a result view that remembers where every
line came from.

Usage:
    navi search init.el --key f
    navi search init.el --level 2 --keyword FUN
    navi search notes.org --level 3 --exclusive
    navi keys --lang emacs-lisp
    navi languages
    navi config search.context_lines 2
"""

__version__ = "0.1.0"

# Core layer
from .core.errors import (
    NaviError, LanguageNotRegistered, KeywordNotRegistered, KeyNotBound,
    InvalidLevel, EmptyPatternError, PatternCompileError,
)
from .core.keywords import CoreKeyword
from .core.profile import LanguageProfile, HeadingStyle
from .core.registry import PatternRegistry, LookupResult, LookupStatus
from .core.outline import level_pattern
from .core.combinator import combine
from .core.sources import InMemorySourceProvider, FileSourceProvider
from .core.search import search, search_texts, ResultEntry, ResultView
from .core.anchor import resolve_anchor
from .core.navigator import Navigator, NavigationRequest, NavigationOutcome, NavigationStatus
from .core.languages import register_builtins

# Config (stays at root)
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'NaviError', 'LanguageNotRegistered', 'KeywordNotRegistered', 'KeyNotBound',
    'InvalidLevel', 'EmptyPatternError', 'PatternCompileError',
    'CoreKeyword', 'LanguageProfile', 'HeadingStyle',
    'PatternRegistry', 'LookupResult', 'LookupStatus',
    'level_pattern', 'combine',
    'InMemorySourceProvider', 'FileSourceProvider',
    'search', 'search_texts', 'ResultEntry', 'ResultView',
    'resolve_anchor',
    'Navigator', 'NavigationRequest', 'NavigationOutcome', 'NavigationStatus',
    'register_builtins',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
