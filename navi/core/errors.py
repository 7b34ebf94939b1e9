"""
Errors — Typed failures for pattern resolution and search

Every failure is recoverable: the registry and navigator return them inside
result objects, and only contract violations (bad level, empty pattern
handed straight to search) are raised at the call site.

Each error renders a message suitable for showing to a user as-is.
"""

from typing import Optional


class NaviError(Exception):
    """Base class for all navi errors."""


class LanguageNotRegistered(NaviError, LookupError):
    """No profile is registered for the language."""

    def __init__(self, language: str):
        self.language = language
        super().__init__(f"language '{language}' is not registered")


class KeywordNotRegistered(NaviError, LookupError):
    """The language has no pattern for the keyword."""

    def __init__(self, language: str, keyword: str):
        self.language = language
        self.keyword = keyword
        super().__init__(f"keyword '{keyword}' not defined for {language}")


class KeyNotBound(NaviError, LookupError):
    """No keyword of the language is bound to the key."""

    def __init__(self, language: str, key: str):
        self.language = language
        self.key = key
        super().__init__(f"key '{key}' not defined for {language}")


class InvalidLevel(NaviError, ValueError):
    """Outline level outside 1..8, or missing from a heading table."""

    def __init__(self, level, reason: Optional[str] = None):
        self.level = level
        super().__init__(reason or f"outline level must be an integer in 1..8, got {level!r}")


class EmptyPatternError(NaviError, ValueError):
    """A search was requested with an empty or absent pattern."""

    def __init__(self, message: str = "search pattern is empty"):
        super().__init__(message)


class PatternCompileError(NaviError, ValueError):
    """A stored pattern or expression failed to evaluate or compile."""

    def __init__(self, pattern: Optional[str], reason: str, keyword: Optional[str] = None):
        self.pattern = pattern
        self.reason = reason
        self.keyword = keyword
        where = f" for keyword '{keyword}'" if keyword else ""
        super().__init__(f"invalid pattern{where}: {reason}")


class SourceUnavailableError(NaviError):
    """A source text vanished or became unreadable during a search."""

    def __init__(self, source_id: str, reason: str = "source is no longer available"):
        self.source_id = source_id
        super().__init__(f"{source_id}: {reason}")


class ProfileConfigError(NaviError, ValueError):
    """A profile document is malformed."""
