"""
Pattern Registry — Per-language keywords, key bindings and patterns

Central registry mapping language names to LanguageProfile instances.
Resolves keywords and keys to ready-to-use regex strings and reports
every miss as a typed outcome instead of raising.

Usage:
    registry = PatternRegistry()
    registry.register("emacs-lisp", "FUN", "f", r"^\\s*\\(defun ")

    result = registry.lookup("emacs-lisp", "FUN")
    if result.found:
        regex = result.compiled

    registry.lookup("cobol", "FUN").status
    # LookupStatus.LANGUAGE_NOT_REGISTERED
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from .errors import (
    InvalidLevel,
    KeyNotBound,
    KeywordNotRegistered,
    LanguageNotRegistered,
    NaviError,
    PatternCompileError,
)
from .expressions import PatternExpr, PatternSource, evaluate
from .keywords import KeywordLike, normalize_keyword
from .outline import MAX_LEVEL, MIN_LEVEL, level_pattern, validate_level
from .profile import LanguageProfile

logger = logging.getLogger(__name__)

# Keys "1".."8" select outline levels and can't be bound to keywords
RESERVED_LEVEL_KEYS = frozenset(str(n) for n in range(MIN_LEVEL, MAX_LEVEL + 1))


class LookupStatus(Enum):
    """Lookup outcome."""
    FOUND = "found"
    LANGUAGE_NOT_REGISTERED = "language_not_registered"
    KEYWORD_NOT_REGISTERED = "keyword_not_registered"
    KEY_NOT_BOUND = "key_not_bound"
    PATTERN_ERROR = "pattern_error"


@dataclass
class LookupResult:
    """Result of a registry lookup."""
    status: LookupStatus
    language: str
    keyword: Optional[str] = None
    binding: Optional[str] = None
    pattern: Optional[str] = None
    error: Optional[NaviError] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def message(self) -> str:
        """User-facing description of a miss ("" when found)."""
        return str(self.error) if self.error else ""

    @property
    def compiled(self) -> Optional["re.Pattern"]:
        """Compiled pattern (None unless found with a pattern)."""
        if self.pattern is None:
            return None
        return re.compile(self.pattern)

    def unwrap(self) -> str:
        """
        Return the pattern or raise the recorded error.

        Raises:
            NaviError: The typed error behind a miss
        """
        if self.error is not None:
            raise self.error
        if self.pattern is None:
            raise KeywordNotRegistered(self.language, self.keyword or "")
        return self.pattern


class PatternRegistry:
    """
    Registry of language profiles.

    Owned by the caller and passed where needed; there is no global
    instance. Lookups never mutate the registry.
    """

    def __init__(self, profiles: Optional[Iterable[LanguageProfile]] = None):
        """Initialize registry, optionally with profiles."""
        self._profiles: Dict[str, LanguageProfile] = {}  # name -> profile
        self._extension_map: Dict[str, str] = {}  # ext -> profile name
        for profile in profiles or ():
            self.add_profile(profile)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add_profile(self, profile: LanguageProfile) -> None:
        """
        Register a whole language profile, replacing one of the same name.

        Raises:
            ValueError: If an extension is already registered to another
                profile, or a binding is invalid
        """
        for ext in profile.extensions:
            existing = self._extension_map.get(ext)
            if existing and existing != profile.name:
                raise ValueError(
                    f"Extension {ext} already registered to {existing}, "
                    f"cannot register to {profile.name}"
                )

        seen: Dict[str, str] = {}
        for keyword, binding in profile.key_bindings.items():
            _check_binding(binding)
            if binding in seen:
                raise ValueError(
                    f"Key '{binding}' bound to both '{seen[binding]}' and "
                    f"'{keyword}' in {profile.name}"
                )
            seen[binding] = keyword

        if profile.name in self._profiles:
            self._drop_extensions(profile.name)

        self._profiles[profile.name] = profile
        for ext in profile.extensions:
            self._extension_map[ext] = profile.name
        logger.debug("Registered profile %s (%d keywords)", profile.name, len(profile.search_patterns))

    def remove_profile(self, name: str) -> bool:
        """
        Unregister a language profile.

        Returns:
            True if removed, False if not found
        """
        if name not in self._profiles:
            return False
        self._drop_extensions(name)
        del self._profiles[name]
        return True

    def register(
        self,
        language: str,
        keyword: KeywordLike,
        binding: Optional[str],
        pattern: PatternSource,
    ) -> None:
        """
        Register one keyword for a language.

        Creates the language's profile when it doesn't exist yet.
        Re-registering a keyword replaces its binding and pattern.

        Args:
            language: Language name
            keyword: Core tag or extension keyword
            binding: Single-character key, or None for a pattern that is
                only reachable programmatically
            pattern: Regex string or PatternExpr

        Raises:
            ValueError: Empty pattern, invalid key, or key already bound to
                another keyword of the language
        """
        name = normalize_keyword(keyword)
        if isinstance(pattern, str) and not pattern:
            raise ValueError(f"pattern for '{name}' must not be empty")
        if not isinstance(pattern, (str, PatternExpr)):
            raise TypeError(f"pattern must be a str or PatternExpr, got {type(pattern).__name__}")

        profile = self._profiles.get(language)
        if binding is not None:
            _check_binding(binding)
            if profile is not None:
                owner = profile.keyword_for(binding)
                if owner is not None and owner != name:
                    raise ValueError(
                        f"Key '{binding}' already bound to '{owner}' in {language}"
                    )

        if profile is None:
            profile = LanguageProfile(name=language)
            self._profiles[language] = profile

        profile.search_patterns[name] = pattern
        if binding is None:
            profile.key_bindings.pop(name, None)
        else:
            profile.key_bindings[name] = binding

    def unregister(self, language: str, keyword: KeywordLike) -> bool:
        """
        Remove a keyword's pattern and binding.

        Returns:
            True if anything was removed
        """
        profile = self._profiles.get(language)
        if profile is None:
            return False
        name = normalize_keyword(keyword)
        had_pattern = profile.search_patterns.pop(name, None) is not None
        had_binding = profile.key_bindings.pop(name, None) is not None
        return had_pattern or had_binding

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def lookup(self, language: str, keyword: KeywordLike) -> LookupResult:
        """
        Resolve a keyword to its pattern.

        Deferred patterns are evaluated and compiled on every call.

        Returns:
            LookupResult with status FOUND and pattern set, or a miss
            (LANGUAGE_NOT_REGISTERED, KEYWORD_NOT_REGISTERED, PATTERN_ERROR)
        """
        profile = self._profiles.get(language)
        if profile is None:
            return _language_miss(language)

        try:
            name = normalize_keyword(keyword)
        except ValueError:
            return _keyword_miss(language, str(keyword))
        binding = profile.key_bindings.get(name)
        if name not in profile.search_patterns:
            return _keyword_miss(language, name, binding)

        try:
            pattern = self._resolve_pattern(profile, name, ())
        except PatternCompileError as e:
            logger.debug("Pattern for %s/%s failed: %s", language, name, e)
            return LookupResult(
                status=LookupStatus.PATTERN_ERROR,
                language=language,
                keyword=name,
                binding=binding,
                error=e,
            )

        return LookupResult(
            status=LookupStatus.FOUND,
            language=language,
            keyword=name,
            binding=binding,
            pattern=pattern,
        )

    def lookup_binding(self, language: str, keyword: KeywordLike) -> LookupResult:
        """Resolve a keyword to its key (result.binding)."""
        profile = self._profiles.get(language)
        if profile is None:
            return _language_miss(language)

        try:
            name = normalize_keyword(keyword)
        except ValueError:
            return _keyword_miss(language, str(keyword))
        binding = profile.key_bindings.get(name)
        if binding is None:
            return _keyword_miss(language, name)
        return LookupResult(
            status=LookupStatus.FOUND, language=language, keyword=name, binding=binding
        )

    def reverse_lookup_keyword(self, language: str, binding: str) -> LookupResult:
        """Resolve a key to the keyword bound to it (result.keyword)."""
        profile = self._profiles.get(language)
        if profile is None:
            return _language_miss(language)

        keyword = profile.keyword_for(binding)
        if keyword is None:
            return LookupResult(
                status=LookupStatus.KEY_NOT_BOUND,
                language=language,
                binding=binding,
                error=KeyNotBound(language, binding),
            )
        return LookupResult(
            status=LookupStatus.FOUND, language=language, keyword=keyword, binding=binding
        )

    def lookup_key(self, language: str, binding: str) -> LookupResult:
        """Resolve a key straight to its keyword's pattern."""
        reverse = self.reverse_lookup_keyword(language, binding)
        if not reverse.found:
            return reverse
        return self.lookup(language, reverse.keyword)

    def level_pattern(self, language: str, level: int, exclusive: bool = False) -> LookupResult:
        """
        Heading pattern for a language and outline level.

        A heading table without a token for the level is reported as
        PATTERN_ERROR.

        Raises:
            InvalidLevel: If level is outside 1..8
        """
        validate_level(level)
        profile = self._profiles.get(language)
        if profile is None:
            return _language_miss(language)
        try:
            pattern = level_pattern(profile, level, exclusive)
        except InvalidLevel as e:
            return LookupResult(status=LookupStatus.PATTERN_ERROR, language=language, error=e)
        return LookupResult(status=LookupStatus.FOUND, language=language, pattern=pattern)

    def _resolve_pattern(self, profile: LanguageProfile, name: str, chain: tuple) -> str:
        if name in chain:
            cycle = " -> ".join(chain + (name,))
            raise PatternCompileError(None, f"circular keyword reference {cycle}", keyword=chain[0])
        source = profile.search_patterns.get(name)
        if source is None:
            raise PatternCompileError(
                None,
                f"'{name}' is not defined for {profile.name}",
                keyword=chain[0] if chain else name,
            )

        chain = chain + (name,)
        try:
            pattern = evaluate(source, lambda ref: self._resolve_pattern(profile, ref, chain))
        except PatternCompileError as e:
            if e.keyword is None:
                raise PatternCompileError(e.pattern, e.reason, keyword=name) from e
            raise

        if not pattern:
            raise PatternCompileError(pattern, "pattern evaluates to an empty string", keyword=name)
        try:
            re.compile(pattern)
        except re.error as e:
            raise PatternCompileError(pattern, str(e), keyword=name) from e
        return pattern

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_profile(self, name: str) -> Optional[LanguageProfile]:
        return self._profiles.get(name)

    def get_profile_for_path(self, file_path: Path) -> Optional[LanguageProfile]:
        """
        Get language profile for a file based on extension.

        Returns:
            LanguageProfile if extension is supported, None otherwise
        """
        name = self._extension_map.get(Path(file_path).suffix.lower())
        return self._profiles.get(name) if name else None

    def supported_languages(self) -> List[str]:
        return list(self._profiles.keys())

    def supported_extensions(self) -> Set[str]:
        return set(self._extension_map.keys())

    def _drop_extensions(self, name: str) -> None:
        for ext in [e for e, owner in self._extension_map.items() if owner == name]:
            del self._extension_map[ext]

    def __len__(self) -> int:
        """Return number of registered profiles."""
        return len(self._profiles)

    def __contains__(self, name: str) -> bool:
        """Check if a language is registered."""
        return name in self._profiles


def _check_binding(binding: str) -> None:
    if not isinstance(binding, str) or len(binding) != 1:
        raise ValueError(f"Key binding must be a single character, got {binding!r}")
    if binding in RESERVED_LEVEL_KEYS:
        raise ValueError(f"Key '{binding}' is reserved for outline level {binding}")


def _language_miss(language: str) -> LookupResult:
    return LookupResult(
        status=LookupStatus.LANGUAGE_NOT_REGISTERED,
        language=language,
        error=LanguageNotRegistered(language),
    )


def _keyword_miss(language: str, keyword: str, binding: Optional[str] = None) -> LookupResult:
    return LookupResult(
        status=LookupStatus.KEYWORD_NOT_REGISTERED,
        language=language,
        keyword=keyword,
        binding=binding,
        error=KeywordNotRegistered(language, keyword),
    )
