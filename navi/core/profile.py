"""
Language profiles — Per-language keyword, key and pattern configuration

A LanguageProfile bundles everything navi needs to know about one target
language:
- Which keys trigger which keywords
- Which pattern each keyword searches for
- How outline headings are written
- Which file extensions belong to the language

Design principle: New languages are added via profiles, not code changes.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .expressions import PatternSource
from .keywords import KeywordLike, normalize_keyword


@dataclass
class HeadingStyle:
    """
    How outline headings look in a language.

    A level-N heading is written as prefix + token * N + separator, e.g.
    ";; *** Heading" for prefix ";; ", token "*", separator " ".

    Languages whose heading tokens are not mechanical repetitions (tree
    markup such as Org) give an explicit table of (token, level) pairs
    instead; its presence selects table-based pattern generation.

    Attributes:
        prefix: Text before the first token (usually the comment leader)
        token: Level-1 base token
        separator: Mandatory text after the last token
        table: Optional ordered (token, level) pairs
    """
    prefix: str = ""
    token: str = "*"
    separator: str = " "
    table: Optional[List[Tuple[str, int]]] = None

    def __post_init__(self):
        if not self.token:
            raise ValueError("heading token must not be empty")
        if not self.separator:
            raise ValueError("heading separator must not be empty")
        for token, level in self.table or ():
            if not token:
                raise ValueError(f"heading table token for level {level!r} must not be empty")
            if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 8:
                raise ValueError(f"heading table level must be an integer in 1..8, got {level!r}")

    @property
    def uses_table(self) -> bool:
        return bool(self.table)

    def table_token(self, level: int) -> Optional[str]:
        """Heading token registered for a level in the table, if any."""
        for token, token_level in self.table or ():
            if token_level == level:
                return token
        return None


def heading_table(token: str = "*", max_level: int = 8) -> List[Tuple[str, int]]:
    """Build a (token, level) table by repetition, Org style."""
    return [(token * level, level) for level in range(1, max_level + 1)]


@dataclass
class LanguageProfile:
    """
    Keyword, key and pattern configuration for one language.

    Attributes:
        name: Language identifier (e.g. "emacs-lisp", "org")
        key_bindings: keyword -> single display character
        search_patterns: keyword -> regex string or PatternExpr
        headings: Outline heading conventions
        extensions: File extensions handled by this profile (e.g. {'.el'})
        description: Human-readable summary
    """
    name: str
    key_bindings: Dict[str, str] = field(default_factory=dict)
    search_patterns: Dict[str, PatternSource] = field(default_factory=dict)
    headings: HeadingStyle = field(default_factory=HeadingStyle)
    extensions: Set[str] = field(default_factory=set)
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("profile name must not be empty")
        self.key_bindings = {normalize_keyword(k): v for k, v in self.key_bindings.items()}
        self.search_patterns = {normalize_keyword(k): v for k, v in self.search_patterns.items()}
        self.extensions = {ext.lower() for ext in self.extensions}

    def binding_for(self, keyword: KeywordLike) -> Optional[str]:
        return self.key_bindings.get(normalize_keyword(keyword))

    def pattern_source(self, keyword: KeywordLike) -> Optional[PatternSource]:
        return self.search_patterns.get(normalize_keyword(keyword))

    def keyword_for(self, binding: str) -> Optional[str]:
        """Reverse lookup: the keyword bound to a key."""
        for keyword, key in self.key_bindings.items():
            if key == binding:
                return keyword
        return None

    def keywords(self) -> List[str]:
        """All keywords with a pattern or a binding, in registration order."""
        names = list(self.search_patterns)
        names.extend(k for k in self.key_bindings if k not in self.search_patterns)
        return names

    def unbound_keywords(self) -> List[str]:
        """Keywords that have a pattern but no key (programmatic-only)."""
        return [k for k in self.search_patterns if k not in self.key_bindings]

    def matches_extension(self, ext: str) -> bool:
        """Check if this profile handles the given extension."""
        return ext.lower() in self.extensions

    def copy(self) -> "LanguageProfile":
        """Independent copy; later registrations don't touch the original."""
        return LanguageProfile(
            name=self.name,
            key_bindings=dict(self.key_bindings),
            search_patterns=dict(self.search_patterns),
            headings=HeadingStyle(
                prefix=self.headings.prefix,
                token=self.headings.token,
                separator=self.headings.separator,
                table=list(self.headings.table) if self.headings.table else None,
            ),
            extensions=set(self.extensions),
            description=self.description,
        )
