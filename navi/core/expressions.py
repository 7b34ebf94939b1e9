"""
Pattern Expressions — Deferred patterns assembled from pieces

Some keyword patterns are not literal strings but are built from parts,
for instance "ALL" as the alternation of the profile's FUN, VAR, OBJ and
DB patterns. Such patterns are stored as a small expression tree and
evaluated into a regex string each time they are looked up.

Node types:
    Raw(text)                 regex text used as-is
    Quoted(text)              literal text, regex-escaped
    Concat(parts)             parts joined in order
    AnyOf(parts)              alternation of parts (via combine())
    WordsOf(words, prefix, suffix)
                              prefix + one of the literal words + suffix,
                              longest words first
    KeywordRef(keyword)       the pattern of another keyword of the same
                              profile

Usage:
    ALL = AnyOf((KeywordRef("FUN"), KeywordRef("VAR")))
    FUN = WordsOf(("defun", "defmacro"), prefix=r"^\\s*\\(", suffix=r"\\s")
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Tuple, Union

from .combinator import combine
from .errors import PatternCompileError
from .keywords import normalize_keyword


# Resolves a keyword name to its evaluated pattern string
Resolver = Callable[[str], str]


class PatternExpr(ABC):
    """A deferred pattern."""

    @abstractmethod
    def evaluate(self, resolve: Resolver) -> str:
        """
        Evaluate into a regex string.

        Args:
            resolve: Callback returning the evaluated pattern of a keyword
                in the same profile (used by KeywordRef)

        Raises:
            PatternCompileError: If a piece cannot be evaluated
        """

    def references(self) -> Tuple[str, ...]:
        """Keywords this expression refers to, directly or nested."""
        return ()


@dataclass(frozen=True)
class Raw(PatternExpr):
    text: str

    def evaluate(self, resolve: Resolver) -> str:
        return self.text


@dataclass(frozen=True)
class Quoted(PatternExpr):
    text: str

    def evaluate(self, resolve: Resolver) -> str:
        return re.escape(self.text)


@dataclass(frozen=True)
class Concat(PatternExpr):
    parts: Tuple["PatternSource", ...]

    def evaluate(self, resolve: Resolver) -> str:
        return "".join(evaluate(part, resolve) for part in self.parts)

    def references(self) -> Tuple[str, ...]:
        return _collect_refs(self.parts)


@dataclass(frozen=True)
class AnyOf(PatternExpr):
    parts: Tuple["PatternSource", ...]

    def evaluate(self, resolve: Resolver) -> str:
        return combine(*(evaluate(part, resolve) for part in self.parts)) or ""

    def references(self) -> Tuple[str, ...]:
        return _collect_refs(self.parts)


@dataclass(frozen=True)
class WordsOf(PatternExpr):
    words: Tuple[str, ...]
    prefix: str = ""
    suffix: str = ""

    def evaluate(self, resolve: Resolver) -> str:
        if not self.words:
            raise PatternCompileError(None, "word list is empty")
        # Longest first so "defun*" wins over "defun"
        ordered = sorted(set(self.words), key=lambda w: (-len(w), w))
        body = "|".join(re.escape(w) for w in ordered)
        return f"{self.prefix}(?:{body}){self.suffix}"


@dataclass(frozen=True)
class KeywordRef(PatternExpr):
    keyword: str

    def evaluate(self, resolve: Resolver) -> str:
        return resolve(normalize_keyword(self.keyword))

    def references(self) -> Tuple[str, ...]:
        return (normalize_keyword(self.keyword),)


PatternSource = Union[str, PatternExpr]


def evaluate(source: PatternSource, resolve: Resolver) -> str:
    """Evaluate a pattern source (plain string or expression)."""
    if isinstance(source, PatternExpr):
        return source.evaluate(resolve)
    if isinstance(source, str):
        return source
    raise PatternCompileError(None, f"unsupported pattern type {type(source).__name__}")


def _collect_refs(parts: Iterable[PatternSource]) -> Tuple[str, ...]:
    refs = []
    for part in parts:
        if isinstance(part, PatternExpr):
            refs.extend(part.references())
    return tuple(refs)


def parse_expression(data: Any) -> PatternSource:
    """
    Build a pattern source from its YAML/JSON form.

    Forms:
        "regex"                                  -> str
        {"raw": "regex"}                         -> Raw
        {"quote": "text"}                        -> Quoted
        {"concat": [...]}                        -> Concat
        {"any": [...]}                           -> AnyOf
        {"words": [...], "prefix": .., "suffix": ..} -> WordsOf
        {"ref": "FUN"}                           -> KeywordRef

    Raises:
        ValueError: On an unknown or malformed form
    """
    if isinstance(data, str):
        return data
    if not isinstance(data, dict):
        raise ValueError(f"pattern must be a string or a mapping, got {type(data).__name__}")

    if "raw" in data:
        return Raw(str(data["raw"]))
    if "quote" in data:
        return Quoted(str(data["quote"]))
    if "concat" in data:
        return Concat(tuple(parse_expression(p) for p in _as_list(data["concat"], "concat")))
    if "any" in data:
        return AnyOf(tuple(parse_expression(p) for p in _as_list(data["any"], "any")))
    if "words" in data:
        words = tuple(str(w) for w in _as_list(data["words"], "words"))
        return WordsOf(words, prefix=str(data.get("prefix", "")), suffix=str(data.get("suffix", "")))
    if "ref" in data:
        return KeywordRef(str(data["ref"]))

    raise ValueError(f"unknown pattern form with keys {sorted(data)}")


def _as_list(value: Any, form: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"'{form}' expects a list")
    return value
