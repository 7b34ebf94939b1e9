"""
Keywords — Symbolic tags naming categories of source constructs

Five tags are universal and carry the same meaning in every profile:

    ALL  every definition the profile knows about
    FUN  functions, macros, methods
    VAR  variables and constants
    OBJ  classes, structs, generics (OOP constructs)
    DB   persistence and database constructs

Anything else is a language-specific extension keyed by plain string
(e.g. "defun", "todo"). Names written with a leading colon, Lisp keyword
style (":defun", ":FUN"), are accepted.
"""

from enum import Enum
from typing import Optional, Union


class CoreKeyword(Enum):
    """Universal keyword tags."""
    ALL = "ALL"
    FUN = "FUN"
    VAR = "VAR"
    OBJ = "OBJ"
    DB = "DB"

    @property
    def description(self) -> str:
        return CORE_DESCRIPTIONS[self]


CORE_DESCRIPTIONS = {
    CoreKeyword.ALL: "all definitions",
    CoreKeyword.FUN: "functions",
    CoreKeyword.VAR: "variables",
    CoreKeyword.OBJ: "OOP constructs",
    CoreKeyword.DB: "persistence constructs",
}

# Conventional keys for the core tags
CORE_KEYS = {
    CoreKeyword.ALL: "a",
    CoreKeyword.FUN: "f",
    CoreKeyword.VAR: "v",
    CoreKeyword.OBJ: "x",
    CoreKeyword.DB: "b",
}

KeywordLike = Union[CoreKeyword, str]


def normalize_keyword(keyword: KeywordLike) -> str:
    """
    Normalize a keyword to its storage name.

    Core tags map to their enum value, extension keywords keep their
    spelling minus a leading colon.

    Raises:
        ValueError: If the keyword is empty
    """
    if isinstance(keyword, CoreKeyword):
        return keyword.value
    if not isinstance(keyword, str):
        raise TypeError(f"keyword must be a CoreKeyword or str, got {type(keyword).__name__}")

    name = keyword.strip()
    if name.startswith(":"):
        name = name[1:]
    if not name:
        raise ValueError("keyword must not be empty")
    return name


def as_core(keyword: KeywordLike) -> Optional[CoreKeyword]:
    """Return the core tag for a keyword, or None for extension keywords."""
    name = normalize_keyword(keyword)
    try:
        return CoreKeyword(name)
    except ValueError:
        return None


def is_core(keyword: KeywordLike) -> bool:
    return as_core(keyword) is not None
