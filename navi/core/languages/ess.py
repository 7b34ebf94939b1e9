"""
ESS (R) profile.

Headings use R comments: "## * Level 1", "## ** Level 2".
"""

from ..expressions import AnyOf, KeywordRef, WordsOf
from ..profile import HeadingStyle, LanguageProfile


# =============================================================================
# Patterns
# =============================================================================

NAME = r"[\w.$@]+"
ASSIGN = r"\s*(?:<<?-|=)\s*"

FUNCTION_DEF = rf"^\s*{NAME}{ASSIGN}function\s*\("
VARIABLE_DEF = rf"^\s*{NAME}\s*<<?-(?!\s*function\b)"

OBJECT_CALLS = (
    "setClass", "setRefClass", "setGeneric", "setMethod",
    "setValidity", "R6Class", "structure", "UseMethod",
)

DATABASE_CALLS = (
    "dbConnect", "dbDisconnect", "dbGetQuery", "dbSendQuery", "dbExecute",
    "dbWriteTable", "dbReadTable", "odbcConnect", "sqlQuery", "sqldf",
)


# =============================================================================
# Profile
# =============================================================================

ESS_PROFILE = LanguageProfile(
    name="ess",
    description="R source (Emacs Speaks Statistics)",
    extensions={".r"},
    headings=HeadingStyle(prefix="## ", token="*", separator=" "),
    key_bindings={
        "ALL": "a",
        "FUN": "f",
        "VAR": "v",
        "OBJ": "x",
        "DB": "b",
        "library": "l",
        "source": "s",
        "test": "t",
    },
    search_patterns={
        "ALL": AnyOf((KeywordRef("FUN"), KeywordRef("VAR"), KeywordRef("OBJ"), KeywordRef("DB"))),
        "FUN": FUNCTION_DEF,
        "VAR": VARIABLE_DEF,
        "OBJ": WordsOf(OBJECT_CALLS, prefix=r"\b", suffix=r"\s*\("),
        "DB": WordsOf(DATABASE_CALLS, prefix=r"\b", suffix=r"\s*\("),
        "library": WordsOf(("library", "require", "requireNamespace"), prefix=r"^\s*", suffix=r"\s*\("),
        "source": r"^\s*source\s*\(",
        "test": WordsOf(("test_that", "context", "describe"), prefix=r"^\s*", suffix=r"\s*\("),
    },
)
