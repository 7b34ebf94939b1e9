"""
Emacs Lisp profile.

Headings are outshine-style comment headlines:
    ;; * Level 1
    ;; ** Level 2

Core keywords are built from lists of definition forms; the extension
keywords pick out single forms (e.g. "defun" on key F).
"""

from ..expressions import AnyOf, KeywordRef, WordsOf
from ..profile import HeadingStyle, LanguageProfile


# =============================================================================
# Definition forms
# =============================================================================

FORM_START = r"^\s*\("
FORM_END = r"[\s)]"

FUNCTION_FORMS = (
    "defun", "defun*", "cl-defun",
    "defmacro", "defmacro*", "cl-defmacro",
    "defsubst", "cl-defsubst", "define-inline",
    "defalias", "defadvice", "define-advice",
    "define-minor-mode", "define-derived-mode", "define-globalized-minor-mode",
)

VARIABLE_FORMS = (
    "defvar", "defvar-local", "defconst", "defcustom",
    "defface", "defgroup", "defvar-keymap", "setq-default",
)

OBJECT_FORMS = (
    "defclass", "defstruct", "cl-defstruct",
    "defgeneric", "cl-defgeneric", "defmethod", "cl-defmethod",
)

DATABASE_FORMS = (
    "sqlite-open", "sqlite-execute", "sqlite-select", "sqlite-transaction",
    "emacsql", "emacsql-connection", "emacsql-sqlite",
    "sql-connect", "sql-send-string",
)


def _form(*names: str) -> WordsOf:
    return WordsOf(names, prefix=FORM_START, suffix=FORM_END)


# =============================================================================
# Profile
# =============================================================================

EMACS_LISP_PROFILE = LanguageProfile(
    name="emacs-lisp",
    description="Emacs Lisp source",
    extensions={".el"},
    headings=HeadingStyle(prefix=";; ", token="*", separator=" "),
    key_bindings={
        "ALL": "a",
        "FUN": "f",
        "VAR": "v",
        "OBJ": "x",
        "DB": "b",
        "defun": "F",
        "defvar": "V",
        "defconst": "C",
        "defcustom": "U",
        "defgroup": "G",
        "defface": "D",
        "defmacro": "M",
        "defadvice": "A",
        "defstruct": "S",
        "defclass": "L",
        "require": "R",
        "interactive": "i",
    },
    search_patterns={
        "ALL": AnyOf((KeywordRef("FUN"), KeywordRef("VAR"), KeywordRef("OBJ"), KeywordRef("DB"))),
        "FUN": _form(*FUNCTION_FORMS),
        "VAR": _form(*VARIABLE_FORMS),
        "OBJ": _form(*OBJECT_FORMS),
        "DB": WordsOf(DATABASE_FORMS, prefix=r"\(", suffix=FORM_END),
        "defun": _form("defun", "defun*", "cl-defun"),
        "defvar": _form("defvar", "defvar-local"),
        "defconst": _form("defconst"),
        "defcustom": _form("defcustom"),
        "defgroup": _form("defgroup"),
        "defface": _form("defface"),
        "defmacro": _form("defmacro", "defmacro*", "cl-defmacro"),
        "defadvice": _form("defadvice", "define-advice", "advice-add"),
        "defstruct": _form("defstruct", "cl-defstruct"),
        "defclass": _form("defclass"),
        "require": _form("require"),
        "interactive": r"\(interactive[\s)]",
    },
)
