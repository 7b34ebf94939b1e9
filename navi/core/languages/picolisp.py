"""
PicoLisp profile.

PicoLisp comments start with "#", so headings read "# * Level 1".
"""

from ..expressions import AnyOf, KeywordRef, WordsOf
from ..profile import HeadingStyle, LanguageProfile

FORM_START = r"^\s*\("
FORM_END = r"[\s)]"


def _form(*names: str) -> WordsOf:
    return WordsOf(names, prefix=FORM_START, suffix=FORM_END)


PICOLISP_PROFILE = LanguageProfile(
    name="picolisp",
    description="PicoLisp source",
    extensions={".l"},
    headings=HeadingStyle(prefix="# ", token="*", separator=" "),
    key_bindings={
        "ALL": "a",
        "FUN": "f",
        "VAR": "v",
        "OBJ": "x",
        "DB": "b",
        "de": "D",
        "dm": "M",
        "class": "C",
        "rel": "R",
        "load": "L",
        "test": "T",
    },
    search_patterns={
        "ALL": AnyOf((KeywordRef("FUN"), KeywordRef("VAR"), KeywordRef("OBJ"), KeywordRef("DB"))),
        "FUN": _form("de", "dm", "daemon", "patch", "redef"),
        "VAR": _form("setq", "def", "default", "local", "var", "off", "on", "zero", "one"),
        "OBJ": _form("class", "extend", "dm", "var", "new", "object", "type", "isa"),
        "DB": _form(
            "pool", "rel", "db", "dbs", "dbs+", "collect", "request", "new!",
            "put!", "put>", "lose!", "commit", "rollback", "dbSync", "blk",
        ),
        "de": _form("de"),
        "dm": _form("dm"),
        "class": _form("class", "extend"),
        "rel": _form("rel"),
        "load": _form("load"),
        "test": _form("test"),
    },
)
