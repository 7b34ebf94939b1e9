"""
Org profile.

Org headings are star sequences at column 0 ("*** Heading"), listed in an
explicit (token, level) table so the table-based level patterns apply.
Core keywords map onto Org constructs:
    FUN  source blocks
    VAR  names, header arguments, properties
    OBJ  tables
    DB   SQL source blocks
"""

from ..expressions import AnyOf, KeywordRef
from ..profile import HeadingStyle, LanguageProfile, heading_table

ORG_PROFILE = LanguageProfile(
    name="org",
    description="Org documents",
    extensions={".org"},
    headings=HeadingStyle(prefix="", token="*", separator=" ", table=heading_table("*")),
    key_bindings={
        "ALL": "a",
        "FUN": "f",
        "VAR": "v",
        "OBJ": "x",
        "DB": "b",
        "todo": "t",
        "done": "d",
        "link": "l",
        "keyword": "k",
        "property": "p",
        "tag": "g",
        "timestamp": "s",
    },
    search_patterns={
        "ALL": AnyOf((KeywordRef("FUN"), KeywordRef("VAR"), KeywordRef("OBJ"), KeywordRef("DB"))),
        "FUN": r"^\s*(?i:#\+begin_src)\b",
        "VAR": r"^\s*(?i:#\+(?:name|header|property):)",
        "OBJ": r"^\s*\|",
        "DB": r"^\s*(?i:#\+begin_src\s+(?:sql|sqlite|sql-mode))\b",
        "todo": r"^\*+\s+(?:TODO|NEXT|WAITING)\s",
        "done": r"^\*+\s+(?:DONE|CANCELED|CANCELLED)\s",
        "link": r"\[\[[^\]]+\](?:\[[^\]]*\])?\]",
        "keyword": r"^\s*#\+\w+:",
        "property": r"^\s*:[\w-]+:(?:\s|$)",
        "tag": r"^\*+\s.*\s:[\w@#%:]+:\s*$",
        "timestamp": r"[<\[]\d{4}-\d{2}-\d{2}[^>\]]*[>\]]",
    },
)
