"""
Python profile.

Headings are comment headlines: "# * Level 1", "# ** Level 2".
"""

from ..expressions import AnyOf, KeywordRef, WordsOf
from ..profile import HeadingStyle, LanguageProfile

DATABASE_CALLS = (
    "sqlite3.connect", "create_engine", "sessionmaker",
    ".execute", ".executemany", ".commit", ".rollback", ".cursor",
)

PYTHON_PROFILE = LanguageProfile(
    name="python",
    description="Python source",
    extensions={".py", ".pyw"},
    headings=HeadingStyle(prefix="# ", token="*", separator=" "),
    key_bindings={
        "ALL": "a",
        "FUN": "f",
        "VAR": "v",
        "OBJ": "x",
        "DB": "b",
        "import": "i",
        "decorator": "d",
        "test": "t",
    },
    search_patterns={
        "ALL": AnyOf((KeywordRef("FUN"), KeywordRef("VAR"), KeywordRef("OBJ"), KeywordRef("DB"))),
        "FUN": r"^\s*(?:async\s+)?def\s",
        "VAR": r"^[A-Za-z_]\w*\s*(?::[^=]+)?=(?!=)",
        "OBJ": r"^\s*class\s",
        "DB": WordsOf(DATABASE_CALLS, suffix=r"\s*\("),
        "import": r"^\s*(?:import|from)\s",
        "decorator": r"^\s*@",
        "test": r"^\s*(?:async\s+)?def\s+test_|^\s*class\s+Test",
    },
)
