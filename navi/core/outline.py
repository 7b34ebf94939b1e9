"""
Outline levels — Heading patterns per language and nesting depth

Two strategies, chosen by the profile's HeadingStyle:

Mechanical (default): headings are the base token repeated N times.
    level 3, prefix ";; ", token "*":
        inclusive  ^;;\\ \\*(?:\\*)?(?:\\*)?\\     depth 1..3
        exclusive  ^;;\\ \\*\\*\\*\\               depth 3 only

Table (HeadingStyle.table set): headings come from an explicit
(token, level) list. The inclusive pattern makes every character after
the first an optional nested continuation:
    token "***" -> \\*(?:\\*(?:\\*)?)?

All patterns are anchored at line start and end with the separator, so a
deeper heading never satisfies a shallower pattern.
"""

import re
from typing import Optional

from .errors import InvalidLevel
from .profile import LanguageProfile

MIN_LEVEL = 1
MAX_LEVEL = 8


def validate_level(level) -> int:
    """
    Check an outline level.

    Raises:
        InvalidLevel: If level is not an int in 1..8 (bools are rejected)
    """
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevel(level)
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise InvalidLevel(level)
    return level


def level_pattern(profile: LanguageProfile, level: int, exclusive: bool = False) -> str:
    """
    Pattern selecting headings of a profile up to (or exactly at) a level.

    Args:
        profile: Language profile supplying the heading style
        level: Outline level, 1..8
        exclusive: Match only headings at exactly this level

    Returns:
        Regex string anchored at line start

    Raises:
        InvalidLevel: Level out of range or missing from the heading table
    """
    validate_level(level)
    style = profile.headings

    if style.uses_table:
        token = style.table_token(level)
        if token is None:
            raise InvalidLevel(
                level, f"{profile.name} has no heading token for level {level}"
            )
        body = re.escape(token) if exclusive else _nested_optional(token)
    elif exclusive:
        body = re.escape(style.token * level)
    else:
        quoted = re.escape(style.token)
        body = quoted + f"(?:{quoted})?" * (level - 1)

    return "^" + re.escape(style.prefix) + body + re.escape(style.separator)


def _nested_optional(token: str) -> str:
    """"abc" -> "a(?:b(?:c)?)?" with every character quoted."""
    pattern = ""
    for ch in reversed(token[1:]):
        pattern = f"(?:{re.escape(ch)}{pattern})?"
    return re.escape(token[0]) + pattern


def heading_depth(profile: LanguageProfile, line: str) -> Optional[int]:
    """
    Outline depth of a heading line, or None if the line is no heading.

    Checks exclusive patterns from the deepest level down.
    """
    for level in range(MAX_LEVEL, MIN_LEVEL - 1, -1):
        try:
            pattern = level_pattern(profile, level, exclusive=True)
        except InvalidLevel:
            continue
        if re.match(pattern, line):
            return level
    return None
