"""
Pattern Combinator — Merge patterns into one flat alternation

    combine("^\\* ", "^\\s*\\(defun ")   -> "(?:^\\* |^\\s*\\(defun )"
    combine(combine(a, b), c)            == combine(a, b, c)

Inputs that are a single (?:...) group, or carry a top-level "|", are
split into their alternatives first, so combining repeatedly never nests
groups. Duplicate alternatives are dropped (first wins).

Capturing groups are never unwrapped. Numeric backreferences are
renumbered to follow their group once earlier inputs add groups ahead
of it:

    combine("(a)", "(x)\\1")  -> "(?:(a)|(x)\\2)"
"""

from typing import Dict, List, Optional

_OCTAL = "01234567"


def combine(*patterns: Optional[str]) -> Optional[str]:
    """
    Combine patterns into a single alternation.

    Args:
        *patterns: Regex strings; None and "" are skipped

    Returns:
        None when nothing remains, the sole input unchanged when only one
        remains, otherwise "(?:alt1|alt2|...)".
    """
    parts = [p for p in patterns if p]
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]

    alternatives: List[str] = []
    seen = set()
    groups = 0
    for pattern in parts:
        renumber: Dict[int, int] = {}
        local = 0
        for alt in split_alternatives(pattern):
            count = count_groups(alt)
            if alt and alt not in seen:
                seen.add(alt)
                for number in range(local + 1, local + count + 1):
                    groups += 1
                    renumber[number] = groups
                alternatives.append(_renumber_backrefs(alt, renumber))
            local += count

    if len(alternatives) == 1:
        return alternatives[0]
    return "(?:" + "|".join(alternatives) + ")"


def split_alternatives(pattern: str) -> List[str]:
    """
    Split a pattern into its top-level alternatives.

    A pattern wrapped entirely in one (?:...) group is unwrapped first.

    Examples:
        "(?:a|b)"   -> ["a", "b"]
        "a|b"       -> ["a", "b"]
        "(a|b)"     -> ["(a|b)"]
        "(?=a|b)"   -> ["(?=a|b)"]
    """
    if not pattern:
        return []
    body = _unwrap(pattern)
    if body is not None and _top_level_bars(body):
        pattern = body
    bars = _top_level_bars(pattern)
    if not bars:
        return [pattern]

    pieces = []
    start = 0
    for bar in bars + [len(pattern)]:
        piece = pattern[start:bar]
        inner = _unwrap(piece)
        if inner is not None and _top_level_bars(inner):
            pieces.extend(split_alternatives(piece))
        else:
            pieces.append(piece)
        start = bar + 1
    return pieces


def count_groups(pattern: str) -> int:
    """Number of capturing groups (plain and named) in a pattern."""
    return sum(
        1 for index, ch, _ in _scan(pattern)
        if ch == "(" and (
            not pattern.startswith("(?", index) or pattern.startswith("(?P<", index)
        )
    )


def _unwrap(pattern: str) -> Optional[str]:
    """Return the body of a pattern that is one (?:...) group, else None."""
    if not pattern.startswith("(?:"):
        return None
    if _matching_paren(pattern, 0) != len(pattern) - 1:
        return None
    return pattern[3:-1]


def _renumber_backrefs(pattern: str, renumber: Dict[int, int]) -> str:
    """Rewrite \\N backreferences outside character classes."""
    if all(old == new for old, new in renumber.items()):
        return pattern

    out = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "[":
            end = _class_end(pattern, i) + 1
            out.append(pattern[i:end])
            i = end
            continue
        if ch != "\\":
            out.append(ch)
            i += 1
            continue

        digits = pattern[i + 1:i + 3]
        if not digits or digits[0] not in "123456789":
            out.append(pattern[i:i + 2])
            i += 2
            continue
        if not (len(digits) == 2 and digits[1].isdigit()):
            digits = digits[0]
        # Three octal digits are an octal escape
        elif i + 3 < n and all(c in _OCTAL for c in pattern[i + 1:i + 4]):
            out.append(pattern[i:i + 4])
            i += 4
            continue
        number = int(digits)
        out.append("\\" + str(renumber.get(number, number)))
        i += 1 + len(digits)
    return "".join(out)


def _scan(pattern: str):
    """
    Yield (index, char, depth) for structural characters of a regex.

    Escaped characters and character-class contents are skipped. Depth is
    the group nesting level before the character is applied.
    """
    depth = 0
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            i = _class_end(pattern, i) + 1
            continue
        if ch in "()|":
            yield i, ch, depth
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
        i += 1


def _class_end(pattern: str, start: int) -> int:
    """Index of the "]" closing the character class opened at start."""
    i = start + 1
    n = len(pattern)
    if i < n and pattern[i] == "^":
        i += 1
    # A leading "]" is a literal member
    if i < n and pattern[i] == "]":
        i += 1
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "]":
            return i
        i += 1
    return n - 1


def _matching_paren(pattern: str, open_index: int) -> int:
    target_depth = None
    for index, ch, depth in _scan(pattern):
        if index == open_index and ch == "(":
            target_depth = depth
        elif target_depth is not None and ch == ")" and depth - 1 == target_depth:
            return index
    return -1


def _top_level_bars(pattern: str) -> List[int]:
    return [index for index, ch, depth in _scan(pattern) if ch == "|" and depth == 0]
