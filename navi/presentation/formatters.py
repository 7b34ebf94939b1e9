"""
Formatters — Render result views for the terminal or for piping

Text output groups entries by source, grep style:

    init.el
    ▸    12: (defun foo ()
    │    13:   "Docstring."

JSON output is ResultView.to_dict() plus the navigation status, so other
tools can jump to (source, line, column) themselves.
"""

import json
from typing import Optional

from ..core.navigator import NavigationOutcome
from ..core.outline import heading_depth
from ..core.profile import LanguageProfile
from ..core.search import ResultView
from .symbols import SymbolSet, get_symbols


def format_view(
    view: ResultView,
    symbols: Optional[SymbolSet] = None,
    profile: Optional[LanguageProfile] = None,
) -> str:
    """
    Render a result view as text.

    Args:
        view: Results to render
        symbols: Symbol set (auto-detect if None)
        profile: When given, heading lines are marked and indented by depth

    Returns:
        Multi-line string, without trailing newline
    """
    symbols = symbols or get_symbols()
    if not view.entries:
        return f"No matches ({view.summary.describe()})"

    width = len(str(max(e.line_number + len(e.context_after) for e in view.entries)))
    matched = {(e.source_id, e.line_number) for e in view.entries}
    lines = []
    current_source = None
    last_printed = 0

    for entry in view.entries:
        if entry.source_id != current_source:
            if current_source is not None:
                lines.append("")
            lines.append(entry.source_id)
            current_source = entry.source_id
            last_printed = 0

        for number, text in entry.lines():
            if number <= last_printed:
                continue
            if last_printed and number > last_printed + 1 and view.context_lines:
                lines.append(symbols.separator * 2)
            if (entry.source_id, number) in matched:
                marker = symbols.match
                depth = heading_depth(profile, text) if profile else None
                if depth is not None:
                    marker = symbols.heading
                    text = symbols.indent * (depth - 1) + text
            else:
                marker = symbols.context
            lines.append(f"{marker} {number:>{width}}: {text}")
            last_printed = number

    lines.append("")
    lines.append(view.summary.describe())
    return "\n".join(lines)


def format_outcome(
    outcome: NavigationOutcome,
    symbols: Optional[SymbolSet] = None,
    profile: Optional[LanguageProfile] = None,
) -> str:
    """Render a navigation outcome; misses render as their message."""
    symbols = symbols or get_symbols()
    if outcome.view is None:
        return f"{symbols.check_fail} {outcome.message}"
    return format_view(outcome.view, symbols, profile)


def outcome_to_json(outcome: NavigationOutcome, compact: bool = False) -> str:
    """Serialize a navigation outcome as JSON."""
    data = {
        "status": outcome.status.value,
        "language": outcome.request.language,
        "message": outcome.message,
    }
    if outcome.view is not None:
        data.update(outcome.view.to_dict())
    if compact:
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(data, ensure_ascii=False, indent=2)
