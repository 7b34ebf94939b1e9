"""
Presentation — Symbols and formatters for result views.
"""

from .symbols import SymbolSet, UNICODE, ASCII, get_symbols, safe_print
from .formatters import format_view, format_outcome, outcome_to_json

__all__ = [
    'SymbolSet', 'UNICODE', 'ASCII', 'get_symbols', 'safe_print',
    'format_view', 'format_outcome', 'outcome_to_json',
]
