"""
Built-in language profiles.

Each language has its own module defining:
- Key bindings (core tags on a/f/v/x/b plus language extras)
- Search patterns (literal or assembled from expressions)
- Heading conventions

Supported languages:
- emacs_lisp.py: Emacs Lisp (.el)
- ess.py: R (.r)
- picolisp.py: PicoLisp (.l)
- org.py: Org (.org) - table-based headings
- python.py: Python (.py)
"""

from typing import List

from ..profile import LanguageProfile
from .emacs_lisp import EMACS_LISP_PROFILE
from .ess import ESS_PROFILE
from .org import ORG_PROFILE
from .picolisp import PICOLISP_PROFILE
from .python import PYTHON_PROFILE

BUILTIN_PROFILES: List[LanguageProfile] = [
    EMACS_LISP_PROFILE,
    ESS_PROFILE,
    PICOLISP_PROFILE,
    ORG_PROFILE,
    PYTHON_PROFILE,
]


def register_builtins(registry) -> None:
    """Add copies of all built-in profiles to a registry."""
    for profile in BUILTIN_PROFILES:
        registry.add_profile(profile.copy())


__all__ = [
    'BUILTIN_PROFILES',
    'register_builtins',
    'EMACS_LISP_PROFILE',
    'ESS_PROFILE',
    'PICOLISP_PROFILE',
    'ORG_PROFILE',
    'PYTHON_PROFILE',
]
