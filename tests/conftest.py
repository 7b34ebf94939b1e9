"""
Shared pytest fixtures for the navi test suite.

Usage in tests:
    def test_something(registry):
        result = registry.lookup("emacs-lisp", "FUN")

    def test_navigation(navigator, elisp_provider):
        outcome = navigator.press_key("emacs-lisp", "f")
"""

import pytest

from navi.config import ConfigManager
from navi.core import InMemorySourceProvider, Navigator, PatternRegistry
from navi.core.languages import register_builtins


# Line numbers referenced by tests:
#  1 heading L1     6 heading L2    9 heading L3    12 heading L4
#  2 defun foo      7 defvar        10 defun bar    13 cl-defstruct
#                   8 defconst
ELISP_SOURCE = """\
;; * Commentary
(defun foo ()
  "Foo."
  (interactive)
  1)
;; ** Variables
(defvar my-var 1)
(defconst my-const 2)
;; *** Deep
(defun bar (x)
  x)
;; **** Deeper
(cl-defstruct point x y)
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.navi and NAVI_* settings."""
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", tmp_path / "home" / ".navi")
    for name in ("NAVI_CONTEXT_LINES", "NAVI_PROFILE_PATH", "NAVI_PROJECT_PATH", "NAVI_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def registry():
    """Registry with all built-in profiles."""
    reg = PatternRegistry()
    register_builtins(reg)
    return reg


@pytest.fixture
def elisp_source():
    return ELISP_SOURCE


@pytest.fixture
def elisp_provider():
    """In-memory provider holding ELISP_SOURCE as init.el."""
    return InMemorySourceProvider({"init.el": ELISP_SOURCE})


@pytest.fixture
def navigator(registry, elisp_provider):
    return Navigator(registry, elisp_provider)
