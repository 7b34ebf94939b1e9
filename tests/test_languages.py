"""
Tests for the built-in language profiles.

Every bound keyword must resolve, and each core keyword must pick out the
constructs it stands for in that language.
"""

import re

import pytest

from navi.core import InMemorySourceProvider, Navigator, PatternRegistry
from navi.core.keywords import CORE_KEYS, CoreKeyword
from navi.core.languages import BUILTIN_PROFILES, EMACS_LISP_PROFILE, register_builtins
from navi.core.outline import level_pattern
from navi.core.registry import LookupStatus


ALL_PAIRS = [
    (profile.name, keyword)
    for profile in BUILTIN_PROFILES
    for keyword in profile.keywords()
]


def found(registry, language, keyword, line):
    pattern = registry.lookup(language, keyword).unwrap()
    return re.search(pattern, line) is not None


def test_builtins_register_together(registry):
    assert registry.supported_languages() == ["emacs-lisp", "ess", "picolisp", "org", "python"]
    assert registry.supported_extensions() >= {".el", ".r", ".l", ".org", ".py"}


@pytest.mark.parametrize("language,keyword", ALL_PAIRS)
def test_every_keyword_resolves(registry, language, keyword):
    result = registry.lookup(language, keyword)
    assert result.status is LookupStatus.FOUND, result.message


@pytest.mark.parametrize("profile", BUILTIN_PROFILES, ids=lambda p: p.name)
def test_core_keys(profile):
    for keyword in CoreKeyword:
        assert profile.binding_for(keyword) == CORE_KEYS[keyword]


@pytest.mark.parametrize("profile", BUILTIN_PROFILES, ids=lambda p: p.name)
def test_every_keyword_has_key(profile):
    assert profile.unbound_keywords() == []


@pytest.mark.parametrize("profile", BUILTIN_PROFILES, ids=lambda p: p.name)
def test_no_digit_keys(profile):
    assert not any(key.isdigit() for key in profile.key_bindings.values())


@pytest.mark.parametrize("profile", BUILTIN_PROFILES, ids=lambda p: p.name)
def test_level_patterns(profile):
    for level in range(1, 9):
        re.compile(level_pattern(profile, level))
        re.compile(level_pattern(profile, level, exclusive=True))


class TestEmacsLisp:

    @pytest.mark.parametrize("line", ["(defun foo ()", "  (cl-defun bar (x)", "(defmacro m ()"])
    def test_functions(self, registry, line):
        assert found(registry, "emacs-lisp", "FUN", line)

    def test_form_name_must_end(self, registry):
        assert not found(registry, "emacs-lisp", "FUN", "(defunct x)")
        assert not found(registry, "emacs-lisp", "defvar", "(defvar-keymap km")

    def test_variables(self, registry):
        assert found(registry, "emacs-lisp", "VAR", "(defcustom my-opt t")
        assert not found(registry, "emacs-lisp", "VAR", "(setq x 1)")

    def test_all_covers_core(self, registry):
        for line in ("(defun f ()", "(defvar v)", "(defclass c ()", "(sqlite-open db)"):
            assert found(registry, "emacs-lisp", "ALL", line)

    def test_headings(self, registry):
        pattern = registry.level_pattern("emacs-lisp", 2).unwrap()
        assert re.match(pattern, ";; ** Section")
        assert not re.match(pattern, ";; *** Section")


class TestEss:

    def test_functions(self, registry):
        assert found(registry, "ess", "FUN", "f <- function(x) {")
        assert found(registry, "ess", "FUN", "my.fun = function (a, b)")

    def test_variables_exclude_functions(self, registry):
        assert found(registry, "ess", "VAR", "x <- 1")
        assert found(registry, "ess", "VAR", "total <<- 0")
        assert not found(registry, "ess", "VAR", "f <- function(x) x")

    def test_objects_and_db(self, registry):
        assert found(registry, "ess", "OBJ", 'setClass("Person", representation(name = "character"))')
        assert found(registry, "ess", "DB", "con <- dbConnect(RSQLite::SQLite())")

    def test_library(self, registry):
        assert registry.lookup_key("ess", "l").keyword == "library"
        assert found(registry, "ess", "library", "library(dplyr)")


class TestPicoLisp:

    def test_functions(self, registry):
        assert found(registry, "picolisp", "FUN", "(de square (N)")
        assert found(registry, "picolisp", "FUN", "(dm T (Nm)")
        assert not found(registry, "picolisp", "FUN", "(default *X 1)")

    def test_db(self, registry):
        assert found(registry, "picolisp", "DB", "(rel nm (+Need +Sn +Idx +String))")
        assert found(registry, "picolisp", "DB", "(pool \"db/\")")

    def test_headings(self, registry):
        assert re.match(registry.level_pattern("picolisp", 1).unwrap(), "# * Top")


class TestOrg:

    def test_headings_use_table(self, registry):
        profile = registry.get_profile("org")
        assert profile.headings.uses_table
        pattern = registry.level_pattern("org", 2).unwrap()
        assert re.match(pattern, "** Second")
        assert not re.match(pattern, "*** Third")

    def test_source_blocks(self, registry):
        assert found(registry, "org", "FUN", "#+BEGIN_SRC emacs-lisp")
        assert found(registry, "org", "FUN", "  #+begin_src python")
        assert found(registry, "org", "DB", "#+begin_src sqlite :db test.db")
        assert not found(registry, "org", "DB", "#+begin_src python")

    def test_tables(self, registry):
        assert found(registry, "org", "OBJ", "| a | b |")

    def test_todo(self, registry):
        assert found(registry, "org", "todo", "** TODO write tests")
        assert not found(registry, "org", "todo", "** DONE write tests")
        assert found(registry, "org", "done", "** DONE write tests")

    def test_level_and_todo_combined(self, registry):
        text = "* Top\n** TODO task\n*** Deep\n*** TODO deep task\n"
        navigator = Navigator(registry, InMemorySourceProvider({"notes.org": text}))
        outcome = navigator.show_headers_and_keyword("org", 1, "todo")

        assert [e.line_number for e in outcome.view] == [1, 2, 4]


class TestPython:

    def test_functions(self, registry):
        assert found(registry, "python", "FUN", "def main():")
        assert found(registry, "python", "FUN", "    async def fetch(self):")

    def test_variables(self, registry):
        assert found(registry, "python", "VAR", "MAX_LEVEL = 8")
        assert found(registry, "python", "VAR", "logger: Logger = get()")
        assert not found(registry, "python", "VAR", "    local = 1")
        assert not found(registry, "python", "VAR", "x == y")

    def test_tests(self, registry):
        assert found(registry, "python", "test", "def test_something():")
        assert found(registry, "python", "test", "class TestThing:")


def test_registered_profiles_are_copies():
    registry = PatternRegistry()
    register_builtins(registry)
    registry.register("emacs-lisp", "use-package", "P", r"^\s*\(use-package\s")

    assert "use-package" not in EMACS_LISP_PROFILE.search_patterns
    assert registry.get_profile("emacs-lisp") is not EMACS_LISP_PROFILE
