"""
Tests for the Pattern Registry — keyword, key and pattern resolution.

Tests validate:
- Registration and key uniqueness
- Typed lookup outcomes (never uncontrolled exceptions)
- Deferred patterns evaluated per lookup
- Profile routing by extension
"""

import re
from pathlib import Path

import pytest

from navi.core.errors import (
    KeyNotBound,
    KeywordNotRegistered,
    LanguageNotRegistered,
    PatternCompileError,
)
from navi.core.expressions import AnyOf, KeywordRef, PatternExpr
from navi.core.keywords import CoreKeyword, as_core, normalize_keyword
from navi.core.profile import LanguageProfile
from navi.core.registry import LookupStatus, PatternRegistry


@pytest.fixture
def reg():
    registry = PatternRegistry()
    registry.register("emacs-lisp", CoreKeyword.FUN, "f", r"^\s*\(defun")
    registry.register("emacs-lisp", CoreKeyword.VAR, "v", r"^\s*\(defvar")
    return registry


# =============================================================================
# Keywords
# =============================================================================

class TestKeywords:

    def test_core_names(self):
        assert [k.value for k in CoreKeyword] == ["ALL", "FUN", "VAR", "OBJ", "DB"]

    def test_normalize(self):
        assert normalize_keyword(CoreKeyword.FUN) == "FUN"
        assert normalize_keyword(":FUN") == "FUN"
        assert normalize_keyword(":defun") == "defun"
        assert normalize_keyword(" todo ") == "todo"

    def test_normalize_empty_raises(self):
        with pytest.raises(ValueError):
            normalize_keyword(":")

    def test_as_core(self):
        assert as_core("DB") is CoreKeyword.DB
        assert as_core("defun") is None

    def test_descriptions(self):
        assert CoreKeyword.FUN.description == "functions"


# =============================================================================
# Registration
# =============================================================================

class TestRegistration:

    def test_register_creates_profile(self, reg):
        assert "emacs-lisp" in reg
        assert len(reg) == 1
        assert reg.get_profile("emacs-lisp").binding_for("FUN") == "f"

    def test_keyword_spellings_are_equivalent(self, reg):
        assert reg.lookup("emacs-lisp", ":FUN").pattern == reg.lookup("emacs-lisp", CoreKeyword.FUN).pattern

    def test_key_conflict_raises(self, reg):
        with pytest.raises(ValueError, match="already bound"):
            reg.register("emacs-lisp", "defmacro", "f", r"^\(defmacro")

    def test_rebinding_same_keyword_allowed(self, reg):
        reg.register("emacs-lisp", "FUN", "F", r"^\(defun\*?")
        assert reg.lookup_binding("emacs-lisp", "FUN").binding == "F"
        assert reg.reverse_lookup_keyword("emacs-lisp", "f").status is LookupStatus.KEY_NOT_BOUND

    def test_same_key_in_other_language_allowed(self, reg):
        reg.register("ess", "FUN", "f", r"function\s*\(")
        assert reg.lookup_key("ess", "f").found

    @pytest.mark.parametrize("binding", ["1", "8", "ab", ""])
    def test_invalid_binding_raises(self, reg, binding):
        with pytest.raises(ValueError):
            reg.register("emacs-lisp", "defmacro", binding, r"^\(defmacro")

    def test_empty_pattern_raises(self, reg):
        with pytest.raises(ValueError, match="must not be empty"):
            reg.register("emacs-lisp", "defmacro", "M", "")

    def test_pattern_without_binding_is_legal(self, reg):
        reg.register("emacs-lisp", "autoload", None, r"^;;;###autoload")

        assert reg.lookup("emacs-lisp", "autoload").found
        assert reg.lookup_binding("emacs-lisp", "autoload").status is LookupStatus.KEYWORD_NOT_REGISTERED
        assert reg.get_profile("emacs-lisp").unbound_keywords() == ["autoload"]

    def test_unregister(self, reg):
        assert reg.unregister("emacs-lisp", "VAR") is True
        assert reg.unregister("emacs-lisp", "VAR") is False
        assert reg.unregister("cobol", "VAR") is False
        assert reg.lookup("emacs-lisp", "VAR").status is LookupStatus.KEYWORD_NOT_REGISTERED

    def test_add_profile_rejects_duplicate_keys(self):
        profile = LanguageProfile(
            name="broken",
            key_bindings={"FUN": "f", "VAR": "f"},
            search_patterns={"FUN": "a", "VAR": "b"},
        )
        with pytest.raises(ValueError, match="bound to both"):
            PatternRegistry([profile])

    def test_extension_conflict_raises(self):
        registry = PatternRegistry([LanguageProfile(name="one", extensions={".x"})])
        with pytest.raises(ValueError, match="already registered"):
            registry.add_profile(LanguageProfile(name="two", extensions={".X"}))

    def test_replacing_profile_releases_extensions(self):
        registry = PatternRegistry([LanguageProfile(name="one", extensions={".x", ".y"})])
        registry.add_profile(LanguageProfile(name="one", extensions={".x"}))
        assert registry.supported_extensions() == {".x"}

    def test_remove_profile(self):
        registry = PatternRegistry([LanguageProfile(name="one", extensions={".x"})])
        assert registry.remove_profile("one") is True
        assert registry.remove_profile("one") is False
        assert registry.get_profile_for_path(Path("a.x")) is None

    def test_profile_for_path(self):
        registry = PatternRegistry([LanguageProfile(name="lisp", extensions={".el"})])
        assert registry.get_profile_for_path(Path("init.EL")).name == "lisp"
        assert registry.get_profile_for_path(Path("init.py")) is None


# =============================================================================
# Lookup outcomes
# =============================================================================

class TestLookup:

    def test_found(self, reg):
        result = reg.lookup("emacs-lisp", "FUN")
        assert result.found
        assert result.status is LookupStatus.FOUND
        assert result.binding == "f"
        assert result.compiled.search("(defun foo ()")

    def test_unregistered_language(self, reg):
        result = reg.lookup("cobol", "FUN")

        assert result.status is LookupStatus.LANGUAGE_NOT_REGISTERED
        assert isinstance(result.error, LanguageNotRegistered)
        assert result.pattern is None

    def test_unregistered_language_is_not_auto_registered(self, reg):
        reg.lookup("cobol", "FUN")
        reg.lookup_binding("cobol", "FUN")
        reg.reverse_lookup_keyword("cobol", "f")
        reg.level_pattern("cobol", 2)

        assert "cobol" not in reg
        assert len(reg) == 1
        assert reg.supported_languages() == ["emacs-lisp"]

    def test_unregistered_keyword(self, reg):
        result = reg.lookup("emacs-lisp", "OBJ")
        assert result.status is LookupStatus.KEYWORD_NOT_REGISTERED
        assert isinstance(result.error, KeywordNotRegistered)
        assert result.message == "keyword 'OBJ' not defined for emacs-lisp"

    @pytest.mark.parametrize("keyword", ["", ":", "  "])
    def test_blank_keyword_is_a_miss(self, reg, keyword):
        result = reg.lookup("emacs-lisp", keyword)
        assert result.status is LookupStatus.KEYWORD_NOT_REGISTERED
        assert isinstance(result.error, KeywordNotRegistered)

        assert reg.lookup_binding("emacs-lisp", keyword).status is LookupStatus.KEYWORD_NOT_REGISTERED

    def test_every_registered_pair_found_every_other_missing(self, reg):
        for keyword in CoreKeyword:
            result = reg.lookup("emacs-lisp", keyword)
            expected = keyword in (CoreKeyword.FUN, CoreKeyword.VAR)
            assert result.found is expected

    def test_reverse_lookup(self, reg):
        assert reg.reverse_lookup_keyword("emacs-lisp", "v").keyword == "VAR"

        miss = reg.reverse_lookup_keyword("emacs-lisp", "q")
        assert miss.status is LookupStatus.KEY_NOT_BOUND
        assert isinstance(miss.error, KeyNotBound)
        assert miss.message == "key 'q' not defined for emacs-lisp"

    def test_lookup_key(self, reg):
        result = reg.lookup_key("emacs-lisp", "f")
        assert result.found
        assert result.keyword == "FUN"
        assert result.pattern == r"^\s*\(defun"

    def test_binding_without_pattern(self):
        registry = PatternRegistry([LanguageProfile(name="l", key_bindings={"FUN": "f"})])
        result = registry.lookup_key("l", "f")
        assert result.status is LookupStatus.KEYWORD_NOT_REGISTERED

    def test_unwrap(self, reg):
        assert reg.lookup("emacs-lisp", "FUN").unwrap() == r"^\s*\(defun"
        with pytest.raises(LanguageNotRegistered):
            reg.lookup("cobol", "FUN").unwrap()
        with pytest.raises(LookupError):
            reg.lookup("emacs-lisp", "DB").unwrap()

    def test_level_pattern(self, reg):
        result = reg.level_pattern("emacs-lisp", 2)
        assert result.found
        assert re.match(result.pattern, "* Heading")


# =============================================================================
# Pattern errors and deferred patterns
# =============================================================================

class CountingExpr(PatternExpr):
    """Expression that records how often it was evaluated."""

    def __init__(self, text):
        self.text = text
        self.calls = 0

    def evaluate(self, resolve):
        self.calls += 1
        return self.text


class TestDeferredPatterns:

    def test_invalid_regex_is_pattern_error(self, reg):
        reg.register("emacs-lisp", "broken", "B", "(unclosed")
        result = reg.lookup("emacs-lisp", "broken")

        assert result.status is LookupStatus.PATTERN_ERROR
        assert isinstance(result.error, PatternCompileError)
        assert result.error.keyword == "broken"

    def test_pattern_error_not_cached(self, reg):
        reg.register("emacs-lisp", "broken", "B", "(unclosed")
        assert reg.lookup("emacs-lisp", "broken").status is LookupStatus.PATTERN_ERROR

        reg.register("emacs-lisp", "broken", "B", "(closed)")
        assert reg.lookup("emacs-lisp", "broken").found

    def test_keyword_refs(self, reg):
        reg.register("emacs-lisp", "ALL", "a", AnyOf((KeywordRef("FUN"), KeywordRef(":VAR"))))
        result = reg.lookup("emacs-lisp", "ALL")

        assert result.pattern == r"(?:^\s*\(defun|^\s*\(defvar)"
        assert result.compiled.search("(defvar x)")

    def test_refs_follow_later_changes(self, reg):
        reg.register("emacs-lisp", "ALL", "a", AnyOf((KeywordRef("FUN"),)))
        reg.register("emacs-lisp", "FUN", "f", r"^\(cl-defun")
        assert reg.lookup("emacs-lisp", "ALL").pattern == r"^\(cl-defun"

    def test_refs_resolve_per_language(self, reg):
        shared = AnyOf((KeywordRef("FUN"),))
        reg.register("emacs-lisp", "ALL", "a", shared)
        reg.register("ess", "FUN", "f", r"function\s*\(")
        reg.register("ess", "ALL", "a", shared)

        assert reg.lookup("emacs-lisp", "ALL").pattern == r"^\s*\(defun"
        assert reg.lookup("ess", "ALL").pattern == r"function\s*\("

    def test_evaluated_on_every_lookup(self, reg):
        expr = CountingExpr("^x")
        reg.register("emacs-lisp", "counted", "c", expr)

        reg.lookup("emacs-lisp", "counted")
        reg.lookup("emacs-lisp", "counted")
        assert expr.calls == 2

    def test_circular_reference(self, reg):
        reg.register("emacs-lisp", "one", "o", KeywordRef("two"))
        reg.register("emacs-lisp", "two", "t", KeywordRef("one"))

        result = reg.lookup("emacs-lisp", "one")
        assert result.status is LookupStatus.PATTERN_ERROR
        assert "circular" in result.message

    def test_reference_to_missing_keyword(self, reg):
        reg.register("emacs-lisp", "ALL", "a", AnyOf((KeywordRef("FUN"), KeywordRef("OBJ"))))
        result = reg.lookup("emacs-lisp", "ALL")
        assert result.status is LookupStatus.PATTERN_ERROR
        assert "'OBJ' is not defined" in result.message

    def test_expression_evaluating_to_empty(self, reg):
        reg.register("emacs-lisp", "nothing", "n", AnyOf(()))
        assert reg.lookup("emacs-lisp", "nothing").status is LookupStatus.PATTERN_ERROR
