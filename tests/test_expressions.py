"""
Tests for deferred pattern expressions.
"""

import re

import pytest

from navi.core.errors import PatternCompileError
from navi.core.expressions import (
    AnyOf,
    Concat,
    KeywordRef,
    Quoted,
    Raw,
    WordsOf,
    evaluate,
    parse_expression,
)


def no_refs(name):
    raise AssertionError(f"unexpected reference to {name}")


class TestEvaluate:

    def test_plain_string(self):
        assert evaluate(r"^\s*x", no_refs) == r"^\s*x"

    def test_raw_and_quoted(self):
        assert Raw("a.b").evaluate(no_refs) == "a.b"
        assert Quoted("a.b").evaluate(no_refs) == r"a\.b"

    def test_concat(self):
        expr = Concat((Raw("^"), Quoted("(defun"), Raw(r"\s")))
        assert expr.evaluate(no_refs) == r"^\(defun\s"

    def test_any_of_flattens(self):
        expr = AnyOf((Raw("a"), AnyOf((Raw("b"), Raw("c")))))
        assert expr.evaluate(no_refs) == "(?:a|b|c)"

    def test_words_longest_first(self):
        expr = WordsOf(("defun", "defun*"), prefix=r"^\(", suffix=r"\s")
        pattern = expr.evaluate(no_refs)

        assert pattern == r"^\((?:defun\*|defun)\s"
        assert re.match(pattern, "(defun* foo")
        assert re.match(pattern, "(defun foo")

    def test_words_empty_raises(self):
        with pytest.raises(PatternCompileError):
            WordsOf(()).evaluate(no_refs)

    def test_keyword_ref_uses_resolver(self):
        expr = AnyOf((KeywordRef(":FUN"), Raw("x")))
        assert expr.evaluate(lambda name: f"<{name}>") == "(?:<FUN>|x)"

    def test_references(self):
        expr = AnyOf((KeywordRef("FUN"), Concat((KeywordRef("VAR"), Raw("x")))))
        assert expr.references() == ("FUN", "VAR")

    def test_unsupported_source(self):
        with pytest.raises(PatternCompileError):
            evaluate(42, no_refs)


class TestParseExpression:

    def test_string(self):
        assert parse_expression("^x") == "^x"

    def test_forms(self):
        assert parse_expression({"raw": "a"}) == Raw("a")
        assert parse_expression({"quote": "a.b"}) == Quoted("a.b")
        assert parse_expression({"ref": "FUN"}) == KeywordRef("FUN")
        assert parse_expression({"words": ["de", "dm"], "prefix": "^"}) == WordsOf(("de", "dm"), prefix="^")

    def test_nested(self):
        expr = parse_expression({"any": [{"ref": "FUN"}, {"concat": ["^", {"quote": "("}]}]})
        assert expr == AnyOf((KeywordRef("FUN"), Concat(("^", Quoted("(")))))

    @pytest.mark.parametrize("data", [42, ["a"], {"unknown": 1}, {"any": "not-a-list"}])
    def test_malformed(self, data):
        with pytest.raises(ValueError):
            parse_expression(data)
