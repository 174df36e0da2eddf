"""Tests for the reader and printer."""

import math
from fractions import Fraction

import pytest

from prelisp.errors import LispSyntaxError
from prelisp.reader import QUOTE, format_sexpr, parse_all, parse_atom, parse_sexpr, tokenize
from prelisp.substrate import NIL, Symbol, cons, make_list, to_python


class TestTokenize:
    """Tests for tokenization."""

    def test_kinds(self):
        tokens = tokenize("(a #(1) 'b \"s\")")
        assert [kind for kind, _ in tokens] == [
            "open", "atom", "vector", "atom", "close", "quote", "atom", "string", "close",
        ]

    def test_comments_dropped(self):
        assert tokenize("; nothing here\n42 ; trailing") == [("atom", "42")]

    def test_unterminated_string(self):
        with pytest.raises(LispSyntaxError):
            tokenize('"abc')


class TestAtoms:
    """Tests for atom parsing."""

    def test_integers(self):
        assert parse_atom("42") == 42
        assert parse_atom("-7") == -7
        assert parse_atom("+3") == 3

    def test_rationals(self):
        assert parse_atom("1/3") == Fraction(1, 3)
        assert parse_atom("4/2") == 2
        assert isinstance(parse_atom("4/2"), int)

    def test_zero_denominator(self):
        with pytest.raises(LispSyntaxError):
            parse_atom("1/0")

    def test_floats(self):
        assert parse_atom("2.5") == 2.5
        assert parse_atom("1e3") == 1000.0
        assert parse_atom(".5") == 0.5
        assert parse_atom("+inf.0") == math.inf
        assert math.isnan(parse_atom("+nan.0"))

    def test_complex(self):
        assert parse_atom("3+4i") == 3 + 4j
        assert parse_atom("-2.5i") == -2.5j

    def test_booleans(self):
        assert parse_atom("#t") is True
        assert parse_atom("#false") is False

    def test_symbols(self):
        """Operator-like names stay symbols."""
        for name in ("+", "-", "...", "list->vector", "call/cc", "set-car!", "inf", "1+"):
            assert parse_atom(name) is Symbol(name)


class TestParse:
    """Tests for parse_sexpr and parse_all."""

    def test_list(self):
        assert to_python(parse_sexpr("(1 (2 3) ())")) == [1, [2, 3], []]

    def test_empty_list(self):
        assert parse_sexpr("()") is NIL

    def test_dotted(self):
        p = parse_sexpr("(1 . 2)")
        assert p.car == 1
        assert p.cdr == 2

    def test_quote(self):
        q = parse_sexpr("'a")
        assert q.car is QUOTE
        assert q.cdr.car is Symbol("a")

    def test_vector(self):
        assert parse_sexpr("#(1 #(2) x)") == [1, [2], Symbol("x")]

    def test_string_escapes(self):
        assert parse_sexpr(r'"a\nb\"c"') == 'a\nb"c'

    def test_blank(self):
        assert parse_sexpr("   ") is None
        assert parse_sexpr("; only a comment") is None

    def test_errors(self):
        with pytest.raises(LispSyntaxError):
            parse_sexpr("(1 2")
        with pytest.raises(LispSyntaxError):
            parse_sexpr(")")
        with pytest.raises(LispSyntaxError):
            parse_sexpr("1 2")
        with pytest.raises(LispSyntaxError):
            parse_sexpr("( . 1)")
        with pytest.raises(LispSyntaxError):
            parse_sexpr("(1 . 2 3)")

    def test_parse_all(self):
        data = parse_all("1 (2) 'x")
        assert len(data) == 3
        assert data[0] == 1


class TestFormat:
    """Tests for the printer."""

    def test_atoms(self):
        assert format_sexpr(NIL) == "()"
        assert format_sexpr(True) == "#t"
        assert format_sexpr(False) == "#f"
        assert format_sexpr(None) == "#<unspecified>"
        assert format_sexpr(Symbol("foo")) == "foo"
        assert format_sexpr(Fraction(1, 3)) == "1/3"
        assert format_sexpr(2.5) == "2.5"
        assert format_sexpr(-math.inf) == "-inf.0"
        assert format_sexpr(3 + 4j) == "3.0+4.0i"
        assert format_sexpr(1 - 2j) == "1.0-2.0i"

    def test_strings(self):
        """Strings are quoted when written and raw when displayed."""
        assert format_sexpr('a"b') == '"a\\"b"'
        assert format_sexpr('a"b', write=False) == 'a"b'

    def test_lists(self):
        assert format_sexpr(make_list(1, make_list(2, 3))) == "(1 (2 3))"
        assert format_sexpr(cons(1, 2)) == "(1 . 2)"
        assert format_sexpr(make_list(QUOTE, Symbol("a"))) == "'a"
        assert format_sexpr([1, make_list(2)]) == "#(1 (2))"

    def test_procedures(self):
        def gcd():
            pass
        assert format_sexpr(gcd) == "#<procedure gcd>"

    def test_pair_repr(self):
        """Pairs print themselves in list syntax."""
        assert repr(make_list(1, "a")) == '(1 "a")'

    @pytest.mark.parametrize("text", [
        "(1 2 3)", "(a . b)", "#(1 (2) x)", "'(1 2)", '("s" #t #f)', "(1/2 2.5 -3)", "()",
    ])
    def test_read_print(self, text):
        """Printed data reads back as the same text."""
        assert format_sexpr(parse_sexpr(text)) == text
