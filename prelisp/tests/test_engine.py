"""Tests for PreludeEngine and the expression builder."""

from fractions import Fraction

import pytest

from prelisp import (
    E, LIST_PRELUDE, NUMERIC_PRELUDE, NIL, LispNameError, LispSyntaxError, LispTypeError,
    LispIndexError, PreludeEngine, Symbol,
)
from prelisp.substrate import to_python


class TestExprBuilder:
    """Tests for the E builder."""

    def test_parse(self):
        expr = E("(gcd 12 18)")
        assert expr.car is Symbol("gcd")

    def test_list_and_sym(self):
        expr = E.list(E.sym("gcd"), 12, 18)
        assert repr(expr) == "(gcd 12 18)"

    def test_syms(self):
        a, b = E.syms("a", "b")
        assert a is Symbol("a")
        assert b is Symbol("b")

    def test_call_and_quote(self):
        expr = E.call("length", E.quote(E.list(1, 2, 3)))
        assert repr(expr) == "(length '(1 2 3))"

    def test_vector(self):
        assert E.vector(1, 2) == [1, 2]


class TestEvaluation:
    """Tests for evaluating expressions."""

    def setup_method(self):
        self.engine = PreludeEngine()

    def test_self_evaluating(self):
        assert self.engine("42") == 42
        assert self.engine('"s"') == "s"
        assert self.engine("#t") is True
        assert self.engine("#(1 2)") == [1, 2]

    def test_quote(self):
        result = self.engine("'(1 2 3)")
        assert to_python(result) == [1, 2, 3]
        assert self.engine("'a") is Symbol("a")

    def test_symbol_lookup(self):
        assert self.engine("gcd") is self.engine["gcd"]

    def test_nested_calls(self):
        assert self.engine("(+ (* 2 3) (gcd 12 18))") == 12

    def test_map_variadic(self):
        assert self.engine.evaluate_to_python("(map + '(1 2 3) '(10 20 30))") == [11, 22, 33]

    def test_assoc(self):
        result = self.engine("(assoc 2 '((1 a) (2 b)))")
        assert repr(result) == "(2 b)"
        assert self.engine("(assoc 9 '((1 a) (2 b)))") is False

    def test_list_procedures(self):
        assert self.engine.evaluate_to_python("(reverse (append '(1 2) '(3)))") == [3, 2, 1]
        assert self.engine("(list-ref '(a b c) 1)") is Symbol("b")
        assert self.engine("(length '())") == 0

    def test_numeric_procedures(self):
        assert self.engine("(lcm 4 6)") == 12
        assert self.engine("(factorial 5)") == 120
        assert self.engine("(max 3 7 2)") == 7
        assert self.engine("(modulo -7 2)") == 1
        assert self.engine("(/ 1 3)") == Fraction(1, 3)

    def test_vectors(self):
        assert self.engine("(list->vector '(1 2))") == [1, 2]
        assert to_python(self.engine("(vector->list #(1 2))")) == [1, 2]
        assert self.engine("(vector-fill! (make-vector 2 0) 7)") == [7, 7]

    def test_higher_order_with_prelude_procedures(self):
        assert self.engine.evaluate_to_python("(filter (negate even?) '(1 2 3 4 5))") == [1, 3, 5]
        assert self.engine("(foldr cons '() '(1 2))") is not NIL

    def test_call_cc_receives_procedure(self):
        """The continuation handed to the receiver is a procedure."""
        assert self.engine("(call/cc procedure?)") == True

    def test_call_cc_escape(self):
        """Invoking the continuation abandons the surrounding call."""
        self.engine.define("escape-with-7", lambda k: k(7))
        assert self.engine("(+ 1 (call/cc escape-with-7))") == 8

    def test_unbound_name(self):
        with pytest.raises(LispNameError):
            self.engine("(no-such-procedure 1)")

    def test_not_a_procedure(self):
        with pytest.raises(LispTypeError):
            self.engine("(1 2 3)")

    def test_bad_quote(self):
        with pytest.raises(LispTypeError):
            self.engine("(quote 1 2)")

    def test_improper_call(self):
        with pytest.raises(LispTypeError):
            self.engine("(+ 1 . 2)")

    def test_syntax_error(self):
        with pytest.raises(LispSyntaxError):
            self.engine("(+ 1")

    def test_errors_propagate(self):
        with pytest.raises(LispIndexError):
            self.engine("(car '())")


class TestEngineBindings:
    """Tests for prelude management on the engine."""

    def test_default_is_full(self):
        engine = PreludeEngine()
        assert "cons" in engine
        assert "list->vector" in engine
        assert "call/cc" in engine

    def test_custom_prelude(self):
        engine = PreludeEngine(prelude=NUMERIC_PRELUDE)
        assert "gcd" in engine
        assert "map" not in engine
        assert len(engine) == len(NUMERIC_PRELUDE)

    def test_define_does_not_touch_table(self):
        engine = PreludeEngine(prelude=LIST_PRELUDE)
        engine.define("double", lambda x: x * 2)
        assert engine("(double 21)") == 42
        assert "double" not in LIST_PRELUDE

    def test_define_requires_procedure(self):
        with pytest.raises(LispTypeError):
            PreludeEngine().define("x", 5)

    def test_with_prelude_chains(self):
        engine = PreludeEngine().with_prelude(NUMERIC_PRELUDE).define("sq", lambda x: x * x)
        assert engine("(sq (gcd 6 4))") == 4
        assert "cons" not in engine

    def test_lookup_missing(self):
        with pytest.raises(LispNameError):
            PreludeEngine(prelude={})["gcd"]

    def test_union(self):
        numeric = PreludeEngine(prelude=NUMERIC_PRELUDE)
        lists = PreludeEngine(prelude=LIST_PRELUDE)
        both = numeric | lists
        assert "gcd" in both
        assert "assoc" in both
        assert "assoc" not in numeric

    def test_copy_is_independent(self):
        engine = PreludeEngine(prelude=NUMERIC_PRELUDE)
        copy = engine.copy()
        copy.define("extra", abs)
        assert "extra" in copy
        assert "extra" not in engine

    def test_names_sorted(self):
        names = PreludeEngine(prelude=NUMERIC_PRELUDE).names()
        assert names == sorted(names)
        assert "factorial" in names

    def test_iter_and_repr(self):
        engine = PreludeEngine(prelude={"id": lambda x: x})
        assert [name for name, _ in engine] == ["id"]
        assert repr(engine) == "PreludeEngine(1 procedures)"
