"""
Property tests for the derived procedures.
"""

from hypothesis import given, strategies as st
from hypothesis.strategies import composite

from prelisp.lists import append, length, reverse
from prelisp.numeric import gcd, lcm, modulo, quotient, remainder
from prelisp.substrate import (
    NIL, add, from_iterable, is_equal, make_list, mul, set_car, to_python,
)
from prelisp.vectors import list_to_vector, vector_to_list

# ============================================================
# Strategies
# ============================================================

atoms = st.one_of(st.integers(), st.text(max_size=5), st.booleans())


@composite
def lisp_lists(draw, elements=atoms, max_size=20):
    """Proper lists of atoms, occasionally nested one level."""
    items = draw(st.lists(st.one_of(elements, st.lists(elements, max_size=3).map(from_iterable)),
                          max_size=max_size))
    return from_iterable(items)


nonzero = st.integers().filter(lambda n: n != 0)


def sign(n):
    return (n > 0) - (n < 0)


# ============================================================
# Lists
# ============================================================

class TestListProperties:
    """Properties of append, reverse and the vector conversions."""

    @given(lisp_lists(), lisp_lists())
    def test_append_length(self, l1, l2):
        """append's length is the sum of its arguments' lengths."""
        assert length(append(l1, l2)) == length(l1) + length(l2)

    @given(lisp_lists(), st.lists(atoms, min_size=1, max_size=10))
    def test_append_shares_last(self, l1, items):
        """Mutating the last argument shows through the result."""
        l2 = from_iterable(items)
        result = append(l1, l2)
        set_car(l2, "changed")
        tail = result
        for _ in range(length(l1)):
            tail = tail.cdr
        assert tail is l2
        assert tail.car == "changed"

    @given(lisp_lists())
    def test_reverse_twice(self, lst):
        """Reversing twice gives an equal, fresh list."""
        again = reverse(reverse(lst))
        assert is_equal(again, lst)
        if lst is not NIL:
            assert again is not lst

    @given(lisp_lists())
    def test_reverse_matches_python(self, lst):
        assert to_python(reverse(lst)) == list(reversed(to_python(lst)))

    @given(lisp_lists())
    def test_vector_round_trip(self, lst):
        """vector->list after list->vector gives an equal list."""
        assert is_equal(vector_to_list(list_to_vector(lst)), lst)


# ============================================================
# Numbers
# ============================================================

class TestDivisionProperties:
    """Properties of quotient, remainder and modulo on integers."""

    @given(st.integers(), nonzero)
    def test_division_identity(self, x, y):
        """x == y * quotient(x, y) + remainder(x, y)."""
        assert x == add(mul(y, quotient(x, y)), remainder(x, y))

    @given(st.integers(), nonzero)
    def test_remainder_sign(self, x, y):
        """The remainder takes the dividend's sign, or is zero."""
        r = remainder(x, y)
        assert r == 0 or sign(r) == sign(x)
        assert abs(r) < abs(y)

    @given(st.integers(), nonzero)
    def test_modulo_sign(self, x, y):
        """The modulo takes the divisor's sign, or is zero."""
        m = modulo(x, y)
        assert m == 0 or sign(m) == sign(y)
        assert abs(m) < abs(y)
        assert (x - m) % y == 0

    @given(st.integers(min_value=-10 ** 6, max_value=10 ** 6),
           st.integers(min_value=-10 ** 6, max_value=10 ** 6))
    def test_gcd_lcm_product(self, a, b):
        """gcd(a, b) * lcm(a, b) == |a * b|."""
        assert gcd(a, b) * lcm(a, b) == abs(a * b)

    @given(st.integers(min_value=1, max_value=10 ** 6), st.integers(min_value=1, max_value=10 ** 6))
    def test_gcd_divides(self, a, b):
        g = gcd(a, b)
        assert a % g == 0
        assert b % g == 0


class TestScenarios:
    """Concrete examples of the derived procedures."""

    def test_gcd_lcm(self):
        assert gcd(12, 18) == 6
        assert lcm(4, 6) == 12

    def test_small_list(self):
        assert to_python(append(make_list(1), make_list(2))) == [1, 2]
