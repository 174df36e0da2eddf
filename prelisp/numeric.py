"""
Numeric derived operations for PRELISP.

PRELISP - Prelude of derived procedures for a small Lisp

Everything here is composed from the substrate's comparisons, arithmetic
and rounding primitives, so exactness flows through unchanged: exact
operands give exact results and inexact operands give inexact ones.

Division family relationships (for integer-valued x and non-zero y):
    x = y * (quotient x y) + (remainder x y)
    sign of (remainder x y) is the sign of x, or zero
    sign of (modulo x y) is the sign of y, or zero
"""

import math

from .control import negate
from .errors import LispDomainError, LispTypeError
from .substrate import (
    NumericType, ValueType,
    add, atan, ceiling, cos, div, floor, ge, gt, imag_part, is_exact, is_integer, is_number,
    le, lt, make_rectangular, mul, num_eq, real_part, round_, sin, sqrt, sub,
    type_name,
)


# ============================================================
# Equality, sign and parity
# ============================================================

def num_equal(*args: ValueType) -> bool:
    """
    (= x ...): True when every argument is a number equal to the first.

    Non-numbers make the result False instead of raising, even when they
    would be equal to each other: (= 'a 'a) => #f.
    """
    if not args:
        return True
    first = args[0]
    if not is_number(first):
        return False
    for arg in args[1:]:
        if not is_number(arg) or not num_eq(first, arg):
            return False
    return True


def is_positive(x: NumericType) -> bool:
    return gt(x, 0)


def is_negative(x: NumericType) -> bool:
    return lt(x, 0)


def is_zero(x: NumericType) -> bool:
    return num_eq(x, 0)


def is_even(n: NumericType) -> bool:
    return is_zero(remainder(n, 2))


is_odd = negate(is_even)


# ============================================================
# Extremes
# ============================================================

def maximum(first: NumericType, *rest: NumericType) -> NumericType:
    """
    (max x ...): right fold with pairwise comparison.

    On ties the left operand wins, which decides whether an exact or an
    inexact representation survives: (max 1 1.0) => 1.
    """
    args = (first,) + rest
    result = args[-1]
    for x in reversed(args[:-1]):
        if ge(x, result):
            result = x
    return result


def minimum(first: NumericType, *rest: NumericType) -> NumericType:
    """(min x ...): like max, the left operand wins ties."""
    args = (first,) + rest
    result = args[-1]
    for x in reversed(args[:-1]):
        if le(x, result):
            result = x
    return result


def abs_(x: NumericType) -> NumericType:
    if is_negative(x):
        return sub(x)
    return x


def square(x: NumericType) -> NumericType:
    return mul(x, x)


# ============================================================
# Integer division family
# ============================================================

def quotient(x: NumericType, y: NumericType) -> NumericType:
    """
    Divide and round toward zero.

    The true quotient is floored when positive and ceilinged otherwise,
    so (quotient -7 2) => -3 and (quotient 7 2) => 3.
    """
    q = div(x, y)
    if gt(q, 0):
        return floor(q)
    return ceiling(q)


def _check_integral(who: str, *args: ValueType) -> None:
    for arg in args:
        if not is_integer(arg):
            shown = repr(arg) if is_number(arg) else type_name(arg)
            raise LispTypeError(f"{who}: argument must be an integer, got {shown}")


def remainder(x: NumericType, y: NumericType) -> NumericType:
    """
    (remainder x y): x - y * (quotient x y), on rounded operands.

    Only integer-valued operands (3 or 3.0) are accepted. The result has
    the sign of x: (remainder -7 2) => -1.
    """
    _check_integral("remainder", x, y)
    n, d = round_(x), round_(y)
    return sub(n, mul(d, quotient(n, d)))


def modulo(x: NumericType, y: NumericType) -> NumericType:
    """
    (modulo x y): remainder shifted to carry the sign of y.

    (modulo -7 2) => 1, (modulo 7 -2) => -1, (modulo 6 -3) => 0.
    """
    r = remainder(x, y)
    if not is_zero(r) and is_negative(x) != is_negative(y):
        r = add(r, round_(y))
    return r


def gcd(a: NumericType, b: NumericType) -> NumericType:
    """Greatest common divisor of two integers, always non-negative."""
    while not is_zero(b):
        a, b = b, remainder(a, b)
    return abs_(a)


def lcm(a: NumericType, b: NumericType) -> NumericType:
    """Least common multiple of two integers; 0 if either is 0."""
    if is_zero(a) or is_zero(b):
        return mul(a, b, 0)
    return quotient(abs_(mul(a, b)), gcd(a, b))


def factorial(n: NumericType) -> NumericType:
    """
    n! by iterative accumulation, with 0! = 1.

    Raises:
        LispTypeError: If n is not a number
        LispDomainError: If n is negative or not integer-valued
    """
    if not is_number(n):
        raise LispTypeError(f"factorial: argument must be a number, got {type_name(n)}")
    if not is_integer(n) or is_negative(n):
        raise LispDomainError(f"factorial: argument must be a non-negative integer, got {n!r}")
    acc = 1
    while not is_zero(n):
        acc = mul(acc, n)
        n = sub(n, 1)
    return acc


# ============================================================
# Complex numbers in polar form
# ============================================================

def make_polar(magnitude_: NumericType, angle_: NumericType) -> NumericType:
    """Complex number with the given magnitude and angle (radians)."""
    return make_rectangular(mul(magnitude_, cos(angle_)), mul(magnitude_, sin(angle_)))


def magnitude(z: NumericType) -> NumericType:
    """Euclidean norm of (real-part, imag-part): (magnitude -3) => 3."""
    return sqrt(add(square(real_part(z)), square(imag_part(z))))


def angle(z: NumericType) -> NumericType:
    """
    Argument of z, via the two-argument arctangent.

    A real z (exact zero imaginary part) gives 0 or pi directly, so exact
    values too large for a float still have an angle.
    """
    if is_exact(imag_part(z)):
        return math.pi if is_negative(z) else 0
    return atan(imag_part(z), real_part(z))
