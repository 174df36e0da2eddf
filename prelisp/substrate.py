"""
Primitive substrate for PRELISP.

PRELISP - Prelude of derived procedures for a small Lisp

This module supplies the host primitives that every derived procedure is
written against: pairs and the empty list, interned symbols, vectors,
the numeric tower, the three equality predicates, procedure application,
one-shot continuations and textual output.

Representation:
    Pair        - mutable two-slot cell (car/cdr), identity-distinct
    NIL         - the unique empty-list sentinel
    Symbol      - interned, so eq? works by identity
    vector      - a Python list
    number      - int and Fraction are exact, float and complex inexact
    boolean     - True / False (never numbers, despite Python's bool)
    procedure   - any Python callable

No derived procedure reaches past these functions into the
representation, except where Pair slots are read directly in tight
traversal loops.
"""

import cmath
import functools
import math
import sys
from fractions import Fraction
from typing import Any, Callable, Dict, Iterable, List, Optional, TextIO, Union

from .errors import ContinuationError, LispDomainError, LispIndexError, LispTypeError

# Type aliases
NumericType = Union[int, Fraction, float, complex]
ValueType = Any

# Value returned by procedures whose result is unspecified
UNSPECIFIED = None


# ============================================================
# Empty list, pairs and symbols
# ============================================================

class _Nil:
    """
    Singleton empty list.

    NIL is falsy so Python callers can write ``if lst:``, but it is never
    equal to ``False``: derived procedures test for it with ``is_null``.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __len__(self) -> int:
        return 0

    def __iter__(self):
        return iter(())

    def __repr__(self) -> str:
        return "()"


# Singleton instance
NIL = _Nil()


class Pair:
    """
    A mutable cell with a head (car) and a tail (cdr).

    Pairs compare by identity. Iterating a pair yields the elements of
    the list it starts, stopping at the first tail that is not a pair.
    """

    __slots__ = ('car', 'cdr')

    def __init__(self, car: ValueType, cdr: ValueType):
        self.car = car
        self.cdr = cdr

    def __iter__(self):
        node = self
        while isinstance(node, Pair):
            yield node.car
            node = node.cdr

    def __repr__(self) -> str:
        from .reader import format_sexpr
        return format_sexpr(self)


class Symbol:
    """
    Interned symbol: ``Symbol("a") is Symbol("a")``.

    Example:
        quote = Symbol("quote")
        str(quote)  # => "quote"
    """

    __slots__ = ('name',)

    _table: Dict[str, 'Symbol'] = {}

    def __new__(cls, name: str):
        existing = cls._table.get(name)
        if existing is not None:
            return existing
        symbol = super().__new__(cls)
        symbol.name = name
        cls._table[name] = symbol
        return symbol

    def __repr__(self) -> str:
        return f"Symbol({self.name!r})"

    def __str__(self) -> str:
        return self.name


def type_name(obj: ValueType) -> str:
    """Name the Lisp type of a value, for error messages."""
    if obj is NIL:
        return "empty list"
    if isinstance(obj, Pair):
        return "pair"
    if isinstance(obj, Symbol):
        return "symbol"
    if isinstance(obj, bool):
        return "boolean"
    if is_number(obj):
        return "number"
    if isinstance(obj, str):
        return "string"
    if isinstance(obj, list):
        return "vector"
    if callable(obj):
        return "procedure"
    return type(obj).__name__


def cons(head: ValueType, tail: ValueType) -> Pair:
    """Allocate a fresh pair."""
    return Pair(head, tail)


def car(obj: ValueType) -> ValueType:
    """
    Return the head of a pair.

    Raises:
        LispIndexError: If obj is the empty list
        LispTypeError: If obj is not a pair
    """
    if isinstance(obj, Pair):
        return obj.car
    if obj is NIL:
        raise LispIndexError("car: argument is the empty list")
    raise LispTypeError(f"car: argument must be a pair, got {type_name(obj)}")


def cdr(obj: ValueType) -> ValueType:
    """
    Return the tail of a pair.

    Raises:
        LispIndexError: If obj is the empty list
        LispTypeError: If obj is not a pair
    """
    if isinstance(obj, Pair):
        return obj.cdr
    if obj is NIL:
        raise LispIndexError("cdr: argument is the empty list")
    raise LispTypeError(f"cdr: argument must be a pair, got {type_name(obj)}")


def set_car(pair: ValueType, value: ValueType) -> None:
    """Overwrite the head slot of a pair in place."""
    if not isinstance(pair, Pair):
        raise LispTypeError(f"set-car!: argument must be a pair, got {type_name(pair)}")
    pair.car = value


def set_cdr(pair: ValueType, value: ValueType) -> None:
    """Overwrite the tail slot of a pair in place."""
    if not isinstance(pair, Pair):
        raise LispTypeError(f"set-cdr!: argument must be a pair, got {type_name(pair)}")
    pair.cdr = value


def is_pair(obj: ValueType) -> bool:
    return isinstance(obj, Pair)


def is_null(obj: ValueType) -> bool:
    return obj is NIL


def is_symbol(obj: ValueType) -> bool:
    return isinstance(obj, Symbol)


def is_string(obj: ValueType) -> bool:
    return isinstance(obj, str)


def is_boolean(obj: ValueType) -> bool:
    return isinstance(obj, bool)


def from_iterable(items: Iterable, tail: ValueType = NIL) -> ValueType:
    """
    Build a list from any Python iterable.

    Args:
        items: Elements, in order
        tail: Final tail (NIL for a proper list)

    Example:
        from_iterable([1, 2, 3])  # => (1 2 3)
    """
    result = tail
    for item in reversed(list(items)):
        result = Pair(item, result)
    return result


def make_list(*items: ValueType) -> ValueType:
    """Build a proper list of the given items: make_list(1, 2) => (1 2)."""
    return from_iterable(items)


def to_python(value: ValueType) -> ValueType:
    """
    Convert proper lists (recursively) into Python lists.

    Vectors are converted element-wise and stay Python lists; atoms are
    returned unchanged. Improper lists raise LispTypeError.

    Example:
        to_python(make_list(1, make_list(2, 3)))  # => [1, [2, 3]]
    """
    if value is NIL:
        return []
    if isinstance(value, Pair):
        items = []
        node = value
        while isinstance(node, Pair):
            items.append(to_python(node.car))
            node = node.cdr
        if node is not NIL:
            raise LispTypeError("to_python: improper list")
        return items
    if isinstance(value, list):
        return [to_python(item) for item in value]
    return value


# ============================================================
# Vectors
# ============================================================

def _check_index(who: str, k: ValueType) -> int:
    if isinstance(k, bool) or not isinstance(k, int):
        raise LispTypeError(f"{who}: index must be an exact integer, got {type_name(k)}")
    return k


def _check_vector(who: str, v: ValueType) -> List:
    if not isinstance(v, list):
        raise LispTypeError(f"{who}: argument must be a vector, got {type_name(v)}")
    return v


def make_vector(k: int, fill: ValueType = UNSPECIFIED) -> List:
    """Allocate a vector of k slots, each holding fill."""
    _check_index("make-vector", k)
    if k < 0:
        raise LispDomainError(f"make-vector: size must be non-negative, got {k}")
    return [fill] * k


def vector_ref(v: List, k: int) -> ValueType:
    _check_vector("vector-ref", v)
    _check_index("vector-ref", k)
    if not 0 <= k < len(v):
        raise LispIndexError(f"vector-ref: index {k} out of range for length {len(v)}")
    return v[k]


def vector_set(v: List, k: int, value: ValueType) -> None:
    _check_vector("vector-set!", v)
    _check_index("vector-set!", k)
    if not 0 <= k < len(v):
        raise LispIndexError(f"vector-set!: index {k} out of range for length {len(v)}")
    v[k] = value


def vector_length(v: List) -> int:
    return len(_check_vector("vector-length", v))


def is_vector(obj: ValueType) -> bool:
    return isinstance(obj, list)


# ============================================================
# Numeric tower
# ============================================================

def is_number(obj: ValueType) -> bool:
    """True for int, Fraction, float and complex, but never for booleans."""
    return isinstance(obj, (int, Fraction, float, complex)) and not isinstance(obj, bool)


is_complex = is_number


def is_real(obj: ValueType) -> bool:
    if not is_number(obj):
        return False
    return not isinstance(obj, complex) or obj.imag == 0


def is_exact(obj: ValueType) -> bool:
    _check_number("exact?", obj)
    return isinstance(obj, (int, Fraction))


def is_integer(obj: ValueType) -> bool:
    """True for integer-valued numbers of either exactness: 3, 3.0, 6/2."""
    if not is_real(obj):
        return False
    if isinstance(obj, complex):
        obj = obj.real
    if isinstance(obj, float):
        return math.isfinite(obj) and obj.is_integer()
    if isinstance(obj, Fraction):
        return obj.denominator == 1
    return True


def _check_number(who: str, obj: ValueType) -> NumericType:
    if not is_number(obj):
        raise LispTypeError(f"{who}: argument must be a number, got {type_name(obj)}")
    return obj


def _check_real(who: str, obj: ValueType) -> NumericType:
    if not is_real(obj):
        raise LispTypeError(f"{who}: argument must be a real number, got {type_name(obj)}")
    if isinstance(obj, complex):
        return obj.real
    return obj


def _normalize(x: NumericType) -> NumericType:
    """Collapse integral Fractions to int."""
    if isinstance(x, Fraction) and x.denominator == 1:
        return x.numerator
    return x


def _overflow_guard(who: str) -> Callable:
    """Report exact values too large for a float as a domain error."""
    def decorate(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def guarded(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except OverflowError as e:
                raise LispDomainError(f"{who}: {e}") from None
        return guarded
    return decorate


@_overflow_guard("+")
def add(*args: NumericType) -> NumericType:
    """(+ x ...): sum, 0 for no arguments."""
    result = 0
    for arg in args:
        result = result + _check_number("+", arg)
    return _normalize(result)


@_overflow_guard("*")
def mul(*args: NumericType) -> NumericType:
    """(* x ...): product, 1 for no arguments."""
    result = 1
    for arg in args:
        result = result * _check_number("*", arg)
    return _normalize(result)


@_overflow_guard("-")
def sub(first: NumericType, *rest: NumericType) -> NumericType:
    """(- x): negation; (- x y ...): left-to-right difference."""
    _check_number("-", first)
    if not rest:
        return -first
    result = first
    for arg in rest:
        result = result - _check_number("-", arg)
    return _normalize(result)


@_overflow_guard("/")
def div(first: NumericType, *rest: NumericType) -> NumericType:
    """
    (/ x): reciprocal; (/ x y ...): left-to-right quotient.

    Exact operands divide exactly: (/ 1 3) is Fraction(1, 3) and (/ 6 3)
    is the integer 2.
    """
    _check_number("/", first)
    if not rest:
        first, rest = 1, (first,)
    result = first
    for arg in rest:
        _check_number("/", arg)
        if arg == 0:
            raise LispDomainError("/: division by zero")
        if isinstance(result, (int, Fraction)) and isinstance(arg, (int, Fraction)):
            result = Fraction(result) / arg
        else:
            result = result / arg
    return _normalize(result)


def num_eq(a: NumericType, b: NumericType) -> bool:
    return _check_number("=", a) == _check_number("=", b)


def lt(a: NumericType, b: NumericType) -> bool:
    return _check_real("<", a) < _check_real("<", b)


def gt(a: NumericType, b: NumericType) -> bool:
    return _check_real(">", a) > _check_real(">", b)


def le(a: NumericType, b: NumericType) -> bool:
    return _check_real("<=", a) <= _check_real("<=", b)


def ge(a: NumericType, b: NumericType) -> bool:
    return _check_real(">=", a) >= _check_real(">=", b)


def _round_with(who: str, x: NumericType, op: Callable) -> NumericType:
    x = _check_real(who, x)
    if isinstance(x, float):
        if not math.isfinite(x):
            return x
        return float(op(x))
    return op(x)


def floor(x: NumericType) -> NumericType:
    """Largest integer not above x, keeping x's exactness."""
    return _round_with("floor", x, math.floor)


def ceiling(x: NumericType) -> NumericType:
    """Smallest integer not below x, keeping x's exactness."""
    return _round_with("ceiling", x, math.ceil)


ceil = ceiling


def round_(x: NumericType) -> NumericType:
    """Nearest integer, ties to even, keeping x's exactness."""
    return _round_with("round", x, round)


@_overflow_guard("sin")
def sin(x: NumericType) -> NumericType:
    if isinstance(_check_number("sin", x), complex):
        return cmath.sin(x)
    return math.sin(x)


@_overflow_guard("cos")
def cos(x: NumericType) -> NumericType:
    if isinstance(_check_number("cos", x), complex):
        return cmath.cos(x)
    return math.cos(x)


@_overflow_guard("atan")
def atan(y: NumericType, x: Optional[NumericType] = None) -> NumericType:
    """(atan z) or the two-argument form (atan y x)."""
    if x is None:
        if isinstance(_check_number("atan", y), complex):
            return cmath.atan(y)
        return math.atan(y)
    return math.atan2(_check_real("atan", y), _check_real("atan", x))


@_overflow_guard("sqrt")
def sqrt(x: NumericType) -> NumericType:
    """
    Principal square root.

    Exact perfect squares give exact roots: (sqrt 16) => 4,
    (sqrt 1/4) => 1/2. Negative reals give complex roots.
    """
    _check_number("sqrt", x)
    if isinstance(x, complex):
        return cmath.sqrt(x)
    if x < 0:
        return cmath.sqrt(x)
    if isinstance(x, int):
        root = math.isqrt(x)
        if root * root == x:
            return root
    elif isinstance(x, Fraction):
        num, den = math.isqrt(x.numerator), math.isqrt(x.denominator)
        if num * num == x.numerator and den * den == x.denominator:
            return _normalize(Fraction(num, den))
    return math.sqrt(x)


@_overflow_guard("make-rectangular")
def make_rectangular(re: NumericType, im: NumericType) -> NumericType:
    """Build re + im*i; an exact zero imaginary part gives a real."""
    _check_real("make-rectangular", re)
    _check_real("make-rectangular", im)
    if isinstance(im, (int, Fraction)) and im == 0:
        return re
    return complex(float(re), float(im))


def real_part(z: NumericType) -> NumericType:
    if isinstance(_check_number("real-part", z), complex):
        return z.real
    return z


def imag_part(z: NumericType) -> NumericType:
    if isinstance(_check_number("imag-part", z), complex):
        return z.imag
    return 0


@_overflow_guard("exact->inexact")
def exact_to_inexact(x: NumericType) -> NumericType:
    _check_number("exact->inexact", x)
    if isinstance(x, (int, Fraction)):
        return float(x)
    return x


def inexact_to_exact(x: NumericType) -> NumericType:
    _check_number("inexact->exact", x)
    if isinstance(x, complex):
        if x.imag != 0:
            raise LispDomainError("inexact->exact: no exact complex numbers")
        x = x.real
    if isinstance(x, float):
        if not math.isfinite(x):
            raise LispDomainError(f"inexact->exact: no exact representation of {x}")
        return _normalize(Fraction(x))
    return x


# ============================================================
# Equality
# ============================================================

def is_eq(a: ValueType, b: ValueType) -> bool:
    """Identity equality."""
    return a is b


def is_eqv(a: ValueType, b: ValueType) -> bool:
    """Identity, or numbers equal in both value and exactness."""
    if a is b:
        return True
    if is_number(a) and is_number(b):
        return is_exact(a) == is_exact(b) and a == b
    return False


def is_equal(a: ValueType, b: ValueType) -> bool:
    """
    Structural equality.

    Pairs are compared head by head along their tails (iteratively, so
    long lists do not grow the stack), vectors element-wise and strings
    by value. Everything else falls back to is_eqv.
    """
    while True:
        if isinstance(a, Pair) and isinstance(b, Pair):
            if not is_equal(a.car, b.car):
                return False
            a, b = a.cdr, b.cdr
            continue
        if isinstance(a, list) and isinstance(b, list):
            return len(a) == len(b) and all(is_equal(x, y) for x, y in zip(a, b))
        if isinstance(a, str) and isinstance(b, str):
            return a == b
        return is_eqv(a, b)


# ============================================================
# Procedures and continuations
# ============================================================

def is_procedure(obj: ValueType) -> bool:
    return callable(obj) and not isinstance(obj, type)


def apply(proc: Callable, *args: ValueType) -> ValueType:
    """
    (apply proc arg ... lst): call proc with the leading args followed by
    the elements of the final list argument.

    Example:
        apply(add, 1, make_list(2, 3))  # => 6
    """
    if not is_procedure(proc):
        raise LispTypeError(f"apply: first argument must be a procedure, got {type_name(proc)}")
    if not args:
        return proc()
    *leading, spread = args
    if spread is not NIL and not isinstance(spread, Pair):
        raise LispTypeError(f"apply: last argument must be a list, got {type_name(spread)}")
    spread_args = []
    while isinstance(spread, Pair):
        spread_args.append(spread.car)
        spread = spread.cdr
    if spread is not NIL:
        raise LispTypeError("apply: last argument must be a proper list")
    return proc(*leading, *spread_args)


class _ContinuationInvoked(Exception):
    """Unwinds the Python stack back to the matching call/cc frame."""

    def __init__(self, continuation: 'Continuation', value: ValueType):
        super().__init__("continuation invoked")
        self.continuation = continuation
        self.value = value


class Continuation:
    """
    One-shot escaping continuation handed to the call/cc receiver.

    Calling it with a value returns that value from the call/cc that
    created it. It is only valid while that call/cc is still running.
    """

    __slots__ = ('active',)

    def __init__(self):
        self.active = True

    def __call__(self, value: ValueType = UNSPECIFIED) -> ValueType:
        if not self.active:
            raise ContinuationError("continuation invoked after its extent has exited")
        raise _ContinuationInvoked(self, value)

    def __repr__(self) -> str:
        return "#<continuation>"


def call_with_current_continuation(proc: Callable) -> ValueType:
    """
    Call proc with an escape continuation for this call.

    Example:
        call_with_current_continuation(lambda k: add(1, k(42)))  # => 42
    """
    if not is_procedure(proc):
        raise LispTypeError(
            f"call-with-current-continuation: argument must be a procedure, got {type_name(proc)}")
    k = Continuation()
    try:
        return proc(k)
    except _ContinuationInvoked as escape:
        if escape.continuation is not k:
            raise
        return escape.value
    finally:
        k.active = False


# ============================================================
# Output
# ============================================================

def display(value: ValueType, port: Optional[TextIO] = None) -> None:
    """Write the display representation of value (strings unquoted)."""
    from .reader import format_sexpr
    (port or sys.stdout).write(format_sexpr(value, write=False))


def newline(port: Optional[TextIO] = None) -> None:
    (port or sys.stdout).write("\n")
