"""
Control utilities: sequencing, promises, continuations and negation.
"""

from collections.abc import Callable
from functools import singledispatch

from .errors import LispTypeError
from .substrate import (
    UNSPECIFIED, ValueType, call_with_current_continuation, is_procedure, type_name,
)


def begin(*values: ValueType) -> ValueType:
    """
    Return the last of its (already evaluated) arguments.

    Example:
        begin(display("hi"), 42)  # => 42, after printing
    """
    if not values:
        return UNSPECIFIED
    return values[-1]


def force(promise: Callable) -> ValueType:
    """Run a zero-argument promise. Not memoized: each call re-runs it."""
    if not is_procedure(promise):
        raise LispTypeError(f"force: argument must be a promise, got {type_name(promise)}")
    return promise()


call_cc = call_with_current_continuation


def not_(obj: ValueType) -> bool:
    """(not obj): True only for False, since every other value is true."""
    return obj is False


def identity(obj: ValueType) -> ValueType:
    return obj


@singledispatch
def negate(obj: ValueType) -> ValueType:
    """
    Negate a boolean, or wrap a procedure so its result is negated.

    Dispatch is on the argument's type:
        negate(True)          # => False
        negate(is_even)(3)    # => True

    Any other value negates like ``not``.
    """
    return not_(obj)


@negate.register(bool)
def _negate_boolean(flag: bool) -> bool:
    return not flag


@negate.register(Callable)
def _negate_procedure(proc: Callable) -> Callable:
    def negated(*args: ValueType) -> bool:
        return not_(proc(*args))
    negated.__name__ = f"negate({getattr(proc, '__name__', 'procedure')})"
    return negated
