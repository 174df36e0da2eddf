"""
Example custom prelude for PRELISP.

This file demonstrates how to build a custom prelude by merging the
standard tables and adding procedures written on top of them.

Usage:
    prelisp -p examples/custom_prelude.py -e "(sum '(1 2 3))"

Or in scripts:
    :prelude examples/custom_prelude.py
    (average '(1 2 3 4))
"""

from prelisp import (
    DERIVED_PRELUDE, SUBSTRATE_PRELUDE, foldl, length, map_, filter_, negate, is_even,
)
from prelisp.substrate import add, div, mul


def sum_list(lst):
    return foldl(add, 0, lst)


def product(lst):
    return foldl(mul, 1, lst)


def average(lst):
    """Exact mean of a non-empty list: (average '(1 2)) => 3/2."""
    return div(sum_list(lst), length(lst))


def squares(lst):
    return map_(lambda x: mul(x, x), lst)


PRELUDE = {
    **SUBSTRATE_PRELUDE,
    **DERIVED_PRELUDE,

    # Reductions
    "sum": sum_list,
    "product": product,
    "average": average,

    # Shorthands
    "squares": squares,
    "odds": lambda lst: filter_(negate(is_even), lst),
}
