"""
Conversions between lists and vectors.

Conversions always allocate a new container; the source is never shared.
"""

from typing import Callable, List

from .errors import LispIndexError, LispTypeError
from .lists import length
from .substrate import (
    NIL, UNSPECIFIED, ValueType,
    car, cdr, cons, make_vector, type_name, vector_length, vector_ref, vector_set,
)


def list_to_vector(lst: ValueType) -> List:
    """Vector holding lst's elements in order."""
    v = make_vector(length(lst))
    i = 0
    while lst is not NIL:
        vector_set(v, i, car(lst))
        lst = cdr(lst)
        i += 1
    return v


def vector_to_list(v: List) -> ValueType:
    """List of v's elements, consed from the last index down."""
    result = NIL
    for i in range(vector_length(v) - 1, -1, -1):
        result = cons(vector_ref(v, i), result)
    return result


def vector_fill(v: List, fill: ValueType) -> List:
    """Overwrite every slot of v with fill and return v itself."""
    for i in range(vector_length(v) - 1, -1, -1):
        vector_set(v, i, fill)
    return v


def vector(*items: ValueType) -> List:
    return list(items)


def _columns(who: str, vectors: List[List]) -> range:
    n = vector_length(vectors[0])
    for position, v in enumerate(vectors[1:], 2):
        if vector_length(v) < n:
            raise LispIndexError(f"{who}: vector argument {position} is shorter than the first")
    return range(n)


def vector_map(proc: Callable, first: List, *rest: List) -> List:
    """Like map, over vectors; the first vector sets the length."""
    if not callable(proc):
        raise LispTypeError(f"vector-map: first argument must be a procedure, got {type_name(proc)}")
    vectors = [first, *rest]
    return [proc(*(v[i] for v in vectors)) for i in _columns("vector-map", vectors)]


def vector_for_each(proc: Callable, first: List, *rest: List) -> None:
    if not callable(proc):
        raise LispTypeError(
            f"vector-for-each: first argument must be a procedure, got {type_name(proc)}")
    vectors = [first, *rest]
    for i in _columns("vector-for-each", vectors):
        proc(*(v[i] for v in vectors))
    return UNSPECIFIED
