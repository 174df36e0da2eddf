"""
List engine for PRELISP.

PRELISP - Prelude of derived procedures for a small Lisp

This module provides the list procedures of the prelude:

    - length, list?, list-tail, list-ref and the cXr compositions
    - the search engine behind memq/memv/member and assq/assv/assoc
    - append (sharing its last argument) and reverse
    - the variadic traversals map, for-each, foldr and foldl

All traversals are loops over successive tails, so list length never
turns into Python stack depth. Cyclic lists are not detected: length,
list? and friends do not terminate on them.
"""

from typing import Callable, Iterator, List, NamedTuple

from .control import identity
from .errors import LispIndexError, LispTypeError
from .substrate import (
    NIL, UNSPECIFIED, Pair, ValueType,
    car, cdr, is_eq, is_equal, is_eqv, set_cdr, type_name,
)

EqualityType = Callable[[ValueType, ValueType], bool]
SearchType = Callable[[ValueType, ValueType], ValueType]


# ============================================================
# Structure and indexing
# ============================================================

def caar(x): return car(car(x))
def cadr(x): return car(cdr(x))
def cdar(x): return cdr(car(x))
def cddr(x): return cdr(cdr(x))
def caaar(x): return car(caar(x))
def caadr(x): return car(cadr(x))
def cadar(x): return car(cdar(x))
def caddr(x): return car(cddr(x))
def cdaar(x): return cdr(caar(x))
def cdadr(x): return cdr(cadr(x))
def cddar(x): return cdr(cdar(x))
def cdddr(x): return cdr(cddr(x))


def length(lst: ValueType) -> int:
    """Count the pairs of a proper list."""
    n = 0
    while lst is not NIL:
        lst = cdr(lst)
        n += 1
    return n


def is_list(obj: ValueType) -> bool:
    """True for proper lists (NIL-terminated pair chains)."""
    while isinstance(obj, Pair):
        obj = obj.cdr
    return obj is NIL


def list_tail(lst: ValueType, k: int) -> ValueType:
    """
    Skip the first k pairs of lst.

    Raises:
        LispTypeError: If k is not an exact integer
        LispIndexError: If k is negative or lst has fewer than k elements
    """
    if isinstance(k, bool) or not isinstance(k, int):
        raise LispTypeError(f"list-tail: index must be an exact integer, got {type_name(k)}")
    if k < 0:
        raise LispIndexError(f"list-tail: index must be non-negative, got {k}")
    for _ in range(k):
        lst = cdr(lst)
    return lst


def list_ref(lst: ValueType, k: int) -> ValueType:
    """Element k (zero-based) of lst."""
    return car(list_tail(lst, k))


def last_pair(lst: ValueType) -> Pair:
    while isinstance(cdr(lst), Pair):
        lst = lst.cdr
    return lst


# ============================================================
# Search engine
# ============================================================

class Extraction(NamedTuple):
    """
    How a search reads each visited tail of the list.

    key:   tail -> value compared against the target
    found: tail -> value returned when the comparison succeeds
    """

    key: Callable[[Pair], ValueType]
    found: Callable[[Pair], ValueType]


# member-style: compare elements, return the tail starting at the match
MEMBERSHIP = Extraction(key=car, found=identity)

# assoc-style: compare the heads of entries, return the whole entry
ASSOCIATION = Extraction(key=caar, found=car)


def search_engine(extraction: Extraction) -> Callable[[EqualityType], SearchType]:
    """
    Build a family of search procedures sharing one extraction.

    The result takes an equality predicate and returns the two-argument
    search ``(obj, lst) -> match or False``. Matches are the list's own
    structure, never copies; a miss is False, never the empty list.

    Example:
        memv = search_engine(MEMBERSHIP)(is_eqv)
        memv(2, make_list(1, 2, 3))  # => (2 3)
    """
    def specialize(equal: EqualityType) -> SearchType:
        def search(obj: ValueType, lst: ValueType) -> ValueType:
            while lst is not NIL:
                if equal(obj, extraction.key(lst)):
                    return extraction.found(lst)
                lst = cdr(lst)
            return False
        return search
    return specialize


member_search = search_engine(MEMBERSHIP)
assoc_search = search_engine(ASSOCIATION)

memq = member_search(is_eq)
memv = member_search(is_eqv)
member = member_search(is_equal)
assq = assoc_search(is_eq)
assv = assoc_search(is_eqv)
assoc = assoc_search(is_equal)


# ============================================================
# Construction
# ============================================================

def append(*lists: ValueType) -> ValueType:
    """
    Concatenate lists.

    Every argument but the last is copied into a fresh chain; the last
    is shared, not copied, so later mutation of it shows through the
    result. The last argument may be any value: (append '(1) 2) => (1 . 2).
    """
    if not lists:
        return NIL
    *leading, last = lists
    head = Pair(UNSPECIFIED, NIL)
    tail = head
    for lst in leading:
        while lst is not NIL:
            cell = Pair(car(lst), NIL)
            set_cdr(tail, cell)
            tail = cell
            lst = cdr(lst)
    set_cdr(tail, last)
    return head.cdr


def reverse(lst: ValueType) -> ValueType:
    """Fresh list of lst's elements in reverse order."""
    result = NIL
    while lst is not NIL:
        result = Pair(car(lst), result)
        lst = cdr(lst)
    return result


def list_copy(lst: ValueType) -> ValueType:
    """Copy the spine of lst, keeping its final tail."""
    head = Pair(UNSPECIFIED, NIL)
    tail = head
    while isinstance(lst, Pair):
        cell = Pair(lst.car, NIL)
        tail.cdr = cell
        tail = cell
        lst = lst.cdr
    tail.cdr = lst
    return head.cdr


def filter_(pred: Callable, lst: ValueType) -> ValueType:
    """Fresh list of the elements for which pred is not False."""
    head = Pair(UNSPECIFIED, NIL)
    tail = head
    while lst is not NIL:
        item = car(lst)
        if pred(item) is not False:
            cell = Pair(item, NIL)
            tail.cdr = cell
            tail = cell
        lst = cdr(lst)
    return head.cdr


# ============================================================
# Variadic traversals
# ============================================================

def _rows(who: str, lists: List[ValueType]) -> Iterator[List[ValueType]]:
    """
    Yield the elements at each position of parallel lists.

    Traversal length is the first list's. A later list that runs out
    first raises LispIndexError; extra elements in longer ones are ignored.
    """
    tails = list(lists)
    while tails[0] is not NIL:
        row = []
        for i, tail in enumerate(tails):
            if tail is NIL:
                raise LispIndexError(f"{who}: list argument {i + 1} is shorter than the first")
            row.append(car(tail))
            tails[i] = cdr(tail)
        yield row


def _check_procedure(who: str, proc: ValueType) -> None:
    if not callable(proc):
        raise LispTypeError(f"{who}: first argument must be a procedure, got {type_name(proc)}")


def map_(proc: Callable, first: ValueType, *rest: ValueType) -> ValueType:
    """
    Apply proc across corresponding elements, collecting the results.

    Example:
        map_(add, make_list(1, 2, 3), make_list(10, 20, 30))  # => (11 22 33)
    """
    _check_procedure("map", proc)
    head = Pair(UNSPECIFIED, NIL)
    tail = head
    for row in _rows("map", [first, *rest]):
        cell = Pair(proc(*row), NIL)
        tail.cdr = cell
        tail = cell
    return head.cdr


def for_each(proc: Callable, first: ValueType, *rest: ValueType) -> None:
    """Like map, but only for proc's side effects, in list order."""
    _check_procedure("for-each", proc)
    for row in _rows("for-each", [first, *rest]):
        proc(*row)
    return UNSPECIFIED


def foldr(proc: Callable, init: ValueType, first: ValueType, *rest: ValueType) -> ValueType:
    """
    Right fold: (foldr f z '(a b)) => (f a (f b z)).

    With several lists proc receives one element of each, then the
    accumulator. Rows are gathered first and folded from the end, so
    the Python stack stays flat.
    """
    _check_procedure("foldr", proc)
    rows = list(_rows("foldr", [first, *rest]))
    acc = init
    for row in reversed(rows):
        acc = proc(*row, acc)
    return acc


def foldl(proc: Callable, init: ValueType, first: ValueType, *rest: ValueType) -> ValueType:
    """Left fold: (foldl f z '(a b)) => (f (f z a) b)."""
    _check_procedure("foldl", proc)
    acc = init
    for row in _rows("foldl", [first, *rest]):
        acc = proc(acc, *row)
    return acc
