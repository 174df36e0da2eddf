"""
PRELISP - Prelude of derived procedures for a small Lisp

The standard procedures of a minimal Lisp-family runtime, written
entirely in terms of a small set of host primitives (pairs, vectors,
numeric comparison, application and continuation capture).

Quick Start:
    from prelisp import PreludeEngine, make_list, assoc, gcd

    gcd(12, 18)                                    # => 6
    assoc(2, make_list(make_list(1, "a"), make_list(2, "b")))   # => (2 "b")

    engine = PreludeEngine()
    engine("(map + '(1 2 3) '(10 20 30))")         # => (11 22 33)

Components (each depends only on those above it):
    substrate  - pairs, vectors, numbers, equality, apply, call/cc, display
    control    - begin, force, call/cc, negate
    numeric    - =, sign/parity, max/min, quotient/remainder/modulo,
                 gcd/lcm, factorial, make-polar/magnitude/angle
    lists      - length, member/assoc search engine, append/reverse,
                 list-tail/list-ref, map/for-each/foldr/foldl
    vectors    - list->vector, vector->list, vector-fill!

Preludes:
    FULL_PRELUDE maps every Scheme name ("list->vector", "call/cc", ...)
    to its procedure; smaller tables cover one component each.
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    LispError,
    LispTypeError,
    LispIndexError,
    LispDomainError,
    LispNameError,
    LispSyntaxError,
    ContinuationError,
)

# Primitive substrate
from .substrate import (
    NIL,
    UNSPECIFIED,
    Pair,
    Symbol,
    Continuation,
    cons,
    car,
    cdr,
    set_car,
    set_cdr,
    is_pair,
    is_null,
    make_list,
    from_iterable,
    to_python,
    is_eq,
    is_eqv,
    is_equal,
    make_vector,
    vector_ref,
    vector_set,
    vector_length,
    is_number,
    is_exact,
    is_integer,
    apply,
    call_with_current_continuation,
    display,
    newline,
)

# Control utilities
from .control import begin, force, call_cc, negate, not_, identity

# Numeric derived operations
from .numeric import (
    num_equal,
    is_positive,
    is_negative,
    is_zero,
    is_odd,
    is_even,
    maximum,
    minimum,
    abs_,
    square,
    quotient,
    remainder,
    modulo,
    gcd,
    lcm,
    factorial,
    make_polar,
    magnitude,
    angle,
)

# List engine
from .lists import (
    Extraction,
    MEMBERSHIP,
    ASSOCIATION,
    search_engine,
    member_search,
    assoc_search,
    memq,
    memv,
    member,
    assq,
    assv,
    assoc,
    length,
    is_list,
    list_tail,
    list_ref,
    last_pair,
    list_copy,
    append,
    reverse,
    filter_,
    map_,
    for_each,
    foldr,
    foldl,
)

# Vector conversions
from .vectors import list_to_vector, vector_to_list, vector_fill, vector, vector_map, vector_for_each

# Standard preludes
from .prelude import (
    PreludeType,
    SUBSTRATE_PRELUDE,
    CONTROL_PRELUDE,
    NUMERIC_PRELUDE,
    LIST_PRELUDE,
    VECTOR_PRELUDE,
    DERIVED_PRELUDE,
    FULL_PRELUDE,
    NO_PRELUDE,
)

# Reader, printer and engine
from .reader import parse_sexpr, parse_all, format_sexpr
from .engine import PreludeEngine, CallStep, CallTrace, E

# Public API
__all__ = [
    # Version
    "__version__",
    # Errors
    "LispError",
    "LispTypeError",
    "LispIndexError",
    "LispDomainError",
    "LispNameError",
    "LispSyntaxError",
    "ContinuationError",
    # Substrate
    "NIL",
    "UNSPECIFIED",
    "Pair",
    "Symbol",
    "Continuation",
    "cons",
    "car",
    "cdr",
    "set_car",
    "set_cdr",
    "is_pair",
    "is_null",
    "make_list",
    "from_iterable",
    "to_python",
    "is_eq",
    "is_eqv",
    "is_equal",
    "make_vector",
    "vector_ref",
    "vector_set",
    "vector_length",
    "is_number",
    "is_exact",
    "is_integer",
    "apply",
    "call_with_current_continuation",
    "display",
    "newline",
    # Control
    "begin",
    "force",
    "call_cc",
    "negate",
    "not_",
    "identity",
    # Numeric
    "num_equal",
    "is_positive",
    "is_negative",
    "is_zero",
    "is_odd",
    "is_even",
    "maximum",
    "minimum",
    "abs_",
    "square",
    "quotient",
    "remainder",
    "modulo",
    "gcd",
    "lcm",
    "factorial",
    "make_polar",
    "magnitude",
    "angle",
    # Lists
    "Extraction",
    "MEMBERSHIP",
    "ASSOCIATION",
    "search_engine",
    "member_search",
    "assoc_search",
    "memq",
    "memv",
    "member",
    "assq",
    "assv",
    "assoc",
    "length",
    "is_list",
    "list_tail",
    "list_ref",
    "last_pair",
    "list_copy",
    "append",
    "reverse",
    "filter_",
    "map_",
    "for_each",
    "foldr",
    "foldl",
    # Vectors
    "list_to_vector",
    "vector_to_list",
    "vector_fill",
    "vector",
    "vector_map",
    "vector_for_each",
    # Preludes
    "PreludeType",
    "SUBSTRATE_PRELUDE",
    "CONTROL_PRELUDE",
    "NUMERIC_PRELUDE",
    "LIST_PRELUDE",
    "VECTOR_PRELUDE",
    "DERIVED_PRELUDE",
    "FULL_PRELUDE",
    "NO_PRELUDE",
    # Reader and engine
    "parse_sexpr",
    "parse_all",
    "format_sexpr",
    "PreludeEngine",
    "CallStep",
    "CallTrace",
    "E",
]
