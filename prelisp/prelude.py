"""
Standard preludes: Scheme names mapped to procedures.

A prelude is a plain dict, so custom ones are built by merging:

    MY_PRELUDE = {**LIST_PRELUDE, "sum": lambda lst: foldl(add, 0, lst)}
"""

from typing import Callable, Dict

from . import control, lists, numeric, substrate, vectors

PreludeType = Dict[str, Callable]


# Host primitives the derived procedures are built on
SUBSTRATE_PRELUDE: PreludeType = {
    # Pairs
    "cons": substrate.cons,
    "car": substrate.car,
    "cdr": substrate.cdr,
    "set-car!": substrate.set_car,
    "set-cdr!": substrate.set_cdr,
    "pair?": substrate.is_pair,
    "null?": substrate.is_null,
    "symbol?": substrate.is_symbol,
    "string?": substrate.is_string,
    # Equality
    "eq?": substrate.is_eq,
    "eqv?": substrate.is_eqv,
    "equal?": substrate.is_equal,
    # Vectors
    "make-vector": substrate.make_vector,
    "vector-ref": substrate.vector_ref,
    "vector-set!": substrate.vector_set,
    "vector-length": substrate.vector_length,
    "vector?": substrate.is_vector,
    # Numbers
    "number?": substrate.is_number,
    "complex?": substrate.is_complex,
    "real?": substrate.is_real,
    "integer?": substrate.is_integer,
    "exact?": substrate.is_exact,
    "+": substrate.add,
    "-": substrate.sub,
    "*": substrate.mul,
    "/": substrate.div,
    "<": substrate.lt,
    ">": substrate.gt,
    "<=": substrate.le,
    ">=": substrate.ge,
    "floor": substrate.floor,
    "ceiling": substrate.ceiling,
    "ceil": substrate.ceil,
    "round": substrate.round_,
    "sin": substrate.sin,
    "cos": substrate.cos,
    "atan": substrate.atan,
    "sqrt": substrate.sqrt,
    "make-rectangular": substrate.make_rectangular,
    "real-part": substrate.real_part,
    "imag-part": substrate.imag_part,
    "exact->inexact": substrate.exact_to_inexact,
    "inexact->exact": substrate.inexact_to_exact,
    # Procedures and output
    "procedure?": substrate.is_procedure,
    "apply": substrate.apply,
    "call-with-current-continuation": substrate.call_with_current_continuation,
    "display": substrate.display,
    "newline": substrate.newline,
}

CONTROL_PRELUDE: PreludeType = {
    "begin": control.begin,
    "force": control.force,
    "call/cc": control.call_cc,
    "negate": control.negate,
    "not": control.not_,
    "boolean?": substrate.is_boolean,
    "identity": control.identity,
}

NUMERIC_PRELUDE: PreludeType = {
    "=": numeric.num_equal,
    "positive?": numeric.is_positive,
    "negative?": numeric.is_negative,
    "zero?": numeric.is_zero,
    "odd?": numeric.is_odd,
    "even?": numeric.is_even,
    "max": numeric.maximum,
    "min": numeric.minimum,
    "abs": numeric.abs_,
    "square": numeric.square,
    "quotient": numeric.quotient,
    "remainder": numeric.remainder,
    "modulo": numeric.modulo,
    "gcd": numeric.gcd,
    "lcm": numeric.lcm,
    "factorial": numeric.factorial,
    "make-polar": numeric.make_polar,
    "magnitude": numeric.magnitude,
    "angle": numeric.angle,
}

LIST_PRELUDE: PreludeType = {
    "list": substrate.make_list,
    "list?": lists.is_list,
    "length": lists.length,
    "list-tail": lists.list_tail,
    "list-ref": lists.list_ref,
    "last-pair": lists.last_pair,
    "list-copy": lists.list_copy,
    "memq": lists.memq,
    "memv": lists.memv,
    "member": lists.member,
    "assq": lists.assq,
    "assv": lists.assv,
    "assoc": lists.assoc,
    "append": lists.append,
    "reverse": lists.reverse,
    "filter": lists.filter_,
    "map": lists.map_,
    "for-each": lists.for_each,
    "foldr": lists.foldr,
    "foldl": lists.foldl,
    "caar": lists.caar,
    "cadr": lists.cadr,
    "cdar": lists.cdar,
    "cddr": lists.cddr,
    "caaar": lists.caaar,
    "caadr": lists.caadr,
    "cadar": lists.cadar,
    "caddr": lists.caddr,
    "cdaar": lists.cdaar,
    "cdadr": lists.cdadr,
    "cddar": lists.cddar,
    "cdddr": lists.cdddr,
}

VECTOR_PRELUDE: PreludeType = {
    "vector": vectors.vector,
    "list->vector": vectors.list_to_vector,
    "vector->list": vectors.vector_to_list,
    "vector-fill!": vectors.vector_fill,
    "vector-map": vectors.vector_map,
    "vector-for-each": vectors.vector_for_each,
}

# Derived procedures only, without the primitives they are built on
DERIVED_PRELUDE: PreludeType = {
    **CONTROL_PRELUDE,
    **NUMERIC_PRELUDE,
    **LIST_PRELUDE,
    **VECTOR_PRELUDE,
}

# Everything: primitives plus derived procedures
FULL_PRELUDE: PreludeType = {
    **SUBSTRATE_PRELUDE,
    **DERIVED_PRELUDE,
}

# Empty prelude
NO_PRELUDE: PreludeType = {}
