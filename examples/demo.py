#!/usr/bin/env python3
"""
PRELISP Feature Demonstration

This script walks through the derived procedures, the engine and tracing.
"""

from prelisp import (
    E, PreludeEngine, NUMERIC_PRELUDE,
    append, assoc, format_sexpr, gcd, lcm, make_list, member_search, set_car,
)
from prelisp.substrate import num_eq


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_direct_calls():
    """Call derived procedures directly from Python."""
    section("Direct Calls")

    table = make_list(make_list(1, "one"), make_list(2, "two"))
    print(f"  (gcd 12 18) => {gcd(12, 18)}")
    print(f"  (lcm 4 6) => {lcm(4, 6)}")
    print(f"  (assoc 2 {format_sexpr(table)}) => {format_sexpr(assoc(2, table))}")
    print(f"  (assoc 9 {format_sexpr(table)}) => {format_sexpr(assoc(9, table))}")


def demo_search_engine():
    """Build a new search procedure from an equality predicate."""
    section("Search Engine")

    mem_num = member_search(num_eq)
    lst = make_list(1, 2, 3)
    print(f"  memv-like search with numeric =: (2.0 in {format_sexpr(lst)}) => "
          f"{format_sexpr(mem_num(2.0, lst))}")


def demo_sharing():
    """Show that append shares its last argument."""
    section("Tail Sharing")

    tail = make_list(3, 4)
    joined = append(make_list(1, 2), tail)
    print(f"  before: {format_sexpr(joined)}")
    set_car(tail, 30)
    print(f"  after (set-car! tail 30): {format_sexpr(joined)}")


def demo_engine():
    """Evaluate expressions by name through the engine."""
    section("Engine")

    engine = PreludeEngine()
    examples = [
        "(map + '(1 2 3) '(10 20 30))",
        "(foldr cons '() '(a b c))",
        "(vector->list (list->vector '(1 2 3)))",
        "(modulo -7 2)",
        "(factorial 10)",
        "(filter (negate even?) '(1 2 3 4 5))",
    ]
    for expr_str in examples:
        print(f"  {expr_str} => {format_sexpr(engine(expr_str))}")

    small = PreludeEngine(prelude=NUMERIC_PRELUDE).define("twice", lambda x: x * 2)
    print(f"  numeric-only engine: (twice (gcd 12 18)) => {small('(twice (gcd 12 18))')}")


def demo_tracing():
    """Trace the applications made while evaluating."""
    section("Tracing")

    engine = PreludeEngine()
    result, trace = engine(E("(max (abs -3) (quotient 17 5))"), trace=True)
    print(trace)
    print(f"  {trace.summary()}")


def main():
    demo_direct_calls()
    demo_search_engine()
    demo_sharing()
    demo_engine()
    demo_tracing()


if __name__ == "__main__":
    main()
