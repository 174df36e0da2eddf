"""
Call-folding engine for PRELISP

PRELISP - Prelude of derived procedures for a small Lisp

This module evaluates nested applications of prelude procedures, which
is enough to exercise the whole prelude from text without a full
evaluator (there are no lambdas, definitions or special forms besides
quote).

Evaluation rules:
    42, "s", #t, #(1 2)    - self-evaluating
    name                   - the procedure bound to name in the prelude
    (quote datum), 'datum  - datum, unevaluated
    (op arg ...)           - op and args evaluated left to right, then applied

Example:
    from prelisp import PreludeEngine

    engine = PreludeEngine()
    engine("(map + '(1 2 3) '(10 20 30))")   # => (11 22 33)
    engine("(assoc 2 '((1 a) (2 b)))")       # => (2 b)

Tracing:
    Use engine.evaluate(expr, trace=True) to see each application.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple, Union

from .errors import LispNameError, LispTypeError
from .prelude import FULL_PRELUDE, PreludeType
from .reader import QUOTE, format_sexpr, parse_sexpr
from .substrate import (
    NIL, Pair, Symbol, ValueType, from_iterable, make_list, to_python, type_name,
)

logger = logging.getLogger(__name__)


# ============================================================
# Expression Builder
# ============================================================

class _ExprBuilder:
    """
    Expression builder for PRELISP.

    Examples:
        from prelisp import E

        # Parse s-expression string
        expr = E("(gcd 12 18)")

        # Build programmatically
        expr = E.list(E.sym("gcd"), 12, 18)

        # Quote a datum so the engine leaves it alone
        E.quote(E.list(1, 2, 3))   # => '(1 2 3)
    """

    def __call__(self, s: str) -> ValueType:
        """
        Parse an s-expression string.

        Examples:
            E("(+ 1 2)") -> (+ 1 2)
            E("#(1 2)") -> [1, 2]
        """
        return parse_sexpr(s)

    def list(self, *items: ValueType) -> ValueType:
        """Build a proper list: E.list(1, 2) -> (1 2)."""
        return make_list(*items)

    def sym(self, name: str) -> Symbol:
        return Symbol(name)

    def syms(self, *names: str) -> Tuple[Symbol, ...]:
        """
        Create multiple symbols for unpacking.

        Example:
            a, b = E.syms("a", "b")
        """
        return tuple(Symbol(name) for name in names)

    def vector(self, *items: ValueType) -> List:
        return list(items)

    def quote(self, datum: ValueType) -> ValueType:
        return make_list(QUOTE, datum)

    def call(self, name: str, *args: ValueType) -> ValueType:
        """Build an application of the named procedure: E.call("+", 1, 2)."""
        return Pair(Symbol(name), from_iterable(args))

    def __repr__(self) -> str:
        return "E (expression builder)"


# Singleton instance
E = _ExprBuilder()


# ============================================================
# Tracing
# ============================================================

class CallStep:
    """A single application recorded during traced evaluation."""

    def __init__(self, name: str, args: Tuple, result: ValueType, depth: int = 0):
        self.name = name
        self.args = args
        self.result = result
        self.depth = depth

    def __repr__(self) -> str:
        args = " ".join(format_sexpr(a) for a in self.args)
        call = f"({self.name} {args})" if args else f"({self.name})"
        return f"{call} => {format_sexpr(self.result)}"

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "name": self.name,
            "args": [format_sexpr(a) for a in self.args],
            "result": format_sexpr(self.result),
            "depth": self.depth,
        }


class CallTrace:
    """
    A trace of every application made while evaluating an expression.

    Steps are recorded in completion order, so inner calls come before
    the calls that consume their results.

    Formatting options:
        - Default repr: verbose multi-line format, indented by depth
        - format("compact"): single line showing the call chain
        - format("calls"): just the procedure names called
        - to_dict(): JSON-serializable dictionary
    """

    def __init__(self):
        self.steps: List[CallStep] = []
        self.initial: ValueType = None
        self.final: ValueType = None

    def add_step(self, step: CallStep):
        self.steps.append(step)

    def format(self, style: str = "verbose") -> str:
        """
        Format the trace in different styles.

        Args:
            style: One of "verbose", "compact", "calls"

        Returns:
            Formatted string representation of the trace.
        """
        if style == "compact":
            names = [s.name for s in self.steps]
            return f"{format_sexpr(self.initial)} --[{', '.join(names)}]--> {format_sexpr(self.final)}"

        elif style == "calls":
            names = [s.name for s in self.steps]
            return " -> ".join(names) if names else "(no calls)"

        else:  # verbose (default)
            return repr(self)

    def __repr__(self) -> str:
        lines = [f"Expression: {format_sexpr(self.initial)}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {'  ' * step.depth}{i}. {step}")
        lines.append(f"Value: {format_sexpr(self.final)}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        """Iterate over call steps."""
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any procedure was called."""
        return len(self.steps) > 0

    def to_dict(self) -> Dict:
        """Convert trace to dictionary for JSON serialization."""
        return {
            "expression": format_sexpr(self.initial),
            "value": format_sexpr(self.final),
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }

    def call_counts(self) -> Dict[str, int]:
        """Count how many times each procedure was called."""
        counts: Dict[str, int] = {}
        for step in self.steps:
            counts[step.name] = counts.get(step.name, 0) + 1
        return counts

    def calls_made(self) -> List[str]:
        """Get list of procedure names in order of completion."""
        return [s.name for s in self.steps]

    def summary(self) -> str:
        """Get a brief summary of the evaluation."""
        if not self.steps:
            return "No calls made"
        counts = self.call_counts()
        most_used = max(counts.items(), key=lambda x: x[1])
        return (f"{len(self.steps)} calls to {len(counts)} procedures. "
                f"Most called: {most_used[0]} ({most_used[1]}x)")


# ============================================================
# Engine
# ============================================================

class PreludeEngine:
    """
    Evaluates applications of prelude procedures.

    Example:
        from prelisp import PreludeEngine, LIST_PRELUDE

        engine = PreludeEngine()                   # FULL_PRELUDE
        engine("(lcm 4 6)")                        # => 12

        lists_only = PreludeEngine(prelude=LIST_PRELUDE)
        lists_only.define("double", lambda x: x * 2)
        lists_only("(double 21)")                  # => 42
    """

    def __init__(self, prelude: Optional[PreludeType] = None):
        """
        Initialize a PreludeEngine.

        Args:
            prelude: Name-to-procedure table. Default: FULL_PRELUDE.
                The table is copied, so define() never mutates it.
        """
        self._bindings: Dict[str, Callable] = dict(FULL_PRELUDE if prelude is None else prelude)

    def with_prelude(self, prelude: PreludeType) -> 'PreludeEngine':
        """
        Replace all bindings with those of prelude.

        Enables fluent construction:
            engine = PreludeEngine().with_prelude(NUMERIC_PRELUDE).define("f", f)

        Returns:
            self for chaining
        """
        self._bindings = dict(prelude)
        logger.debug("prelude replaced: %d procedures", len(self._bindings))
        return self

    def define(self, name: str, proc: Callable) -> 'PreludeEngine':
        """Bind (or rebind) name to proc."""
        if not callable(proc):
            raise LispTypeError(f"define: {name} must be bound to a procedure, got {type_name(proc)}")
        if name in self._bindings:
            logger.debug("redefining %s", name)
        self._bindings[name] = proc
        return self

    def names(self) -> List[str]:
        """All bound names, sorted."""
        return sorted(self._bindings)

    def lookup(self, name: str) -> Callable:
        try:
            return self._bindings[name]
        except KeyError:
            raise LispNameError(f"unbound name: {name}") from None

    def evaluate(self, expr: Union[str, ValueType], trace: bool = False):
        """
        Evaluate an expression.

        Args:
            expr: A datum, or a string to parse first
            trace: If True, return (value, trace) tuple

        Returns:
            The value, or (value, CallTrace) if trace=True
        """
        if isinstance(expr, str):
            expr = parse_sexpr(expr)

        if not trace:
            return self._eval(expr, None, 0)

        trace_obj = CallTrace()
        trace_obj.initial = expr
        value = self._eval(expr, trace_obj, 0)
        trace_obj.final = value
        return value, trace_obj

    def _eval(self, expr: ValueType, trace_obj: Optional[CallTrace], depth: int) -> ValueType:
        if isinstance(expr, Symbol):
            return self.lookup(expr.name)
        if not isinstance(expr, Pair):
            return expr

        op = expr.car
        if op is QUOTE:
            if not isinstance(expr.cdr, Pair) or expr.cdr.cdr is not NIL:
                raise LispTypeError("quote: expects exactly one datum")
            return expr.cdr.car

        proc = self._eval(op, trace_obj, depth + 1)
        if not callable(proc):
            raise LispTypeError(f"not a procedure: {format_sexpr(proc)}")
        args = []
        node = expr.cdr
        while isinstance(node, Pair):
            args.append(self._eval(node.car, trace_obj, depth + 1))
            node = node.cdr
        if node is not NIL:
            raise LispTypeError(f"improper argument list in {format_sexpr(expr)}")

        result = proc(*args)
        if trace_obj is not None:
            name = op.name if isinstance(op, Symbol) else format_sexpr(op)
            trace_obj.add_step(CallStep(name, tuple(args), result, depth))
        return result

    def evaluate_to_python(self, expr: Union[str, ValueType]) -> ValueType:
        """Evaluate, then convert lists in the result to Python lists."""
        return to_python(self.evaluate(expr))

    def copy(self) -> 'PreludeEngine':
        """Create a copy of this engine."""
        return PreludeEngine(prelude=self._bindings)

    def __or__(self, other: 'PreludeEngine') -> 'PreludeEngine':
        """Union of two engines: engine1 | engine2 (right side wins on clashes)."""
        result = self.copy()
        result._bindings.update(other._bindings)
        return result

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"PreludeEngine({len(self._bindings)} procedures)"

    def __call__(self, expr: Union[str, ValueType], **kwargs):
        """Make engine callable: engine(expr) is shorthand for engine.evaluate(expr)."""
        return self.evaluate(expr, **kwargs)

    def __contains__(self, name: str) -> bool:
        """Check if a name is bound: 'assoc' in engine."""
        return name in self._bindings

    def __getitem__(self, name: str) -> Callable:
        """Get procedure by name: engine['assoc']."""
        return self.lookup(name)

    def __iter__(self):
        """Iterate over (name, procedure) pairs."""
        return iter(self._bindings.items())
