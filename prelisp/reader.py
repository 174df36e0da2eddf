"""
Reader and printer for PRELISP data.

Reads the external representation of lists, vectors, numbers, strings,
booleans and symbols, and prints values back the same way.

Syntax:
    42  -7  1/3  2.5  1e3  3+4i     numbers (exact ints and rationals,
                                    inexact decimals and complex)
    #t  #f                          booleans
    "text\n"                        strings
    foo  list->vector  +            symbols
    (1 2 3)  (1 . 2)  ()            lists, dotted pairs, empty list
    #(1 2 3)                        vectors
    'datum                          (quote datum)
    ; comment                       ignored to end of line
"""

import math
import re
from fractions import Fraction
from typing import List, Optional, Tuple

from .errors import LispSyntaxError
from .substrate import (
    NIL, UNSPECIFIED, Continuation, Pair, Symbol, ValueType, from_iterable, make_list,
)

QUOTE = Symbol("quote")

_TOKEN_RE = re.compile(r'''
    \s+ | ;[^\n]*
  | (?P<vector>\#\()
  | (?P<open>\() | (?P<close>\)) | (?P<quote>')
  | (?P<string>"(?:\\.|[^"\\])*")
  | (?P<atom>[^\s()'";]+)
''', re.VERBOSE)

_RATIONAL_RE = re.compile(r'^([+-]?\d+)/(\d+)$')

_SPECIAL_FLOATS = {"+inf.0": math.inf, "-inf.0": -math.inf, "+nan.0": math.nan}

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}

TokenType = Tuple[str, str]


def tokenize(text: str) -> List[TokenType]:
    """
    Split text into (kind, text) tokens, dropping whitespace and comments.

    Kinds: "open", "close", "vector", "quote", "string", "atom".
    """
    tokens = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise LispSyntaxError(f"unexpected character {text[pos]!r} at position {pos}")
        pos = m.end()
        if m.lastgroup:
            tokens.append((m.lastgroup, m.group(m.lastgroup)))
    return tokens


def parse_atom(text: str) -> ValueType:
    """
    Parse a single atom token.

    Examples:
        "42" -> 42, "1/3" -> Fraction(1, 3), "#t" -> True, "x" -> Symbol("x")
    """
    if text in ("#t", "#true"):
        return True
    if text in ("#f", "#false"):
        return False

    # Try number first
    try:
        return int(text)
    except ValueError:
        pass
    m = _RATIONAL_RE.match(text)
    if m:
        numerator, denominator = int(m.group(1)), int(m.group(2))
        if denominator == 0:
            raise LispSyntaxError(f"division by zero in {text}")
        value = Fraction(numerator, denominator)
        return value.numerator if value.denominator == 1 else value
    if text in _SPECIAL_FLOATS:
        return _SPECIAL_FLOATS[text]
    if text[0] in "0123456789+-." and any(c.isdigit() for c in text):
        try:
            return float(text)
        except ValueError:
            pass
    if len(text) > 1 and text.endswith("i") and (text[-2].isdigit() or text[-2] == "."):
        try:
            return complex(text[:-1] + "j")
        except ValueError:
            pass

    # Plain symbol
    return Symbol(text)


def _unescape(body: str) -> str:
    return re.sub(r'\\(.)', lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


class _Reader:
    """Recursive-descent reader over a token list."""

    def __init__(self, tokens: List[TokenType]):
        self.tokens = tokens
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self) -> TokenType:
        if self.at_end():
            raise LispSyntaxError("unexpected end of input")
        return self.tokens[self.pos]

    def next(self) -> TokenType:
        token = self.peek()
        self.pos += 1
        return token

    def read(self) -> ValueType:
        kind, text = self.next()
        if kind == "open":
            return self.read_list()
        if kind == "vector":
            return self.read_vector()
        if kind == "quote":
            return make_list(QUOTE, self.read())
        if kind == "close":
            raise LispSyntaxError("unexpected ')'")
        if kind == "string":
            return _unescape(text[1:-1])
        return parse_atom(text)

    def read_list(self) -> ValueType:
        items = []
        tail = NIL
        while True:
            kind, text = self.peek()
            if kind == "close":
                self.pos += 1
                break
            if kind == "atom" and text == ".":
                if not items:
                    raise LispSyntaxError("dot without a preceding element")
                self.pos += 1
                tail = self.read()
                if self.next()[0] != "close":
                    raise LispSyntaxError("expected ')' after dotted tail")
                break
            items.append(self.read())
        return from_iterable(items, tail)

    def read_vector(self) -> List:
        items = []
        while self.peek()[0] != "close":
            items.append(self.read())
        self.pos += 1
        return items


def parse_sexpr(text: str) -> Optional[ValueType]:
    """
    Parse exactly one datum from text.

    Returns None for blank input (or input holding only comments).

    Examples:
        "(1 2 3)" -> (1 2 3)
        "'a" -> (quote a)
    """
    reader = _Reader(tokenize(text))
    if reader.at_end():
        return None
    datum = reader.read()
    if not reader.at_end():
        raise LispSyntaxError(f"unexpected trailing input: {reader.peek()[1]!r}")
    return datum


def parse_all(text: str) -> List[ValueType]:
    """Parse every datum in text, in order."""
    reader = _Reader(tokenize(text))
    data = []
    while not reader.at_end():
        data.append(reader.read())
    return data


# ============================================================
# Printer
# ============================================================

def _format_real(x) -> str:
    if isinstance(x, float):
        if math.isnan(x):
            return "+nan.0"
        if math.isinf(x):
            return "+inf.0" if x > 0 else "-inf.0"
        return repr(x)
    return str(x)


def _format_number(x) -> str:
    if isinstance(x, complex):
        im = _format_real(x.imag)
        if im[0] not in "+-":
            im = "+" + im
        return f"{_format_real(x.real)}{im}i"
    return _format_real(x)


def _format_string(s: str) -> str:
    escaped = s.replace("\\", "\\\\").replace('"', '\\"')
    escaped = escaped.replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r")
    return f'"{escaped}"'


def format_sexpr(value: ValueType, write: bool = True) -> str:
    """
    Format a value as its external representation.

    Args:
        value: Value to format
        write: If True, strings are quoted and escaped (``write`` style).
               If False, strings print raw (``display`` style).

    Examples:
        (1 2 3) -> "(1 2 3)"
        (quote a) -> "'a"
        [1, 2] -> "#(1 2)"
    """
    if value is NIL:
        return "()"
    if value is True:
        return "#t"
    if value is False:
        return "#f"
    if value is UNSPECIFIED:
        return "#<unspecified>"
    if isinstance(value, Symbol):
        return value.name
    if isinstance(value, str):
        return _format_string(value) if write else value
    if isinstance(value, (int, Fraction, float, complex)):
        return _format_number(value)
    if isinstance(value, Pair):
        if value.car is QUOTE and isinstance(value.cdr, Pair) and value.cdr.cdr is NIL:
            return "'" + format_sexpr(value.cdr.car, write)
        parts = []
        node = value
        while isinstance(node, Pair):
            parts.append(format_sexpr(node.car, write))
            node = node.cdr
        if node is not NIL:
            parts.append(".")
            parts.append(format_sexpr(node, write))
        return "(" + " ".join(parts) + ")"
    if isinstance(value, list):
        return "#(" + " ".join(format_sexpr(item, write) for item in value) + ")"
    if isinstance(value, Continuation):
        return repr(value)
    if callable(value):
        name = getattr(value, "__name__", None)
        return f"#<procedure {name}>" if name else "#<procedure>"
    return repr(value)
