"""
Error types for PRELISP.

Each error also derives from the closest built-in exception, so callers
may catch either ``LispTypeError`` or plain ``TypeError``.
"""


class LispError(Exception):
    """Base class for all prelisp errors."""


class LispTypeError(LispError, TypeError):
    """An operand of the wrong kind (e.g. a string passed to ``<``)."""


class LispIndexError(LispError, IndexError):
    """Access past the end of a list or outside a vector."""


class LispDomainError(LispError, ValueError):
    """An operand of the right kind outside the procedure's domain."""


class LispNameError(LispError, KeyError):
    """A symbol with no procedure bound to it."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class LispSyntaxError(LispError, ValueError):
    """Malformed textual input."""


class ContinuationError(LispError, RuntimeError):
    """A one-shot continuation invoked outside its dynamic extent."""
