#!/usr/bin/env python3
"""
PRELISP Command-Line Interface

Provides interactive REPL, script execution, and pipe/filter modes.

Usage:
    prelisp                             # Start REPL
    prelisp script.plisp                # Run script
    prelisp -e "(gcd 12 18)"            # Evaluate expression
    prelisp -p numeric -e "(lcm 4 6)"   # One-shot with a smaller prelude
    echo "(reverse '(1 2 3))" | prelisp # Filter mode

Script Format (.plisp files):
    #!/usr/bin/env prelisp
    :prelude full

    (map + '(1 2 3) '(10 20 30))
    (assoc 2 '((1 a) (2 b)))

REPL Commands:
    :help              Show help
    :prelude NAME      Set prelude (full, derived, substrate, control,
                       numeric, list, vector, none, or path.py)
    :names             List bound procedure names
    :doc NAME          Show the first line of a procedure's docstring
    :trace on|off      Toggle tracing
    :quit              Exit
"""

import argparse
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .engine import PreludeEngine
from .errors import LispSyntaxError
from .prelude import (
    CONTROL_PRELUDE, DERIVED_PRELUDE, FULL_PRELUDE, LIST_PRELUDE, NO_PRELUDE,
    NUMERIC_PRELUDE, SUBSTRATE_PRELUDE, VECTOR_PRELUDE, PreludeType,
)
from .reader import format_sexpr, parse_all, tokenize
from .substrate import UNSPECIFIED

# Try to import readline for better REPL experience
try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False

logger = logging.getLogger(__name__)

# Built-in preludes
BUILTIN_PRELUDES: Dict[str, PreludeType] = {
    "none": NO_PRELUDE,
    "substrate": SUBSTRATE_PRELUDE,
    "control": CONTROL_PRELUDE,
    "numeric": NUMERIC_PRELUDE,
    "list": LIST_PRELUDE,
    "vector": VECTOR_PRELUDE,
    "derived": DERIVED_PRELUDE,
    "full": FULL_PRELUDE,
}

# Standard prelude search paths
PRELUDE_SEARCH_PATHS = [
    Path("./preludes"),
    Path.home() / ".config" / "prelisp" / "preludes",
]


def setup_logging(level: str = "WARNING") -> None:
    """Configure root logging once for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def load_custom_prelude(name_or_path: str) -> Optional[PreludeType]:
    """
    Load a custom prelude from a Python file.

    The file should define a PRELUDE dict mapping names to procedures.

    Args:
        name_or_path: Either a path to a .py file, or a name to search for

    Returns:
        The PRELUDE dict from the file, or None if not found
    """
    path = Path(name_or_path)

    # If it's an explicit path
    if path.suffix == ".py" or "/" in name_or_path or "\\" in name_or_path:
        if not path.exists():
            return None
        search_paths = [path]
    else:
        # Search for name.py in standard locations
        search_paths = []
        for search_dir in PRELUDE_SEARCH_PATHS:
            candidate = search_dir / f"{name_or_path}.py"
            if candidate.exists():
                search_paths.append(candidate)

    for prelude_path in search_paths:
        spec = importlib.util.spec_from_file_location("custom_prelude", prelude_path)
        if spec is None or spec.loader is None:
            continue
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            logger.warning("Error loading prelude from %s: %s", prelude_path, e)
            continue
        if hasattr(module, "PRELUDE"):
            logger.info("Loaded prelude from %s", prelude_path)
            return module.PRELUDE
        logger.warning("%s defines no PRELUDE", prelude_path)

    return None


class PrelispCompleter:
    """Tab completer for PRELISP REPL."""

    # Commands that can be completed
    COMMANDS = [
        ":help", ":quit", ":exit", ":q",
        ":prelude", ":names", ":doc", ":trace",
    ]

    TRACE_OPTIONS = ["on", "off"]

    def __init__(self, repl: 'PrelispREPL'):
        self.repl = repl
        self.matches: List[str] = []

    def complete(self, text: str, state: int) -> Optional[str]:
        """Return the next possible completion for 'text'."""
        if state == 0:
            # Build completion list on first call
            line = readline.get_line_buffer() if HAS_READLINE else ""
            self.matches = self._get_matches(text, line)

        try:
            return self.matches[state]
        except IndexError:
            return None

    def _get_matches(self, text: str, line: str) -> list:
        """Get list of matches for the current input."""
        line = line.lstrip()

        # After :prelude, complete prelude names (check before general command completion)
        if line.startswith(":prelude "):
            return [p for p in BUILTIN_PRELUDES if p.startswith(text)]

        # After :trace, complete on/off
        if line.startswith(":trace "):
            return [t for t in self.TRACE_OPTIONS if t.startswith(text)]

        # Command completion
        if text.startswith(":") or (line.startswith(":") and " " not in line):
            return [c for c in self.COMMANDS if c.startswith(text)]

        # In expression context, complete procedure names
        word = text.lstrip("('")
        prefix = text[:len(text) - len(word)]
        return [prefix + name for name in self.repl.engine.names() if name.startswith(word)]


def count_parens(text: str) -> int:
    """
    Count unbalanced parentheses using the reader's tokenizer.

    Returns >0 if more open than close. Parentheses inside strings and
    comments are not counted, and an unterminated string counts as open.
    """
    try:
        tokens = tokenize(text)
    except LispSyntaxError:
        return 1
    depth = 0
    for kind, _ in tokens:
        if kind in ("open", "vector"):
            depth += 1
        elif kind == "close":
            depth -= 1
    return depth


def is_error(output: str) -> bool:
    """True when processed output ended in an evaluation error."""
    lines = output.splitlines()
    return bool(lines) and lines[-1].startswith("Error")


class PrelispREPL:
    """Interactive REPL for prelisp."""

    def __init__(self):
        self.engine = PreludeEngine()
        self.prelude_name = "full"
        self.trace = False
        self.running = True
        self.multi_line_buffer = ""

        # Set up readline history and completion
        if HAS_READLINE:
            self.history_file = Path.home() / ".prelisp_history"
            try:
                readline.read_history_file(self.history_file)
            except (FileNotFoundError, OSError):
                pass
            readline.set_history_length(1000)

            # Set up tab completion
            self.completer = PrelispCompleter(self)
            readline.set_completer(self.completer.complete)
            readline.parse_and_bind("tab: complete")

            # Configure completion delimiters (don't break on colons for commands)
            readline.set_completer_delims(" \t\n")

    def save_history(self):
        """Save readline history."""
        if HAS_READLINE:
            try:
                readline.write_history_file(self.history_file)
            except OSError as e:
                logger.debug("could not save history: %s", e)

    def set_prelude(self, name: str) -> bool:
        """Set the prelude by name or path."""
        name_lower = name.lower()

        if name_lower in BUILTIN_PRELUDES:
            self.engine.with_prelude(BUILTIN_PRELUDES[name_lower])
            self.prelude_name = name_lower
            return True

        # Try to load custom prelude
        custom = load_custom_prelude(name)
        if custom is not None:
            self.engine.with_prelude(custom)
            self.prelude_name = name
            return True

        return False

    def handle_command(self, line: str) -> Optional[str]:
        """
        Handle a REPL command (starts with :).

        Returns a message to print, or None.
        """
        parts = line[1:].split(None, 1)
        if not parts:
            return "Unknown command. Type :help for help."

        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd == "help":
            return self.help_text()

        elif cmd == "quit" or cmd == "exit" or cmd == "q":
            self.running = False
            return None

        elif cmd == "prelude":
            if not arg:
                available = ", ".join(BUILTIN_PRELUDES.keys())
                return (f"Current prelude: {self.prelude_name}\n"
                        f"Usage: :prelude NAME\nAvailable: {available}\n"
                        f"Or provide a path to a .py file")
            if self.set_prelude(arg):
                return f"Prelude set to: {arg}"
            else:
                return f"Unknown prelude: {arg}"

        elif cmd == "names":
            names = self.engine.names()
            if not names:
                return "No procedures bound"
            return " ".join(names)

        elif cmd == "doc":
            if not arg:
                return "Usage: :doc NAME"
            if arg not in self.engine:
                return f"Error: unbound procedure: {arg}"
            doc = inspect.getdoc(self.engine[arg])
            if not doc:
                return f"{arg}: no documentation"
            return f"{arg}: {doc.splitlines()[0]}"

        elif cmd == "trace":
            if arg.lower() in ("on", "true", "1"):
                self.trace = True
                return "Tracing enabled"
            elif arg.lower() in ("off", "false", "0"):
                self.trace = False
                return "Tracing disabled"
            else:
                self.trace = not self.trace
                return f"Tracing {'enabled' if self.trace else 'disabled'}"

        else:
            return f"Unknown command: {cmd}. Type :help for help."

    def help_text(self) -> str:
        """Return help text."""
        return """PRELISP REPL Commands:
  :help              Show this help
  :prelude NAME      Set prelude (full, derived, substrate, control,
                     numeric, list, vector, none, or path.py)
  :names             List bound procedure names
  :doc NAME          Show the first line of a procedure's docstring
  :trace on|off      Toggle tracing
  :quit              Exit

Syntax:
  (proc arg ...)     Apply a prelude procedure
  'datum             Quoted data: '(1 2 3), 'a
  #(1 2 3)           Vector literal
  ; comment          Ignored to end of line
"""

    def process_line(self, line: str) -> Optional[str]:
        """
        Process a single line of input.

        A line may hold several expressions; each is evaluated in turn and
        its value printed on its own line. Values that are unspecified
        (from display, for-each, ...) print nothing. Evaluation stops at
        the first error, which is reported after any earlier values.

        Returns the result to print, or None.
        """
        line = line.strip()

        # Empty line or comment
        if not line or line.startswith(";") or line.startswith("#!"):
            return None

        # Command
        if line.startswith(":"):
            return self.handle_command(line)

        outputs: List[str] = []
        try:
            for expr in parse_all(line):
                outputs.extend(self.evaluate_datum(expr))
        except Exception as e:
            outputs.append(f"Error: {e}")
        return "\n".join(outputs) if outputs else None

    def evaluate_datum(self, expr) -> List[str]:
        """Evaluate one datum, returning its printed value and trace lines."""
        if self.trace:
            result, trace = self.engine(expr, trace=True)
        else:
            result, trace = self.engine(expr), None
        lines = [] if result is UNSPECIFIED else [format_sexpr(result)]
        if trace:
            lines.append(trace.format("calls"))
        return lines

    def run(self):
        """Run the REPL loop."""
        print(f"PRELISP {__version__} - derived procedures for a small Lisp")
        print("Type :help for help, :quit to exit")
        print("Multi-line input: expressions with unbalanced parens continue on next line")
        print()

        while self.running:
            try:
                # Determine prompt based on whether we're in multi-line mode
                if self.multi_line_buffer:
                    prompt = "...... "
                else:
                    prompt = "prelisp> "

                line = input(prompt)

                # Handle multi-line input
                if self.multi_line_buffer:
                    self.multi_line_buffer += "\n" + line
                else:
                    self.multi_line_buffer = line

                # Check if we have balanced parentheses
                paren_count = count_parens(self.multi_line_buffer)

                if paren_count > 0:
                    # More open parens than close - continue reading
                    continue
                elif paren_count < 0:
                    # More close parens than open - syntax error
                    print("Error: Unbalanced parentheses (too many closing)")
                    self.multi_line_buffer = ""
                    continue

                # Process the complete input
                complete_input = self.multi_line_buffer
                self.multi_line_buffer = ""

                result = self.process_line(complete_input)
                if result:
                    print(result)

            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                # Cancel multi-line input on Ctrl+C
                if self.multi_line_buffer:
                    print("\nInput cancelled")
                    self.multi_line_buffer = ""
                else:
                    print()
                continue

        self.save_history()


class ScriptRunner:
    """Runs prelisp scripts."""

    def __init__(self):
        self.repl = PrelispREPL()

    def run_script(self, path: Path, quiet: bool = False) -> int:
        """
        Run a script file.

        Expressions may span several lines; a new one starts once the
        parentheses of the previous one balance.

        Args:
            path: Path to the script
            quiet: If True, don't print expression results

        Returns:
            Exit code (0 for success)
        """
        try:
            lines = path.read_text().splitlines()
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            return 1

        buffer = ""
        start_line = 0
        for lineno, line in enumerate(lines, 1):
            stripped = line.strip()

            if not buffer:
                # Skip empty lines, comments, and shebang
                if not stripped or stripped.startswith(";") or stripped.startswith("#!"):
                    continue

                # Handle commands
                if stripped.startswith(":"):
                    result = self.repl.handle_command(stripped)
                    if result and ("Error" in result or "Unknown" in result):
                        print(f"{path}:{lineno}: {result}", file=sys.stderr)
                        return 1
                    continue

                start_line = lineno
                buffer = line
            else:
                buffer += "\n" + line

            if count_parens(buffer) > 0:
                continue

            result = self.repl.process_line(buffer)
            buffer = ""
            if result and is_error(result):
                print(f"{path}:{start_line}: {result}", file=sys.stderr)
                return 1
            if result and not quiet:
                print(result)

        if buffer:
            print(f"{path}:{start_line}: Error: unbalanced parentheses", file=sys.stderr)
            return 1
        return 0

    def run_expression(self, expr_str: str) -> int:
        """
        Evaluate a single expression.

        Returns:
            Exit code (0 for success)
        """
        result = self.repl.process_line(expr_str)
        if result:
            print(result)
            if is_error(result):
                return 1
        return 0

    def run_stdin(self) -> int:
        """
        Read expressions from stdin and evaluate them, one per line.

        Returns:
            Exit code (0 for success)
        """
        for line in sys.stdin:
            line = line.strip()
            if not line or line.startswith(";"):
                continue

            result = self.repl.process_line(line)
            if result:
                print(result)
                if is_error(result):
                    return 1

        return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="prelisp",
        description="PRELISP - derived procedures for a small Lisp",
        epilog="Examples:\n"
               "  prelisp                           Start REPL\n"
               "  prelisp script.plisp              Run script\n"
               "  prelisp -e '(gcd 12 18)'          Evaluate expression\n"
               "  echo '(lcm 4 6)' | prelisp        Filter mode\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="Script file to run (.plisp)"
    )

    parser.add_argument(
        "-e", "--expr",
        help="Evaluate a single expression"
    )

    parser.add_argument(
        "-p", "--prelude",
        default="full",
        help="Set prelude (full, derived, substrate, control, numeric, list, "
             "vector, none, or path.py)"
    )

    parser.add_argument(
        "-t", "--trace",
        action="store_true",
        help="Enable tracing"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (suppress non-essential output)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log more (-v for info, -vv for debug)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args(argv)

    setup_logging(["WARNING", "INFO", "DEBUG"][min(args.verbose, 2)])

    # Create runner
    runner = ScriptRunner()

    # Set prelude
    if not runner.repl.set_prelude(args.prelude):
        print(f"Unknown prelude: {args.prelude}", file=sys.stderr)
        sys.exit(1)

    runner.repl.trace = args.trace

    # Determine mode
    if args.script:
        # Script mode
        sys.exit(runner.run_script(Path(args.script), quiet=args.quiet))

    elif args.expr:
        # Expression mode
        sys.exit(runner.run_expression(args.expr))

    elif not sys.stdin.isatty():
        # Pipe/filter mode (stdin is not a terminal)
        sys.exit(runner.run_stdin())

    else:
        # REPL mode
        runner.repl.run()


if __name__ == "__main__":
    main()
