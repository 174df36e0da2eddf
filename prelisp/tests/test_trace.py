"""Tests for call tracing."""

from prelisp import CallStep, CallTrace, PreludeEngine


class TestTraceFormatting:
    """Tests for trace format() method."""

    def setup_method(self):
        """Set up test engine."""
        self.engine = PreludeEngine()

    def test_format_verbose(self):
        """Verbose format shows the expression, each call and the value."""
        result, trace = self.engine("(+ (gcd 12 18) 1)", trace=True)

        verbose = trace.format("verbose")
        assert "Expression: (+ (gcd 12 18) 1)" in verbose
        assert "(gcd 12 18) => 6" in verbose
        assert "Value: 7" in verbose

    def test_format_compact(self):
        """Compact format is a single line."""
        result, trace = self.engine("(+ (gcd 12 18) 1)", trace=True)

        compact = trace.format("compact")
        assert "--[gcd, +]-->" in compact
        assert compact.count("\n") == 0

    def test_format_calls(self):
        """Calls format shows procedure names in completion order."""
        result, trace = self.engine("(reverse (list 1 2))", trace=True)
        assert trace.format("calls") == "list -> reverse"

    def test_format_empty_trace(self):
        """A self-evaluating expression makes no calls."""
        result, trace = self.engine("42", trace=True)
        assert result == 42
        assert trace.format("calls") == "(no calls)"
        assert not trace

    def test_inner_calls_indented(self):
        """Nested calls are indented by depth."""
        result, trace = self.engine("(+ (* 2 3) 1)", trace=True)
        lines = repr(trace).splitlines()
        assert lines[1].startswith("    1. (* 2 3)")
        assert lines[2].startswith("  2. (+ 6 1)")


class TestTraceData:
    """Tests for trace inspection and serialization."""

    def setup_method(self):
        self.engine = PreludeEngine()

    def test_steps(self):
        result, trace = self.engine("(max (abs -3) (abs 2))", trace=True)
        assert result == 3
        assert len(trace) == 3
        assert [step.name for step in trace] == ["abs", "abs", "max"]
        assert trace.steps[0].args == (-3,)
        assert trace.steps[0].result == 3

    def test_call_counts(self):
        result, trace = self.engine("(max (abs -3) (abs 2))", trace=True)
        assert trace.call_counts() == {"abs": 2, "max": 1}
        assert trace.calls_made() == ["abs", "abs", "max"]

    def test_summary(self):
        result, trace = self.engine("(max (abs -3) (abs 2))", trace=True)
        assert trace.summary() == "3 calls to 2 procedures. Most called: abs (2x)"
        assert CallTrace().summary() == "No calls made"

    def test_to_dict(self):
        result, trace = self.engine("(length '(1 2))", trace=True)
        data = trace.to_dict()
        assert data["expression"] == "(length '(1 2))"
        assert data["value"] == "2"
        assert data["step_count"] == 1
        assert data["steps"][0] == {"name": "length", "args": ["(1 2)"], "result": "2", "depth": 0}

    def test_step_repr(self):
        step = CallStep("gcd", (12, 18), 6)
        assert repr(step) == "(gcd 12 18) => 6"
        assert repr(CallStep("newline", (), None)) == "(newline) => #<unspecified>"

    def test_untraced_returns_value_only(self):
        assert self.engine("(lcm 4 6)") == 12
