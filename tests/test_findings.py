"""
Unit tests for cca.findings (gating) and cca.explanation (messages).

Gating mirrors its pipeline:
    1. Filter by enabled rules
    2. Exact-duplicate removal
    3. Ranking by location
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from cca.data_structures import Diagnostic, RuleId, SourceSpan
from cca.explanation import explain, format_message
from cca.findings import gate_diagnostics

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _diag(rule_id=RuleId.UNUSED_LOCAL, line=1, column=1, args=("x",), path="A.cs"):
    return Diagnostic(rule_id, SourceSpan(path, line, column, line, column + 1), args)


# ---------------------------------------------------------------------------
# Gating
# ---------------------------------------------------------------------------

class TestFilter:

    def test_disabled_rules_are_dropped(self):
        diags = [_diag(RuleId.UNUSED_LOCAL), _diag(RuleId.DEEP_NESTING, args=("M", "4"))]
        assert gate_diagnostics(diags, {RuleId.DEEP_NESTING}) == [diags[1]]

    def test_default_keeps_everything(self):
        diags = [_diag(rule_id, line=i + 1) for i, rule_id in enumerate(RuleId)]
        assert len(gate_diagnostics(diags)) == len(RuleId)

    def test_empty_input_returns_empty(self):
        assert gate_diagnostics([]) == []


class TestDedup:

    def test_exact_duplicates_collapse(self):
        assert gate_diagnostics([_diag(), _diag()]) == [_diag()]

    def test_same_place_different_rule_kept(self):
        diags = [_diag(RuleId.HIGH_PARAM_COUNT, args=("M", "4")),
                 _diag(RuleId.DEEP_NESTING, args=("M", "4"))]
        assert len(gate_diagnostics(diags)) == 2


class TestRank:

    def test_sorted_by_path_line_column(self):
        later = _diag(line=9)
        earlier = _diag(line=2, column=5)
        first = _diag(line=2, column=1)
        other_file = _diag(line=1, path="B.cs")

        assert gate_diagnostics([other_file, later, earlier, first]) == [
            first, earlier, later, other_file,
        ]

    def test_rule_id_breaks_ties(self):
        a = _diag(RuleId.DEEP_NESTING, args=("M", "5"))
        b = _diag(RuleId.HIGH_PARAM_COUNT, args=("M", "5"))
        assert gate_diagnostics([a, b]) == [b, a]


# ---------------------------------------------------------------------------
# Explanation
# ---------------------------------------------------------------------------

class TestMessages:

    def test_unused_local(self):
        assert format_message(_diag(RuleId.UNUSED_LOCAL, args=("total",))) == "total is unused."

    def test_parameter_count(self):
        msg = format_message(_diag(RuleId.HIGH_PARAM_COUNT, args=("Build", "4")))
        assert msg == "Build has too many parameters (4 parameters)."

    def test_nesting(self):
        msg = format_message(_diag(RuleId.DEEP_NESTING, args=("Walk", "5")))
        assert msg == "Walk has deep nested blocks (5 levels)."

    def test_string_compare_ignores_argument(self):
        msg = format_message(_diag(RuleId.STRING_COMPARE_ABUSE, args=("string.Compare(a, b) == 0",)))
        assert msg == "Use string.Equals instead of string.Compare."

    def test_complex_if(self):
        assert format_message(_diag(RuleId.COMPLEX_IF_CONDITION, args=("3",))) == "Complex If Condition (3)."


class TestExplain:

    def test_render(self):
        (explanation,) = explain([_diag(line=4, column=13)])
        assert explanation.render() == "A.cs:4:13: warning PNCC001: x is unused."

    def test_to_dict(self):
        (explanation,) = explain([_diag(RuleId.HIGH_PARAM_COUNT, line=3, column=10, args=("M", "4"))])
        data = explanation.to_dict()

        assert data["rule"] == "PNCC002"
        assert data["severity"] == "warning"
        assert data["category"] == "Optimization"
        assert data["arguments"] == ["M", "4"]
        assert (data["path"], data["line"], data["column"]) == ("A.cs", 3, 10)

    def test_preserves_order(self):
        diags = [_diag(line=5), _diag(line=1)]
        assert [e.diagnostic for e in explain(diags)] == diags
