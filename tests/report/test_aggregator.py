"""
Unit tests for report aggregation, rendering and JSON output.
"""

import json

from agentcheck.core.errors import ConfigError, InputError, InputErrorKind
from agentcheck.core.location import Location
from agentcheck.coverage.analyzer import CoverageReport, NotApplicable
from agentcheck.output.structured import build_structured_output
from agentcheck.report.aggregator import ValidationReport, aggregate
from agentcheck.report.render import render_report
from agentcheck.rules.models import RuleCategory, RuleOutcome, Verdict
from agentcheck.symbols.models import UNAVAILABLE, SymbolTable


def outcome(rule_id, category, verdict, remediation=None):
    return RuleOutcome(rule_id, category, f"check {rule_id}", verdict, remediation)


PASS = outcome("p", RuleCategory.PRESENCE, Verdict.passed("ok"))
WARN = outcome("w", RuleCategory.EXISTENCE, Verdict.warn("SDK source not found; cannot confirm X exists"))
FAIL = outcome(
    "f", RuleCategory.DEPRECATED_PATTERN,
    Verdict.fail("'CloudXInitParams' found at a.md:3", (Location("a.md", 3, "CloudXInitParams"),)),
    remediation="Rename to CloudXInitializationParams",
)


class TestAggregate:

    def test_tally(self):
        report = aggregate([PASS, WARN, FAIL, PASS])
        assert (report.tally.passed, report.tally.failed, report.tally.warned) == (2, 1, 1)
        assert report.tally.total == 4

    def test_fail_sets_exit_code(self):
        assert aggregate([PASS, FAIL]).exit_code == 1

    def test_warnings_do_not_fail(self):
        assert aggregate([PASS, WARN]).exit_code == 0

    def test_no_rules_passes(self):
        assert aggregate([]).exit_code == 0

    def test_degraded_from_unavailable(self):
        report = aggregate([WARN], symbols=UNAVAILABLE)
        assert report.degraded
        assert report.degraded_reason == "SDK source not found"
        assert not aggregate([PASS], symbols=SymbolTable("sdk")).degraded

    def test_input_error_report(self):
        err = InputError(InputErrorKind.UNTERMINATED_REGION, "never closed", path="a.md", line=4)
        report = ValidationReport.for_input_error(err)
        assert report.verdicts == ()
        assert report.exit_code == 2

    def test_config_error_report(self):
        assert ValidationReport.for_config_error(ConfigError("bad")).exit_code == 3


class TestRenderReport:

    def test_groups_by_category_in_fixed_order(self):
        text = render_report(aggregate([FAIL, WARN, PASS]))
        assert text.index("Agent Documents") < text.index("SDK Symbols") < text.index("Deprecated Patterns")

    def test_verdict_lines(self):
        text = render_report(aggregate([PASS, WARN, FAIL]))
        assert "✅ PASS: check p" in text
        assert "⚠️  WARN: check w" in text
        assert "❌ FAIL: check f" in text
        assert "   → 'CloudXInitParams' found at a.md:3" in text

    def test_remediation_only_on_failure(self):
        assert "Remediation:" not in render_report(aggregate([PASS, WARN]))
        text = render_report(aggregate([PASS, FAIL]))
        assert "Remediation:" in text
        assert "Fix: Rename to CloudXInitializationParams" in text

    def test_summary_before_remediation(self):
        text = render_report(aggregate([FAIL]))
        assert text.index("Validation Summary") < text.index("Remediation:")

    def test_coverage_in_summary(self):
        coverage = CoverageReport(70.0, 10, tuple("ABCDEFG"), tuple("HIJ"))
        text = render_report(aggregate([PASS], coverage))
        assert "API coverage:  70% (7/10 public names mentioned)" in text
        assert "does not prove" in text

    def test_coverage_not_applicable(self):
        coverage = CoverageReport(NotApplicable("SDK source not found"))
        text = render_report(aggregate([PASS], coverage, UNAVAILABLE))
        assert "API coverage:  N/A" in text
        assert "0%" not in text

    def test_degraded_disclosure(self):
        text = render_report(aggregate([WARN], symbols=UNAVAILABLE))
        assert "source-confirmed validation did not run" in text

    def test_input_error(self):
        err = InputError(InputErrorKind.NESTED_REGION, "nested", path="a.md", line=7)
        text = render_report(ValidationReport.for_input_error(err))
        assert "a.md:7" in text
        assert "PASS" not in text

    def test_byte_identical(self):
        first = render_report(aggregate([PASS, WARN, FAIL]))
        second = render_report(aggregate([PASS, WARN, FAIL]))
        assert first == second


class TestStructuredOutput:

    def test_json_round_trip(self):
        coverage = CoverageReport(NotApplicable("SDK source not found"))
        report = aggregate([PASS, FAIL], coverage, UNAVAILABLE)
        data = json.loads(build_structured_output(report, ruleset="cloudx-android").model_dump_json())
        assert data["exit_code"] == 1
        assert data["degraded"] is True
        assert [v["status"] for v in data["verdicts"]] == ["pass", "fail"]
        assert data["verdicts"][1]["locations"][0] == {"path": "a.md", "line": 3, "text": "CloudXInitParams"}
        assert data["coverage"]["percentage"] is None

    def test_input_error_json(self):
        err = InputError(InputErrorKind.UNMATCHED_END, "no start", path="a.md", line=2)
        data = json.loads(build_structured_output(ValidationReport.for_input_error(err)).model_dump_json())
        assert data["verdicts"] == []
        assert data["error"]["kind"] == "unmatched_end"
        assert data["error"]["location"] == "a.md:2"
        assert data["exit_code"] == 2
