"""
Report Rendering — Plain-text report for humans and CI logs.

Layout, in fixed order:
1. Header (and the degraded-mode banner when source was unavailable)
2. Verdict lines grouped by category, declaration order within a group
3. Summary block (tally, coverage or N/A)
4. Remediation checklist, only when something failed

The text contains no timestamps or absolute machine state, so identical
inputs give a byte-identical report.
"""

from itertools import groupby
from typing import Optional

from agentcheck.coverage.analyzer import CoverageReport
from agentcheck.rules.models import RuleCategory, RuleOutcome, VerdictStatus
from agentcheck.report.aggregator import ValidationReport

RULE = "=" * 40

COVERAGE_DISCLAIMER = (
    "Coverage counts exact name mentions only; a mention does not prove "
    "the API is explained correctly."
)

_STATUS_LABEL = {
    VerdictStatus.PASS: "✅ PASS",
    VerdictStatus.FAIL: "❌ FAIL",
    VerdictStatus.WARN: "⚠️  WARN",
}

_CATEGORY_ICON = {
    RuleCategory.PRESENCE: "📁",
    RuleCategory.FILE: "📋",
    RuleCategory.EXISTENCE: "🏭",
    RuleCategory.SIGNATURE: "🔧",
    RuleCategory.DEPRECATED_PATTERN: "🔍",
    RuleCategory.REQUIRED_PATTERN: "📝",
}


def _detail(outcome: RuleOutcome) -> Optional[str]:
    verdict = outcome.verdict
    reason = verdict.reason
    location = verdict.location
    if location is not None and str(location) not in reason:
        reason = f"{reason} ({location})" if reason else str(location)
    return reason or None


def render_outcome(outcome: RuleOutcome) -> list[str]:
    """One verdict line, plus an arrow line for Fail and Warn."""
    status = outcome.verdict.status
    lines = [f"{_STATUS_LABEL[status]}: {outcome.description}"]
    if status is not VerdictStatus.PASS:
        detail = _detail(outcome)
        if detail:
            lines.append(f"   → {detail}")
    return lines


def render_coverage_summary(coverage: Optional[CoverageReport]) -> list[str]:
    if coverage is None:
        return ["API coverage:  not computed"]
    if not coverage.applicable:
        return [f"API coverage:  N/A ({coverage.percentage.reason})"]
    return [
        f"API coverage:  {coverage.format_percentage()} "
        f"({len(coverage.documented_names)}/{coverage.total_symbols} public names mentioned)",
        f"   {COVERAGE_DISCLAIMER}",
    ]


def _degraded_banner(report: ValidationReport) -> list[str]:
    return [
        f"⚠️  DEGRADED MODE: {report.degraded_reason}",
        "   Only syntax-level checks ran; source-confirmed validation did not run.",
        "   Set SDK_DIR (or --sdk-dir) to the SDK source for full validation.",
        "",
    ]


def render_report(report: ValidationReport, title: str = "Agent Documentation Validation") -> str:
    """
    Render a ValidationReport as text.

    Args:
        report: The report to render
        title: Header line (usually includes the ruleset name)

    Returns:
        The report text, newline-terminated
    """
    lines = [f"🔍 {title}", RULE, ""]

    if report.input_error is not None:
        lines += [
            f"❌ INPUT ERROR ({report.input_error.kind.value}): {report.input_error}",
            "   The check could not run; no rules were evaluated.",
            "",
        ]
        return "\n".join(lines) + "\n"

    if report.config_error is not None:
        lines += [
            f"❌ CONFIG ERROR: {report.config_error}",
            "   The ruleset could not be loaded; no rules were evaluated.",
            "",
        ]
        return "\n".join(lines) + "\n"

    if report.degraded:
        lines += _degraded_banner(report)

    # Stable sort keeps declaration order inside each category
    order = list(RuleCategory)
    ordered = sorted(report.outcomes, key=lambda o: order.index(o.category))
    for category, group in groupby(ordered, key=lambda o: o.category):
        lines.append(f"{_CATEGORY_ICON[category]} {category.title}")
        for outcome in group:
            lines += render_outcome(outcome)
        lines.append("")

    tally = report.tally
    lines += [
        RULE,
        "📊 Validation Summary",
        RULE,
        f"Total Checks:  {tally.total}",
        f"Passed:        {tally.passed}",
        f"Failed:        {tally.failed}",
        f"Warnings:      {tally.warned}",
    ]
    lines += render_coverage_summary(report.coverage)
    if report.degraded:
        lines.append("Source-confirmed validation did not run (SDK source unavailable).")
    lines.append("")

    if report.has_failures:
        lines += ["❌ VALIDATION FAILED", "", "Remediation:"]
        for i, outcome in enumerate(report.failures, 1):
            lines.append(f"{i}. {outcome.description}")
            detail = _detail(outcome)
            if detail:
                lines.append(f"   → {detail}")
            if outcome.remediation:
                lines.append(f"   Fix: {outcome.remediation}")
        lines.append("")
    elif tally.warned:
        lines += ["⚠️  VALIDATION PASSED WITH WARNINGS", ""]
    else:
        lines += ["✅ ALL CHECKS PASSED", ""]

    return "\n".join(lines) + "\n"


def render_coverage(coverage: CoverageReport, source_root: Optional[str] = None) -> str:
    """Standalone coverage report (the `coverage` command)."""
    lines = ["🔍 API Coverage Check", RULE, ""]

    if not coverage.applicable:
        lines += [
            f"⚠️  {coverage.percentage.reason}",
            "   Coverage: N/A (not measured)",
            "",
        ]
        return "\n".join(lines) + "\n"

    if source_root:
        lines += [f"SDK source: {source_root}", ""]

    for name in coverage.documented_names:
        lines.append(f"✅ {name} - documented")
    for name in coverage.undocumented_names:
        lines.append(f"⚠️  {name} - NOT documented in agents")

    lines += [
        "",
        RULE,
        "📊 Coverage Summary",
        RULE,
        f"Total Public APIs:     {coverage.total_symbols}",
        f"Documented:            {len(coverage.documented_names)}",
        f"Missing from agents:   {len(coverage.undocumented_names)}",
        f"Coverage:              {coverage.format_percentage()}",
        "",
        COVERAGE_DISCLAIMER,
        "",
    ]
    return "\n".join(lines) + "\n"
