"""
Structured Output — JSON format for validation results.

The same information as the text report, for CI tooling:
- One entry per rule, with status, reason and locations
- Tally and exit code
- Coverage (percentage or null with a reason)
- Degraded-mode disclosure

No timestamps: identical inputs give identical JSON.
"""

from typing import Optional

from pydantic import BaseModel, Field

from agentcheck import __version__
from agentcheck.core.location import Location
from agentcheck.coverage.analyzer import CoverageReport
from agentcheck.report.aggregator import ValidationReport
from agentcheck.rules.models import RuleOutcome


SCHEMA_VERSION = "1.0"


# ============================================================================
# Output Models
# ============================================================================

class LocationOutput(BaseModel):
    path: str
    line: Optional[int] = None
    text: Optional[str] = Field(None, description="Matched text, if any")


class VerdictOutput(BaseModel):
    """One rule's result."""

    rule_id: str
    category: str = Field(..., description="presence|file|existence|signature|deprecated_pattern|required_pattern")
    description: str
    status: str = Field(..., description="pass|fail|warn")
    reason: str = ""
    locations: list[LocationOutput] = Field(default_factory=list)
    remediation: Optional[str] = None


class TallyOutput(BaseModel):
    total: int
    passed: int
    failed: int
    warned: int


class CoverageOutput(BaseModel):
    applicable: bool
    percentage: Optional[float] = Field(None, description="0-100, null when not measured")
    reason: Optional[str] = Field(None, description="Why coverage was not measured")
    total_symbols: int = 0
    documented: list[str] = Field(default_factory=list)
    undocumented: list[str] = Field(default_factory=list)


class ErrorOutput(BaseModel):
    type: str = Field(..., description="input|config")
    kind: Optional[str] = None
    message: str
    location: Optional[str] = None


class StructuredReport(BaseModel):
    """Complete machine-readable validation report."""

    agentcheck_version: str
    schema_version: str = SCHEMA_VERSION
    ruleset: Optional[str] = None
    exit_code: int
    degraded: bool = False
    degraded_reason: Optional[str] = None

    verdicts: list[VerdictOutput] = Field(default_factory=list)
    tally: TallyOutput
    coverage: Optional[CoverageOutput] = None
    error: Optional[ErrorOutput] = None


# ============================================================================
# Conversion Functions
# ============================================================================

def _location(loc: Location) -> LocationOutput:
    return LocationOutput(path=loc.path, line=loc.line, text=loc.text)


def _verdict(outcome: RuleOutcome) -> VerdictOutput:
    return VerdictOutput(
        rule_id=outcome.rule_id,
        category=outcome.category.value,
        description=outcome.description,
        status=outcome.verdict.status.value,
        reason=outcome.verdict.reason,
        locations=[_location(loc) for loc in outcome.verdict.locations],
        remediation=outcome.remediation,
    )


def build_coverage_output(coverage: CoverageReport) -> CoverageOutput:
    if not coverage.applicable:
        return CoverageOutput(applicable=False, reason=coverage.percentage.reason)
    return CoverageOutput(
        applicable=True,
        percentage=coverage.percentage,
        total_symbols=coverage.total_symbols,
        documented=list(coverage.documented_names),
        undocumented=list(coverage.undocumented_names),
    )


def build_structured_output(report: ValidationReport, ruleset: Optional[str] = None) -> StructuredReport:
    """Convert a ValidationReport to its JSON model."""
    error = None
    if report.input_error is not None:
        error = ErrorOutput(
            type="input",
            kind=report.input_error.kind.value,
            message=report.input_error.message,
            location=report.input_error.location,
        )
    elif report.config_error is not None:
        error = ErrorOutput(type="config", message=str(report.config_error))

    tally = report.tally
    return StructuredReport(
        agentcheck_version=__version__,
        ruleset=ruleset,
        exit_code=report.exit_code,
        degraded=report.degraded,
        degraded_reason=report.degraded_reason,
        verdicts=[_verdict(o) for o in report.outcomes],
        tally=TallyOutput(
            total=tally.total,
            passed=tally.passed,
            failed=tally.failed,
            warned=tally.warned,
        ),
        coverage=build_coverage_output(report.coverage) if report.coverage is not None else None,
        error=error,
    )
