"""Name-mention coverage of the SDK public API."""

from agentcheck.coverage.analyzer import CoverageReport, NotApplicable, compute_coverage

__all__ = ["CoverageReport", "NotApplicable", "compute_coverage"]
