"""Output formatters for agentcheck."""

from agentcheck.output.structured import (
    CoverageOutput,
    StructuredReport,
    VerdictOutput,
    build_coverage_output,
    build_structured_output,
)

__all__ = [
    "CoverageOutput",
    "StructuredReport",
    "VerdictOutput",
    "build_coverage_output",
    "build_structured_output",
]
