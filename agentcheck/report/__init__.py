"""Report aggregation and rendering."""

from agentcheck.report.aggregator import (
    EXIT_CONFIG_ERROR,
    EXIT_FAIL,
    EXIT_INPUT_ERROR,
    EXIT_OK,
    Tally,
    ValidationReport,
    aggregate,
)
from agentcheck.report.render import render_coverage, render_report

__all__ = [
    "EXIT_CONFIG_ERROR",
    "EXIT_FAIL",
    "EXIT_INPUT_ERROR",
    "EXIT_OK",
    "Tally",
    "ValidationReport",
    "aggregate",
    "render_coverage",
    "render_report",
]
