"""
Report Aggregator — Fold verdicts into an immutable ValidationReport.

Exit codes:
- 0: no Fail (Warns allowed)
- 1: at least one Fail
- 2: InputError, the check itself could not run
- 3: ConfigError, the ruleset could not be loaded
"""

from dataclasses import dataclass, replace
from functools import reduce
from typing import Iterable, Optional

from agentcheck.core.errors import ConfigError, InputError
from agentcheck.core.logging import LogChannel, get_logger
from agentcheck.coverage.analyzer import CoverageReport
from agentcheck.rules.models import RuleOutcome, VerdictStatus
from agentcheck.symbols.models import SymbolSource, is_available

log = get_logger(LogChannel.REPORT)

EXIT_OK = 0
EXIT_FAIL = 1
EXIT_INPUT_ERROR = 2
EXIT_CONFIG_ERROR = 3


@dataclass(frozen=True)
class Tally:
    passed: int = 0
    failed: int = 0
    warned: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.warned

    def add(self, status: VerdictStatus) -> "Tally":
        if status is VerdictStatus.PASS:
            return replace(self, passed=self.passed + 1)
        if status is VerdictStatus.FAIL:
            return replace(self, failed=self.failed + 1)
        return replace(self, warned=self.warned + 1)


@dataclass(frozen=True)
class ValidationReport:
    """
    The outcome of one run.

    Built once from the ordered outcomes and never mutated. When the run
    aborted on an input or config error, `outcomes` is empty and the
    error is carried instead.
    """
    outcomes: tuple[RuleOutcome, ...] = ()
    coverage: Optional[CoverageReport] = None
    tally: Tally = Tally()
    degraded: bool = False
    degraded_reason: Optional[str] = None
    input_error: Optional[InputError] = None
    config_error: Optional[ConfigError] = None

    @property
    def verdicts(self) -> tuple[RuleOutcome, ...]:
        return self.outcomes

    @property
    def failures(self) -> list[RuleOutcome]:
        return [o for o in self.outcomes if o.verdict.status is VerdictStatus.FAIL]

    @property
    def has_failures(self) -> bool:
        return self.tally.failed > 0

    @property
    def exit_code(self) -> int:
        if self.input_error is not None:
            return EXIT_INPUT_ERROR
        if self.config_error is not None:
            return EXIT_CONFIG_ERROR
        return EXIT_FAIL if self.has_failures else EXIT_OK

    @classmethod
    def for_input_error(cls, error: InputError) -> "ValidationReport":
        """Report for a run that aborted before any rule executed."""
        return cls(input_error=error)

    @classmethod
    def for_config_error(cls, error: ConfigError) -> "ValidationReport":
        return cls(config_error=error)


def aggregate(
    outcomes: Iterable[RuleOutcome],
    coverage: Optional[CoverageReport] = None,
    symbols: Optional[SymbolSource] = None,
) -> ValidationReport:
    """
    Build the report for a completed run.

    Args:
        outcomes: Rule outcomes in declaration order
        coverage: Coverage result (None if not computed)
        symbols: The symbol source the rules saw; Unavailable marks the
            run as degraded

    Returns:
        ValidationReport
    """
    outcomes = tuple(outcomes)
    tally = reduce(lambda acc, o: acc.add(o.verdict.status), outcomes, Tally())

    degraded = symbols is not None and not is_available(symbols)
    report = ValidationReport(
        outcomes=outcomes,
        coverage=coverage,
        tally=tally,
        degraded=degraded,
        degraded_reason=symbols.reason if degraded else None,
    )

    log.info(
        "report_aggregated",
        passed=tally.passed,
        failed=tally.failed,
        warned=tally.warned,
        degraded=degraded,
        exit_code=report.exit_code,
    )
    return report
