"""
Rule Engine — Evaluate every rule, collect every verdict.

The engine never stops at the first Fail. Rules run once each in
declaration order; order changes only report layout.
"""

from typing import Iterable

from agentcheck.core.errors import ConfigError
from agentcheck.core.logging import LogChannel, get_logger
from agentcheck.corpus.models import DocumentCorpus
from agentcheck.rules.models import Rule, RuleOutcome, Verdict, VerdictStatus
from agentcheck.symbols.models import SymbolSource

log = get_logger(LogChannel.RULES)


class RuleEngine:
    """
    Runs a fixed list of independent rules.

    A rule that raises is recorded as a Fail for that rule; the
    remaining rules still run.
    """

    def __init__(self, rules: Iterable[Rule]) -> None:
        self._rules = list(rules)
        seen: set[str] = set()
        for rule in self._rules:
            if rule.id in seen:
                raise ConfigError(f"Duplicate rule id: {rule.id}")
            seen.add(rule.id)

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> list[RuleOutcome]:
        """
        Evaluate all rules.

        Args:
            corpus: Filtered documentation
            symbols: SymbolTable or Unavailable

        Returns:
            One RuleOutcome per rule, in declaration order
        """
        outcomes: list[RuleOutcome] = []

        for rule in self._rules:
            try:
                verdict = rule.check(corpus, symbols)
            except Exception as exc:
                log.error(
                    "rule_crashed",
                    rule_id=rule.id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                verdict = Verdict.fail(f"Rule raised {type(exc).__name__}: {exc}")

            log.verbose("rule_evaluated", rule_id=rule.id, status=verdict.status.value)
            outcomes.append(RuleOutcome(
                rule_id=rule.id,
                category=rule.category,
                description=rule.description,
                verdict=verdict,
                remediation=rule.remediation,
            ))

        log.info(
            "rules_evaluated",
            total=len(outcomes),
            failed=sum(1 for o in outcomes if o.verdict.status is VerdictStatus.FAIL),
            warned=sum(1 for o in outcomes if o.verdict.status is VerdictStatus.WARN),
        )
        return outcomes
