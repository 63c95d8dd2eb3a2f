"""
Rule Models — Verdicts and the Rule contract.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from agentcheck.core.location import Location
from agentcheck.corpus.models import DocumentCorpus
from agentcheck.symbols.models import SymbolSource


class VerdictStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"


class RuleCategory(str, Enum):
    """Rule families. Report sections follow this declaration order."""
    PRESENCE = "presence"
    FILE = "file"
    EXISTENCE = "existence"
    SIGNATURE = "signature"
    DEPRECATED_PATTERN = "deprecated_pattern"
    REQUIRED_PATTERN = "required_pattern"

    @property
    def title(self) -> str:
        return {
            RuleCategory.PRESENCE: "Agent Documents",
            RuleCategory.FILE: "Repository Files",
            RuleCategory.EXISTENCE: "SDK Symbols",
            RuleCategory.SIGNATURE: "Signatures",
            RuleCategory.DEPRECATED_PATTERN: "Deprecated Patterns",
            RuleCategory.REQUIRED_PATTERN: "Required Patterns",
        }[self]


class Severity(str, Enum):
    """Worst outcome a rule may report."""
    FAIL = "fail"
    WARN = "warn"


@dataclass(frozen=True)
class Verdict:
    """Three-valued rule outcome."""
    status: VerdictStatus
    reason: str = ""
    locations: tuple[Location, ...] = ()

    @classmethod
    def passed(cls, reason: str = "", locations: tuple[Location, ...] = ()) -> "Verdict":
        return cls(VerdictStatus.PASS, reason, locations)

    @classmethod
    def fail(cls, reason: str, locations: tuple[Location, ...] = ()) -> "Verdict":
        return cls(VerdictStatus.FAIL, reason, locations)

    @classmethod
    def warn(cls, reason: str, locations: tuple[Location, ...] = ()) -> "Verdict":
        return cls(VerdictStatus.WARN, reason, locations)

    @property
    def location(self) -> Optional[Location]:
        return self.locations[0] if self.locations else None

    def capped(self, severity: Severity) -> "Verdict":
        """Downgrade Fail to Warn when the rule is advisory."""
        if severity is Severity.WARN and self.status is VerdictStatus.FAIL:
            return Verdict(VerdictStatus.WARN, self.reason, self.locations)
        return self


class Rule(ABC):
    """
    A single, independent check.

    evaluate() is pure: same corpus and symbols, same verdict. Rules
    never see each other's results.
    """

    category: RuleCategory

    def __init__(
        self,
        id: str,
        description: str,
        severity: Severity = Severity.FAIL,
        remediation: Optional[str] = None,
    ) -> None:
        self.id = id
        self.description = description
        self.severity = severity
        self.remediation = remediation

    @abstractmethod
    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        ...

    def check(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        """evaluate() with this rule's severity cap applied."""
        return self.evaluate(corpus, symbols).capped(self.severity)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


@dataclass(frozen=True)
class RuleOutcome:
    """A rule paired with its verdict."""
    rule_id: str
    category: RuleCategory
    description: str
    verdict: Verdict
    remediation: Optional[str] = None
