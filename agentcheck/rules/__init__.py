"""
Validation rules: models, rule families, engine and ruleset loading.
"""

from agentcheck.rules.checks import (
    DeprecatedPatternRule,
    ExistenceRule,
    FileRule,
    MatchType,
    PresenceRule,
    RequiredPatternRule,
    SignatureRule,
    SourceFilesRule,
    TextPattern,
)
from agentcheck.rules.engine import RuleEngine
from agentcheck.rules.loader import build_rules, list_rulesets, load_ruleset
from agentcheck.rules.models import (
    Rule,
    RuleCategory,
    RuleOutcome,
    Severity,
    Verdict,
    VerdictStatus,
)

__all__ = [
    "DeprecatedPatternRule",
    "ExistenceRule",
    "FileRule",
    "MatchType",
    "PresenceRule",
    "RequiredPatternRule",
    "SignatureRule",
    "SourceFilesRule",
    "TextPattern",
    "RuleEngine",
    "build_rules",
    "list_rulesets",
    "load_ruleset",
    "Rule",
    "RuleCategory",
    "RuleOutcome",
    "Severity",
    "Verdict",
    "VerdictStatus",
]
