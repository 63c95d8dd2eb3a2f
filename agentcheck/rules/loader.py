"""
Ruleset Loader — Load rulesets from YAML and build Rule objects.

A ruleset is addressed either by name (a file in rulesets/) or by path.
"""

from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from agentcheck.core.errors import ConfigError
from agentcheck.core.logging import LogChannel, get_logger
from agentcheck.rules.checks import RULE_TYPES, SourceFilesRule, TextPattern
from agentcheck.rules.models import Rule, RuleCategory
from agentcheck.rules.schema import SOURCE_FILES_RULE_ID, RuleSpec, RulesetSpec

log = get_logger(LogChannel.RULES)

# Packaged rulesets
RULESETS_DIR = Path(__file__).parent / "rulesets"

DEFAULT_RULESET = "cloudx-android"


def resolve_ruleset_path(name_or_path: Union[str, Path]) -> Path:
    """
    Find a ruleset file.

    An existing path wins; otherwise the name is looked up in the
    packaged rulesets directory.

    Raises:
        ConfigError: If no such ruleset exists
    """
    path = Path(name_or_path)
    if path.is_file():
        return path

    packaged = RULESETS_DIR / f"{name_or_path}.yaml"
    if packaged.is_file():
        return packaged

    raise ConfigError(
        f"Ruleset not found: {name_or_path} (packaged: {', '.join(list_rulesets()) or 'none'})"
    )


def load_ruleset(name_or_path: Union[str, Path] = DEFAULT_RULESET) -> RulesetSpec:
    """
    Load and validate a ruleset.

    Args:
        name_or_path: Packaged ruleset name or path to a YAML file

    Returns:
        Validated RulesetSpec

    Raises:
        ConfigError: If the file is missing, not YAML, or fails validation
    """
    path = resolve_ruleset_path(name_or_path)

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Ruleset {path} is not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Ruleset {path} must be a mapping")

    try:
        ruleset = RulesetSpec.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Ruleset {path} is invalid:\n{exc}") from exc

    log.info("ruleset_loaded", name=ruleset.name, path=str(path), rules=len(ruleset.rules))
    return ruleset


def _patterns(spec: RuleSpec) -> list[TextPattern]:
    return [TextPattern(p.pattern, p.match, p.case_sensitive) for p in spec.patterns]


def build_rule(spec: RuleSpec) -> Rule:
    """Instantiate the Rule described by a spec entry."""
    common = dict(
        id=spec.id,
        description=spec.description or spec.id,
        severity=spec.severity,
        remediation=spec.remediation,
    )
    rule_type = RULE_TYPES[spec.type]

    if spec.type is RuleCategory.PRESENCE:
        return rule_type(document=spec.document, **common)
    if spec.type is RuleCategory.FILE:
        return rule_type(path=spec.path, patterns=_patterns(spec), **common)
    if spec.type is RuleCategory.EXISTENCE:
        return rule_type(symbol=spec.symbol, kind=spec.kind, **common)
    if spec.type is RuleCategory.SIGNATURE:
        return rule_type(
            symbol=spec.symbol,
            expected=spec.expected,
            check_calls=spec.check_calls,
            **common,
        )

    patterns = _patterns(spec)
    if spec.type is RuleCategory.DEPRECATED_PATTERN:
        return rule_type(patterns=patterns, replacement=spec.replacement, **common)
    return rule_type(patterns=patterns, **common)


def build_rules(ruleset: RulesetSpec) -> list[Rule]:
    """
    Build the enabled rules of a ruleset, in declaration order.

    When the ruleset names required SDK source files, a SourceFilesRule
    reporting on them comes first.
    """
    rules = [build_rule(spec) for spec in ruleset.rules if spec.enabled]
    skipped = len(ruleset.rules) - len(rules)
    if skipped:
        log.verbose("rules_disabled", count=skipped)

    required = ruleset.settings.source.required_files
    if required:
        rules.insert(0, SourceFilesRule(
            id=SOURCE_FILES_RULE_ID,
            description=f"SDK source contains {', '.join(required)}",
            files=list(required),
            remediation="SDK source may be incomplete; point SDK_DIR at the full source tree",
        ))
    return rules


def list_rulesets() -> list[str]:
    """List packaged ruleset names."""
    return sorted(p.stem for p in RULESETS_DIR.glob("*.yaml"))
