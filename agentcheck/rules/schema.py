"""
Ruleset Schema — Pydantic models for ruleset YAML files.

A ruleset contains:
- Metadata (name, version, description)
- Settings (where the docs and SDK source live, markers, coverage)
- Rules (one entry per independent check)
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from agentcheck.rules.checks import MatchType
from agentcheck.rules.models import RuleCategory, Severity
from agentcheck.symbols.extractor import PartialSource
from agentcheck.symbols.languages import LANGUAGES
from agentcheck.symbols.models import SymbolKind

DEFAULT_COVERAGE_EXCLUDE = ["Companion", "Builder", "hashCode", "equals", "toString", "copy"]

# Id of the rule built from settings.source.required_files
SOURCE_FILES_RULE_ID = "sdk_source_files"


# ============================================================================
# Settings
# ============================================================================

class MarkerSettings(BaseModel):
    start: str = Field("VALIDATION:IGNORE:START", description="Ignore-region start marker")
    end: str = Field("VALIDATION:IGNORE:END", description="Ignore-region end marker")

    @model_validator(mode="after")
    def _distinct(self) -> "MarkerSettings":
        if not self.start or not self.end or self.start == self.end:
            raise ValueError("markers.start and markers.end must be distinct, non-empty strings")
        if any(ch.isspace() for ch in self.start + self.end):
            raise ValueError("markers must not contain whitespace")
        return self


class SourceSettings(BaseModel):
    languages: list[str] = Field(default_factory=lambda: ["kotlin", "java"])
    required_files: list[str] = Field(
        default_factory=list,
        description="Files a complete SDK tree contains (relative to sdk_dir)",
    )
    on_partial: PartialSource = Field(
        PartialSource.STRICT,
        description="strict: scan what exists; degrade: treat the tree as unavailable",
    )

    @field_validator("languages")
    @classmethod
    def _known_languages(cls, value: list[str]) -> list[str]:
        unknown = [name for name in value if name.lower() not in LANGUAGES]
        if unknown:
            raise ValueError(
                f"unknown source language(s) {', '.join(unknown)} (known: {', '.join(sorted(LANGUAGES))})"
            )
        return value


class CoverageSettings(BaseModel):
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_COVERAGE_EXCLUDE),
        description="Boilerplate names left out of coverage",
    )
    kinds: list[SymbolKind] = Field(default_factory=lambda: list(SymbolKind))


class RulesetSettings(BaseModel):
    docs_dir: str = ".claude/agents"
    file_pattern: str = "*.md"
    sdk_dir: Optional[str] = None
    markers: MarkerSettings = Field(default_factory=MarkerSettings)
    source: SourceSettings = Field(default_factory=SourceSettings)
    coverage: CoverageSettings = Field(default_factory=CoverageSettings)


# ============================================================================
# Rules
# ============================================================================

class PatternSpec(BaseModel):
    pattern: str
    match: MatchType = MatchType.PHRASE
    case_sensitive: bool = True

    @model_validator(mode="after")
    def _compiles(self) -> "PatternSpec":
        if self.match is MatchType.REGEX:
            try:
                re.compile(self.pattern)
            except re.error as exc:
                raise ValueError(f"invalid regex {self.pattern!r}: {exc}") from exc
        return self


_REQUIRED_FIELDS = {
    RuleCategory.PRESENCE: ("document",),
    RuleCategory.FILE: ("path",),
    RuleCategory.EXISTENCE: ("symbol",),
    RuleCategory.SIGNATURE: ("symbol",),
    RuleCategory.DEPRECATED_PATTERN: ("patterns",),
    RuleCategory.REQUIRED_PATTERN: ("patterns",),
}


class RuleSpec(BaseModel):
    """One rule entry. Which fields apply depends on `type`."""

    id: str
    type: RuleCategory
    description: str = ""
    severity: Severity = Severity.FAIL
    remediation: Optional[str] = None
    enabled: bool = True

    # presence
    document: Optional[str] = None
    # file (relative to the working directory; `patterns` optional)
    path: Optional[str] = None
    # existence / signature
    symbol: Optional[str] = None
    kind: Optional[SymbolKind] = None
    expected: Optional[str] = None
    check_calls: bool = True
    # text patterns (`match` is the default for plain-string patterns)
    match: MatchType = MatchType.PHRASE
    patterns: list[PatternSpec] = Field(default_factory=list)
    replacement: Optional[str] = None

    @field_validator("patterns", mode="before")
    @classmethod
    def _coerce_patterns(cls, value, info):
        if not isinstance(value, list):
            return value
        default_match = info.data.get("match", MatchType.PHRASE)
        coerced = []
        for item in value:
            if isinstance(item, str):
                item = {"pattern": item}
            if isinstance(item, dict):
                item = {"match": default_match, **item}
            coerced.append(item)
        return coerced

    @model_validator(mode="after")
    def _has_required_fields(self) -> "RuleSpec":
        for name in _REQUIRED_FIELDS[self.type]:
            if not getattr(self, name):
                raise ValueError(f"rule '{self.id}' ({self.type.value}) requires '{name}'")
        return self


class RulesetSpec(BaseModel):
    name: str
    version: str = "1.0"
    description: str = ""
    settings: RulesetSettings = Field(default_factory=RulesetSettings)
    rules: list[RuleSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> "RulesetSpec":
        seen: set[str] = set()
        for rule in self.rules:
            if rule.id in seen:
                raise ValueError(f"duplicate rule id '{rule.id}'")
            if rule.id == SOURCE_FILES_RULE_ID:
                raise ValueError(f"rule id '{rule.id}' is reserved")
            seen.add(rule.id)
        return self

