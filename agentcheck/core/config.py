"""
Run Configuration — Resolve where to look and how to behave.

Precedence, highest first:
1. Command-line flags
2. Environment (SDK_DIR)
3. Ruleset `settings:` block
4. Built-in defaults (in the ruleset schema)

BRANCH is the installer's variable and is not read here.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from agentcheck.corpus.filter import IgnoreMarkers
from agentcheck.rules.schema import RulesetSpec
from agentcheck.symbols.extractor import PartialSource
from agentcheck.symbols.models import SymbolKind

SDK_DIR_ENV = "SDK_DIR"


@dataclass(frozen=True)
class RunConfig:
    """Everything one validation run needs, fully resolved."""
    docs_dir: Path
    file_pattern: str
    sdk_dir: Optional[Path]
    markers: IgnoreMarkers
    languages: tuple[str, ...] = ("kotlin", "java")
    required_files: tuple[str, ...] = ()
    on_partial: PartialSource = PartialSource.STRICT
    coverage_exclude: frozenset[str] = field(default_factory=frozenset)
    coverage_kinds: frozenset[SymbolKind] = field(default_factory=lambda: frozenset(SymbolKind))


def resolve_config(
    ruleset: RulesetSpec,
    docs_dir: Optional[str] = None,
    file_pattern: Optional[str] = None,
    sdk_dir: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """
    Merge CLI overrides, environment and ruleset settings.

    Args:
        ruleset: Loaded ruleset (its settings are the base layer)
        docs_dir: --docs override
        file_pattern: --pattern override
        sdk_dir: --sdk-dir override
        environ: Environment mapping (os.environ if None)

    Returns:
        RunConfig
    """
    env = os.environ if environ is None else environ
    settings = ruleset.settings

    sdk = sdk_dir or env.get(SDK_DIR_ENV) or settings.sdk_dir

    return RunConfig(
        docs_dir=Path(docs_dir or settings.docs_dir),
        file_pattern=file_pattern or settings.file_pattern,
        sdk_dir=Path(sdk) if sdk else None,
        markers=IgnoreMarkers(settings.markers.start, settings.markers.end),
        languages=tuple(settings.source.languages),
        required_files=tuple(settings.source.required_files),
        on_partial=settings.source.on_partial,
        coverage_exclude=frozenset(settings.coverage.exclude),
        coverage_kinds=frozenset(settings.coverage.kinds),
    )
