"""
Coverage Analyzer — Which public SDK names the docs mention.

A name counts as documented when it appears as a whole-word,
case-sensitive token in filtered documentation. This is a proxy: a
mention does not prove the behavior is explained correctly.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from agentcheck.core.logging import LogChannel, get_logger
from agentcheck.corpus.models import DocumentCorpus
from agentcheck.symbols.models import SymbolKind, SymbolSource, is_available

log = get_logger(LogChannel.COVERAGE)

_TOKEN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class NotApplicable:
    """Coverage was not measured. Never rendered as 0% or 100%."""
    reason: str

    def __str__(self) -> str:
        return "N/A"


@dataclass(frozen=True)
class CoverageReport:
    """
    Result of a coverage run.

    `percentage` is a float in [0, 100] rounded to one decimal, or a
    NotApplicable when there was nothing to measure against.
    """
    percentage: Union[float, NotApplicable]
    total_symbols: int = 0
    documented_names: tuple[str, ...] = ()
    undocumented_names: tuple[str, ...] = ()

    @property
    def applicable(self) -> bool:
        return not isinstance(self.percentage, NotApplicable)

    def format_percentage(self) -> str:
        if not self.applicable:
            return str(self.percentage)
        return f"{self.percentage:g}%"


def documented_tokens(corpus: DocumentCorpus) -> set[str]:
    """Every identifier-like token in the filtered corpus."""
    tokens: set[str] = set()
    for doc in corpus:
        tokens.update(_TOKEN.findall(doc.filtered_content))
    return tokens


def compute_coverage(
    corpus: DocumentCorpus,
    symbols: SymbolSource,
    exclude: Iterable[str] = (),
    kinds: Optional[Iterable[SymbolKind]] = None,
) -> CoverageReport:
    """
    Measure how many public symbol names the docs mention.

    Args:
        corpus: Filtered documentation
        symbols: SymbolTable or Unavailable
        exclude: Boilerplate names to leave out
        kinds: Symbol kinds to count (all if None)

    Returns:
        CoverageReport
    """
    if not is_available(symbols):
        log.info("coverage_not_applicable", reason=symbols.reason)
        return CoverageReport(percentage=NotApplicable(symbols.reason))

    excluded = set(exclude)
    wanted = set(kinds) if kinds is not None else set(SymbolKind)
    names = sorted({
        s.name for s in symbols
        if s.kind in wanted and s.name not in excluded
    })

    if not names:
        log.warning("coverage_no_symbols", source_root=symbols.source_root)
        return CoverageReport(percentage=NotApplicable("no public symbols found in SDK source"))

    tokens = documented_tokens(corpus)
    documented = tuple(n for n in names if n in tokens)
    undocumented = tuple(n for n in names if n not in tokens)
    percentage = round(100 * len(documented) / len(names), 1)

    log.info(
        "coverage_computed",
        total=len(names),
        documented=len(documented),
        percentage=percentage,
    )
    log.debug("coverage_undocumented", names=list(undocumented))

    return CoverageReport(
        percentage=percentage,
        total_symbols=len(names),
        documented_names=documented,
        undocumented_names=undocumented,
    )
