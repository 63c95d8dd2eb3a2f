"""
Rule Checks — The concrete rule families.

- PresenceRule: an expected agent document exists
- FileRule: a repository file exists (and holds a pattern)
- SourceFilesRule: the SDK tree has its required files
- ExistenceRule: an SDK symbol the docs rely on still exists
- SignatureRule: a symbol's parameter/type shape still matches
- DeprecatedPatternRule: banned text does not appear in the docs
- RequiredPatternRule: required text appears at least once

Documentation text checks run on filtered content only.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

from agentcheck.core.location import Location, line_of
from agentcheck.corpus.models import DocumentCorpus
from agentcheck.rules.models import Rule, RuleCategory, Verdict
from agentcheck.symbols.languages import (
    matching_close,
    normalize_signature,
    normalize_type,
    split_top_level,
)
from agentcheck.symbols.models import SymbolInfo, SymbolKind, SymbolSource, is_available


class MatchType(str, Enum):
    """How a pattern is matched against documentation text.

    - KEYWORD: whole-word match
    - PHRASE: exact substring
    - REGEX: regular expression
    """
    KEYWORD = "keyword"
    PHRASE = "phrase"
    REGEX = "regex"


@dataclass(frozen=True)
class TextPattern:
    text: str
    match: MatchType = MatchType.PHRASE
    case_sensitive: bool = True

    def compile(self) -> re.Pattern:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        if self.match is MatchType.REGEX:
            return re.compile(self.text, flags)
        escaped = re.escape(self.text)
        if self.match is MatchType.KEYWORD:
            return re.compile(rf"(?<!\w){escaped}(?!\w)", flags)
        return re.compile(escaped, flags)

    def __str__(self) -> str:
        return self.text


def _symbol_location(sym: SymbolInfo) -> Location:
    return Location(sym.declaring_file, sym.line, sym.qualified_name)


# =============================================================================
# Presence
# =============================================================================

class PresenceRule(Rule):
    """An expected document (relative path or file stem) is in the corpus."""

    category = RuleCategory.PRESENCE

    def __init__(self, id: str, description: str, document: str, **kwargs) -> None:
        super().__init__(id, description, **kwargs)
        self.document = document

    def _matches(self, path: str) -> bool:
        if path == self.document or path.endswith("/" + self.document):
            return True
        stem = path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
        return stem == self.document

    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        for path in corpus.paths:
            if self._matches(path):
                return Verdict.passed(f"Agent file exists: {path}", (Location(path),))
        return Verdict.fail(
            f"Agent file missing: {self.document}",
            (Location(corpus.root),),
        )


# =============================================================================
# Files
# =============================================================================

class FileRule(Rule):
    """
    A repository file exists and, optionally, contains one of a set of
    patterns.

    Relative paths resolve against the working directory (the
    repository root in CI).
    """

    category = RuleCategory.FILE

    def __init__(
        self,
        id: str,
        description: str,
        path: str,
        patterns: Optional[list[TextPattern]] = None,
        **kwargs,
    ) -> None:
        super().__init__(id, description, **kwargs)
        self.path = path
        self.patterns = patterns or []
        self._compiled = [p.compile() for p in self.patterns]

    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        path = Path(self.path)
        if not path.is_file():
            return Verdict.fail(f"{self.path} not found", (Location(self.path),))
        if not self._compiled:
            return Verdict.passed(f"{self.path} exists", (Location(self.path),))

        text = path.read_text(encoding="utf-8", errors="replace")
        for pattern in self._compiled:
            m = pattern.search(text)
            if m is not None:
                return Verdict.passed(
                    f"{self.path} contains {m.group(0)}",
                    (Location(self.path, line_of(text, m.start()), m.group(0)),),
                )
        wanted = " | ".join(str(p) for p in self.patterns)
        return Verdict.fail(f"No occurrence of {wanted} in {self.path}", (Location(self.path),))


class SourceFilesRule(Rule):
    """
    The SDK tree holds every file the ruleset marks as required.

    Built from `settings.source.required_files`. The extractor records
    what was missing; this rule puts it in the report.
    """

    category = RuleCategory.FILE

    def __init__(self, id: str, description: str, files: list[str], **kwargs) -> None:
        super().__init__(id, description, **kwargs)
        self.files = files

    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        if not is_available(symbols):
            return Verdict.warn(f"{symbols.reason}; cannot confirm {', '.join(self.files)}")
        if symbols.missing_files:
            return Verdict.fail(
                f"Not found in SDK source: {', '.join(symbols.missing_files)}",
                tuple(Location(f) for f in symbols.missing_files),
            )
        return Verdict.passed("SDK source files accessible")


# =============================================================================
# Existence
# =============================================================================

class ExistenceRule(Rule):
    """
    A named symbol exists in the SDK source.

    Without source the worst outcome is Warn: absence cannot be proven.
    """

    category = RuleCategory.EXISTENCE

    def __init__(
        self,
        id: str,
        description: str,
        symbol: str,
        kind: Optional[SymbolKind] = None,
        **kwargs,
    ) -> None:
        super().__init__(id, description, **kwargs)
        self.symbol = symbol
        self.kind = kind

    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        if not is_available(symbols):
            return Verdict.warn(f"{symbols.reason}; cannot confirm {self.symbol} exists")

        found = symbols.lookup(self.symbol, self.kind)
        if found:
            return Verdict.passed(
                f"{self.symbol} exists",
                tuple(_symbol_location(s) for s in found),
            )

        if self.kind is not None:
            other = symbols.lookup(self.symbol)
            if other:
                return Verdict.fail(
                    f"{self.symbol} is declared as {other[0].kind.value}, expected {self.kind.value}",
                    tuple(_symbol_location(s) for s in other),
                )

        return Verdict.fail(f"{self.symbol} not found in SDK source; has it been renamed or removed?")


# =============================================================================
# Signature
# =============================================================================

_CODE_FENCE = re.compile(r"```[^\n]*\n(.*?)```", re.S)


def _accepts(arity: Optional[tuple[int, Optional[int]]], count: int) -> bool:
    if arity is None:
        return True
    required, maximum = arity
    return count >= required and (maximum is None or count <= maximum)


class SignatureRule(Rule):
    """
    A symbol's declared shape matches what the docs teach.

    Signature matching is lexical, so it never Fails: a mismatch or an
    inconclusive lookup is a Warn for a human to review.
    """

    category = RuleCategory.SIGNATURE

    def __init__(
        self,
        id: str,
        description: str,
        symbol: str,
        expected: Optional[str] = None,
        check_calls: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(id, description, **kwargs)
        self.symbol = symbol
        self.expected = expected
        self.check_calls = check_calls

    @property
    def simple_name(self) -> str:
        return self.symbol.rsplit(".", 1)[-1]

    def _shape(self, kind: SymbolKind) -> str:
        if kind is SymbolKind.METHOD:
            return normalize_signature(self.expected)
        return normalize_type(self.expected)

    def documented_calls(self, corpus: DocumentCorpus) -> Iterator[tuple[Location, int]]:
        """(location, argument count) for each call inside a code block."""
        call = re.compile(rf"(?<![\w$]){re.escape(self.simple_name)}\s*\(")
        for doc in corpus:
            text = doc.filtered_content
            for block in _CODE_FENCE.finditer(text):
                for m in call.finditer(text, block.start(1), block.end(1)):
                    close = matching_close(text, m.end() - 1)
                    if close == -1:
                        continue
                    count = len(split_top_level(text[m.end():close]))
                    yield Location(doc.path, doc.raw_line(m.start()), text[m.start():close + 1]), count

    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        if not is_available(symbols):
            return Verdict.warn(f"{symbols.reason}; signature of {self.symbol} not confirmed")

        decls = [
            s for s in symbols.lookup(self.symbol)
            if s.kind in (SymbolKind.METHOD, SymbolKind.FIELD)
        ]
        if not decls:
            return Verdict.warn(f"{self.symbol} not found in SDK source; signature not confirmed")

        if self.expected is not None:
            matching = [s for s in decls if s.signature == self._shape(s.kind)]
            if not matching:
                found = "; ".join(f"({s.signature or ''})" for s in decls)
                return Verdict.warn(
                    f"{self.symbol} signature may have changed: expected "
                    f"({self._shape(decls[0].kind)}), found {found}",
                    tuple(_symbol_location(s) for s in decls),
                )
            decls = matching

        methods = [s for s in decls if s.kind is SymbolKind.METHOD]
        if self.check_calls and methods:
            bad = tuple(
                loc for loc, count in self.documented_calls(corpus)
                if not any(_accepts(s.arity, count) for s in methods)
            )
            if bad:
                return Verdict.warn(
                    f"{len(bad)} documented call(s) to {self.simple_name}() pass an "
                    f"argument count the SDK declaration does not accept",
                    bad,
                )

        return Verdict.passed(
            f"{self.symbol} has the documented signature",
            tuple(_symbol_location(s) for s in decls),
        )


# =============================================================================
# Text patterns
# =============================================================================

class DeprecatedPatternRule(Rule):
    """None of the banned patterns appear in filtered documentation."""

    category = RuleCategory.DEPRECATED_PATTERN

    def __init__(
        self,
        id: str,
        description: str,
        patterns: list[TextPattern],
        replacement: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(id, description, **kwargs)
        self.patterns = patterns
        self.replacement = replacement
        self._compiled = [p.compile() for p in patterns]

    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        hits = tuple(loc for pattern in self._compiled for loc in corpus.search(pattern))
        if not hits:
            return Verdict.passed("Not found in agent documentation")

        first = hits[0]
        reason = f"'{first.text}' found at {first}"
        if len(hits) > 1:
            reason += f" (+{len(hits) - 1} more)"
        if self.replacement:
            reason += f"; should be {self.replacement}"
        return Verdict.fail(reason, hits)


class RequiredPatternRule(Rule):
    """At least one of the patterns appears somewhere in the corpus."""

    category = RuleCategory.REQUIRED_PATTERN

    def __init__(self, id: str, description: str, patterns: list[TextPattern], **kwargs) -> None:
        super().__init__(id, description, **kwargs)
        self.patterns = patterns
        self._compiled = [p.compile() for p in patterns]

    def evaluate(self, corpus: DocumentCorpus, symbols: SymbolSource) -> Verdict:
        for pattern in self._compiled:
            loc = corpus.first_match(pattern)
            if loc is not None:
                return Verdict.passed(f"Found at {loc}", (loc,))
        wanted = " | ".join(str(p) for p in self.patterns)
        return Verdict.fail(f"No occurrence of {wanted} in agent documentation")


RULE_TYPES: dict[RuleCategory, type[Rule]] = {
    RuleCategory.PRESENCE: PresenceRule,
    RuleCategory.FILE: FileRule,
    RuleCategory.EXISTENCE: ExistenceRule,
    RuleCategory.SIGNATURE: SignatureRule,
    RuleCategory.DEPRECATED_PATTERN: DeprecatedPatternRule,
    RuleCategory.REQUIRED_PATTERN: RequiredPatternRule,
}
