"""
Symbol Extractor — Build the public API table from an SDK source tree.

The tree is optional. When it is absent the extractor returns the
Unavailable sentinel and validation continues in degraded mode.
A table is never partially built: any read failure also yields
Unavailable.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from agentcheck.core.location import line_of
from agentcheck.core.logging import LogChannel, get_logger
from agentcheck.symbols.languages import LanguageProfile, get_language, strip_noise
from agentcheck.symbols.models import (
    UNAVAILABLE,
    SymbolInfo,
    SymbolKind,
    SymbolSource,
    SymbolTable,
    Unavailable,
    Visibility,
)

log = get_logger(LogChannel.EXTRACT)


class PartialSource(str, Enum):
    """What to do when some required source files are missing."""
    STRICT = "strict"      # Build the table from what exists; missing symbols Fail
    DEGRADE = "degrade"    # Treat the whole tree as unavailable


@dataclass
class _Scope:
    name: Optional[str]
    is_type: bool
    public: bool
    kind: Optional[SymbolKind] = None
    companion: bool = False


_BLOCK = _Scope(name=None, is_type=False, public=False)


def scan_source(source: str, path: str, profile: LanguageProfile) -> list[SymbolInfo]:
    """
    Extract public declarations from one file.

    Declarations inside function bodies, initializer blocks and
    anonymous objects are locals and are skipped. A declaration is
    public only if it and every enclosing type are public.
    """
    text = strip_noise(source)
    stack: list[_Scope] = []
    pending: Optional[_Scope] = None
    symbols: list[SymbolInfo] = []
    pos = 0

    while True:
        m = profile.scanner.search(text, pos)
        if m is None:
            break

        if m.group("open"):
            stack.append(pending or _BLOCK)
            pending = None
            pos = m.end()
            continue

        if m.group("close"):
            if stack:
                stack.pop()
            pending = None
            pos = m.end()
            continue

        pending = None
        if not profile.at_statement_start(text, m.start()):
            pos = m.end()
            continue

        enclosing = stack[-1] if stack else None
        decl = profile.parse(text, m, enclosing.kind if enclosing else None)
        if decl is None:
            pos = m.end()
            continue
        pos = max(decl.resume, m.end())

        in_api = all(scope.is_type for scope in stack)
        public = (
            in_api
            and all(scope.public for scope in stack)
            and decl.visibility is Visibility.PUBLIC
        )
        if decl.opens_type:
            pending = _Scope(decl.name, True, public, decl.kind, decl.companion)

        if not in_api:
            continue

        owner = next((s.name for s in reversed(stack) if not s.companion), None)
        line = line_of(text, decl.offset)

        if not public:
            log.debug("declaration_skipped", name=decl.name, visibility=decl.visibility.value, path=path)
            continue

        if decl.record:
            symbols.append(SymbolInfo(
                name=decl.name,
                kind=decl.kind,
                declaring_file=path,
                visibility=Visibility.PUBLIC,
                owner=owner,
                signature=decl.signature,
                arity=decl.arity,
                line=line,
            ))

        for member in decl.members:
            if member.visibility is not Visibility.PUBLIC:
                continue
            symbols.append(SymbolInfo(
                name=member.name,
                kind=SymbolKind.FIELD,
                declaring_file=path,
                visibility=Visibility.PUBLIC,
                owner=decl.name,
                signature=member.type,
                line=line,
            ))

    return symbols


def _source_files(root: Path, profiles: list[LanguageProfile]) -> list[tuple[Path, LanguageProfile]]:
    by_extension = {ext: profile for profile in profiles for ext in profile.extensions}
    found = [
        (p, by_extension[p.suffix])
        for p in root.rglob("*")
        if p.is_file() and p.suffix in by_extension
    ]
    return sorted(found, key=lambda item: item[0].relative_to(root).as_posix())


def extract_public_symbols(
    source_dir: Union[Path, str, None] = None,
    languages: Iterable[str] = ("kotlin", "java"),
    required_files: Iterable[str] = (),
    on_partial: PartialSource = PartialSource.STRICT,
) -> SymbolSource:
    """
    Scan an SDK source tree for public symbols.

    Args:
        source_dir: Root of the declaration files (None = not supplied)
        languages: Language profiles to scan with
        required_files: Paths (relative to source_dir) a complete tree has
        on_partial: Policy when a required file is missing

    Returns:
        SymbolTable, or Unavailable when there is nothing to scan
    """
    if source_dir is None:
        log.warning("sdk_source_not_configured")
        return UNAVAILABLE

    root = Path(source_dir)
    if not root.is_dir():
        log.warning("sdk_source_not_found", path=str(root))
        return UNAVAILABLE

    profiles = [get_language(name) for name in languages]

    missing = sorted(f for f in required_files if not (root / f).is_file())
    if missing:
        log.warning("sdk_source_incomplete", missing=missing, policy=on_partial.value)
        if on_partial is PartialSource.DEGRADE:
            return Unavailable(f"SDK source incomplete (missing: {', '.join(missing)})")

    symbols: list[SymbolInfo] = []
    try:
        for path, profile in _source_files(root, profiles):
            rel = path.relative_to(root).as_posix()
            found = scan_source(path.read_text(encoding="utf-8", errors="replace"), rel, profile)
            log.verbose("source_scanned", path=rel, language=profile.name, symbols=len(found))
            symbols.extend(found)
    except OSError as exc:
        log.error("sdk_source_unreadable", path=str(root), error=str(exc))
        return Unavailable(f"SDK source unreadable ({exc})")

    table = SymbolTable(source_root=str(root), symbols=tuple(symbols), missing_files=tuple(missing))
    log.info("symbols_extracted", path=str(root), symbols=len(table), names=len(table.names()))
    return table
