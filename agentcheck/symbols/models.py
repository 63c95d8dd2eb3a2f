"""
Symbol Models — Public API surface extracted from SDK source.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union


class SymbolKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"
    METHOD = "method"
    FIELD = "field"


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PRIVATE = "private"


@dataclass(frozen=True)
class SymbolInfo:
    """
    A declaration found in the source tree.

    `signature` is the normalized parameter list for methods
    ("placementName: String") and the declared type for fields
    ("Boolean?"). It is None for types. `arity` is (required, maximum)
    argument count for methods, maximum None for varargs.
    """
    name: str
    kind: SymbolKind
    declaring_file: str
    visibility: Visibility = Visibility.PUBLIC
    owner: Optional[str] = None
    signature: Optional[str] = None
    arity: Optional[tuple[int, Optional[int]]] = None
    line: Optional[int] = None

    @property
    def qualified_name(self) -> str:
        if self.owner:
            return f"{self.owner}.{self.name}"
        return self.name

    @property
    def location(self) -> str:
        if self.line is None:
            return self.declaring_file
        return f"{self.declaring_file}:{self.line}"


@dataclass(frozen=True)
class Unavailable:
    """
    Sentinel: there is no symbol table for this run.

    Not an error. Rules that need source downgrade to Warn and the
    report discloses that source-confirmed validation did not run.
    """
    reason: str = "SDK source not found"

    def __repr__(self) -> str:
        return f"Unavailable({self.reason!r})"


UNAVAILABLE = Unavailable()


@dataclass(frozen=True)
class SymbolTable:
    """
    Public symbols keyed by simple name.

    Several declarations can share a simple name (onAdLoaded lives on
    more than one listener); all of them are kept, in discovery order.
    `missing_files` lists required source files the tree lacked when it
    was scanned anyway.
    """
    source_root: str
    symbols: tuple[SymbolInfo, ...] = ()
    missing_files: tuple[str, ...] = ()
    _by_name: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for sym in self.symbols:
            self._by_name.setdefault(sym.name, []).append(sym)

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[SymbolInfo]:
        return iter(self.symbols)

    def __contains__(self, name: str) -> bool:
        return bool(self.lookup(name))

    def names(self) -> list[str]:
        """Distinct simple names, sorted."""
        return sorted(self._by_name)

    def lookup(self, name: str, kind: Optional[SymbolKind] = None) -> list[SymbolInfo]:
        """
        Find declarations by simple ("createBanner") or qualified
        ("CloudX.createBanner") name.
        """
        if "." in name:
            simple = name.rsplit(".", 1)[1]
            found = [s for s in self._by_name.get(simple, []) if s.qualified_name == name]
        else:
            found = list(self._by_name.get(name, []))
        if kind is not None:
            found = [s for s in found if s.kind is kind]
        return found

    def get(self, name: str) -> Optional[SymbolInfo]:
        found = self.lookup(name)
        return found[0] if found else None


SymbolSource = Union[SymbolTable, Unavailable]


def is_available(symbols: SymbolSource) -> bool:
    return isinstance(symbols, SymbolTable)
