"""
SDK symbol extraction.
"""

from agentcheck.symbols.extractor import PartialSource, extract_public_symbols, scan_source
from agentcheck.symbols.models import (
    UNAVAILABLE,
    SymbolInfo,
    SymbolKind,
    SymbolSource,
    SymbolTable,
    Unavailable,
    Visibility,
    is_available,
)

__all__ = [
    "PartialSource",
    "extract_public_symbols",
    "scan_source",
    "UNAVAILABLE",
    "SymbolInfo",
    "SymbolKind",
    "SymbolSource",
    "SymbolTable",
    "Unavailable",
    "Visibility",
    "is_available",
]
