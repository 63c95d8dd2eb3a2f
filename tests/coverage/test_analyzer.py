"""
Unit tests for the coverage analyzer.
"""

from agentcheck.corpus.models import DocumentCorpus, DocumentFile
from agentcheck.coverage.analyzer import CoverageReport, NotApplicable, compute_coverage
from agentcheck.symbols.models import UNAVAILABLE, SymbolInfo, SymbolKind, SymbolTable


def corpus_of(text: str) -> DocumentCorpus:
    return DocumentCorpus("agents", (DocumentFile("a.md", text, text),))


def table_of(*names: str, kind: SymbolKind = SymbolKind.CLASS) -> SymbolTable:
    return SymbolTable("sdk", tuple(SymbolInfo(n, kind, "X.kt") for n in names))


class TestComputeCoverage:

    def test_unavailable_is_not_applicable(self):
        report = compute_coverage(corpus_of("CloudX"), UNAVAILABLE)
        assert isinstance(report.percentage, NotApplicable)
        assert not report.applicable
        assert report.format_percentage() == "N/A"

    def test_whole_word_case_sensitive(self):
        symbols = table_of("CloudX", "load", "Banner")
        report = compute_coverage(corpus_of("CloudXAdView and .load() and banner"), symbols)
        assert report.documented_names == ("load",)
        assert report.undocumented_names == ("Banner", "CloudX")

    def test_percentage(self):
        symbols = table_of("A1", "B1", "C1", "D1")
        report = compute_coverage(corpus_of("A1 B1 C1"), symbols)
        assert report.percentage == 75.0
        assert report.total_symbols == 4

    def test_rounds_to_one_decimal(self):
        report = compute_coverage(corpus_of("A1"), table_of("A1", "B1", "C1"))
        assert report.percentage == 33.3
        assert report.format_percentage() == "33.3%"

    def test_exclusions(self):
        symbols = table_of("CloudX", "Companion", "copy")
        report = compute_coverage(corpus_of("CloudX"), symbols, exclude=["Companion", "copy"])
        assert report.total_symbols == 1
        assert report.percentage == 100.0

    def test_kind_filter(self):
        symbols = SymbolTable("sdk", (
            SymbolInfo("CloudX", SymbolKind.CLASS, "CloudX.kt"),
            SymbolInfo("appKey", SymbolKind.FIELD, "Params.kt"),
        ))
        report = compute_coverage(corpus_of("CloudX"), symbols, kinds=[SymbolKind.CLASS])
        assert report.total_symbols == 1
        assert report.undocumented_names == ()

    def test_duplicate_names_counted_once(self):
        symbols = SymbolTable("sdk", (
            SymbolInfo("onAdLoaded", SymbolKind.METHOD, "A.kt", owner="A"),
            SymbolInfo("onAdLoaded", SymbolKind.METHOD, "B.kt", owner="B"),
        ))
        assert compute_coverage(corpus_of("onAdLoaded"), symbols).total_symbols == 1

    def test_empty_table_is_not_applicable(self):
        report = compute_coverage(corpus_of("x"), SymbolTable("sdk"))
        assert not report.applicable

    def test_percentage_in_range(self):
        report = compute_coverage(corpus_of(""), table_of("Only"))
        assert isinstance(report, CoverageReport)
        assert 0 <= report.percentage <= 100
