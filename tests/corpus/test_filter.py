"""
Unit tests for ignore-region filtering.
"""

import pytest

from agentcheck.core.errors import InputError, InputErrorKind
from agentcheck.corpus.filter import (
    IgnoreMarkers,
    TokenKind,
    filter_ignore_regions,
    scan_ignore_regions,
    tokenize,
)


START = "VALIDATION:IGNORE:START"
END = "VALIDATION:IGNORE:END"


class TestTokenize:
    """Tests for the marker lexer."""

    def test_plain_text_is_one_token(self):
        tokens = list(tokenize("no markers here"))
        assert [t.kind for t in tokens] == [TokenKind.TEXT]

    def test_markers_become_tokens(self):
        text = f"a\n{START}\nb\n{END}\nc"
        kinds = [t.kind for t in tokenize(text)]
        assert kinds == [
            TokenKind.TEXT, TokenKind.START, TokenKind.TEXT, TokenKind.END, TokenKind.TEXT,
        ]

    def test_token_lines_are_one_based(self):
        text = f"line one\n{START}\n{END}\n"
        start = next(t for t in tokenize(text) if t.kind is TokenKind.START)
        assert start.line == 2

    def test_html_comment_is_part_of_marker(self):
        text = f"<!-- {START} -->x<!-- {END} -->"
        tokens = list(tokenize(text))
        assert tokens[0].kind is TokenKind.START
        assert text[tokens[0].start:tokens[0].end] == f"<!-- {START} -->"


class TestFilterIgnoreRegions:
    """Tests for region removal."""

    def test_region_content_removed(self):
        text = f"keep\n{START}\nCloudXInitParams\n{END}\nalso keep"
        filtered = filter_ignore_regions(text)
        assert "CloudXInitParams" not in filtered
        assert "keep" in filtered
        assert "also keep" in filtered

    def test_markers_removed_with_region(self):
        text = f"<!-- {START} -->\nold\n<!-- {END} -->\nnew"
        filtered = filter_ignore_regions(text)
        assert START not in filtered
        assert END not in filtered
        assert "<!--" not in filtered

    def test_multiple_regions(self):
        text = f"a {START} x {END} b {START} y {END} c"
        assert filter_ignore_regions(text) == "a   b   c"

    def test_no_markers_is_identity(self):
        text = "# Title\n\nCloudX.initialize(params)\n"
        assert filter_ignore_regions(text) == text

    def test_filtering_is_idempotent(self):
        text = f"one\n{START}\nbad\n{END}\ntwo\n"
        once = filter_ignore_regions(text)
        assert filter_ignore_regions(once) == once

    def test_text_around_region_does_not_join_into_marker(self):
        text = "VALIDATION:IGN" + f"{START} x {END}" + "ORE:START\n"
        once = filter_ignore_regions(text)
        assert START not in once
        assert filter_ignore_regions(once) == once

    def test_region_keeps_its_line_breaks(self):
        text = f"one\n{START}\nbad\n{END}\ntwo\n"
        filtered = filter_ignore_regions(text)
        assert filtered.splitlines().index("two") == text.splitlines().index("two")

    def test_custom_markers(self):
        markers = IgnoreMarkers("SKIP-BEGIN", "SKIP-END")
        text = "a SKIP-BEGIN hidden SKIP-END b"
        assert "hidden" not in filter_ignore_regions(text, markers)


class TestMalformedMarkers:
    """Malformed marker pairs are input errors, never silently repaired."""

    def test_unterminated_region(self):
        text = f"intro\n{START}\nnever closed\n"
        with pytest.raises(InputError) as exc_info:
            scan_ignore_regions(text)
        assert exc_info.value.kind is InputErrorKind.UNTERMINATED_REGION
        assert exc_info.value.line == 2

    def test_nested_region(self):
        text = f"{START}\n{START}\n{END}\n{END}\n"
        with pytest.raises(InputError) as exc_info:
            scan_ignore_regions(text)
        assert exc_info.value.kind is InputErrorKind.NESTED_REGION
        assert exc_info.value.line == 2

    def test_end_without_start(self):
        text = f"text\n{END}\n"
        with pytest.raises(InputError) as exc_info:
            scan_ignore_regions(text)
        assert exc_info.value.kind is InputErrorKind.UNMATCHED_END

    def test_region_records_lines(self):
        text = f"a\n{START}\nb\nc\n{END}\n"
        (region,) = scan_ignore_regions(text)
        assert region.start_line == 2
        assert region.end_line == 5
        assert text[region.start:region.end].startswith(START)
        assert text[region.start:region.end].endswith(END)
