"""Tests for list tokenizing."""

from ducky_mod_publisher.core.tokenizer import parse_list


class TestParseList:
    """Test comma-delimited, quote-aware list parsing."""

    def test_trims_tokens(self) -> None:
        """Test that whitespace around tokens is removed."""
        assert parse_list("tag1, tag2 , tag3") == ["tag1", "tag2", "tag3"]

    def test_collapses_empty_tokens(self) -> None:
        """Test that consecutive commas produce no empty tokens."""
        assert parse_list("tag1,,tag2") == ["tag1", "tag2"]
        assert parse_list(" , tag1 ,  , ") == ["tag1"]

    def test_quoted_commas_are_kept(self) -> None:
        """Test that commas inside quotes do not split."""
        assert parse_list('"a, b",c') == ["a, b", "c"]

    def test_unclosed_quote_is_tolerated(self) -> None:
        """Test that an unclosed quote flushes the remaining buffer."""
        assert parse_list('"a,b') == ["a,b"]

    def test_backslash_quote_is_literal(self) -> None:
        """Test that a backslash-quote does not toggle quoting."""
        assert parse_list('say \\"hi\\", bye') == ['say \\"hi\\"', "bye"]

    def test_absent_values(self) -> None:
        """Test that empty or missing input yields no list."""
        assert parse_list(None) is None
        assert parse_list("") is None
        assert parse_list(" , ,") is None
