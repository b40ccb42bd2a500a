"""Tests for Markdown to BBCode conversion."""

import pytest

from ducky_mod_publisher.core.bbcode import extract_title, markdown_to_bbcode, wrap_lists


class TestMarkdownToBBCode:
    """Test the ordered conversion passes."""

    def test_document(self) -> None:
        """Test a heading, emphasis and a list together."""
        result = markdown_to_bbcode("# Title\n\n**bold** and *italic*\n- item1\n- item2")

        assert result == (
            "[h1]Title[/h1]\n\n"
            "[b]bold[/b] and [i]italic[/i]\n"
            "[list]\n[*]item1\n[*]item2\n[/list]"
        )
        assert result.count("[list]") == 1

    def test_escapes_angle_brackets(self) -> None:
        """Test that raw HTML is neutralized."""
        assert markdown_to_bbcode("<script>x</script>") == "&lt;script&gt;x&lt;/script&gt;"

    def test_fenced_code_block_is_not_rewritten(self) -> None:
        """Test that code contents survive the inline passes."""
        result = markdown_to_bbcode("```python\nx = *a* + __b__\n```")
        assert result == "[code]x = *a* + __b__\n[/code]"

    def test_inline_code_becomes_bold(self) -> None:
        """Test that inline code maps to bold."""
        assert markdown_to_bbcode("Use `*--flag*` now") == "Use [b]*--flag*[/b] now"

    @pytest.mark.parametrize(
        ("markdown", "expected"),
        [
            ("###### Six", "[h6]Six[/h6]"),
            ("### Three", "[h3]Three[/h3]"),
            ("## Two", "[h2]Two[/h2]"),
            ("#NoSpace", "#NoSpace"),
        ],
    )
    def test_headings(self, markdown: str, expected: str) -> None:
        """Test heading levels."""
        assert markdown_to_bbcode(markdown) == expected

    @pytest.mark.parametrize(
        ("markdown", "expected"),
        [
            ("***both***", "[b][i]both[/i][/b]"),
            ("___both___", "[b][i]both[/i][/b]"),
            ("**bold**", "[b]bold[/b]"),
            ("__bold__", "[b]bold[/b]"),
            ("*it*", "[i]it[/i]"),
            ("_it_", "[i]it[/i]"),
            ("~~old~~", "[s]old[/s]"),
            ("snake_case_name", "snake_case_name"),
            ("2 * 3 * 4", "2 * 3 * 4"),
        ],
    )
    def test_emphasis(self, markdown: str, expected: str) -> None:
        """Test emphasis markers and text that only looks like emphasis."""
        assert markdown_to_bbcode(markdown) == expected

    def test_horizontal_rules(self) -> None:
        """Test that rule lines become [hr]."""
        assert markdown_to_bbcode("a\n---\nb\n*****") == "a\n[hr]\nb\n[hr]"

    def test_images_and_links(self) -> None:
        """Test that images drop alt text and links keep their label."""
        result = markdown_to_bbcode("![logo](https://x.com/a.png) see [site](https://x.com)")
        assert result == "[img]https://x.com/a.png[/img] see [url=https://x.com]site[/url]"

    def test_ordered_list(self) -> None:
        """Test that numbered items are list items."""
        assert markdown_to_bbcode("1. one\n2. two") == "[list]\n[*]one\n[*]two\n[/list]"

    def test_separate_runs_get_separate_lists(self) -> None:
        """Test that lists split by a paragraph are wrapped separately."""
        result = markdown_to_bbcode("- a\n\ntext\n\n- b")
        assert result == "[list]\n[*]a\n[/list]\n\ntext\n\n[list]\n[*]b\n[/list]"

    def test_blockquotes_stay_separate(self) -> None:
        """Test that each quote line gets its own tag."""
        assert markdown_to_bbcode("> one\n> two") == "[quote]one[/quote]\n[quote]two[/quote]"

    def test_collapses_blank_lines(self) -> None:
        """Test paragraph normalization."""
        assert markdown_to_bbcode("a\n\n\n\nb") == "a\n\nb"

    def test_converting_output_again_is_stable(self) -> None:
        """Test that already-converted lists and emphasis are not wrapped twice."""
        once = markdown_to_bbcode("# Title\n\n**bold** and *italic*\n- item1\n- item2\n\n```\ncode\n```")
        assert markdown_to_bbcode(once) == once

    @pytest.mark.parametrize(
        "markdown",
        ["**unclosed", "`tick", "[link](", "```\nno end", "", "\x00\x00", "![](", "> ", "#"],
    )
    def test_malformed_input_never_raises(self, markdown: str) -> None:
        """Test that malformed Markdown passes through."""
        assert isinstance(markdown_to_bbcode(markdown), str)


class TestWrapLists:
    """Test list wrapping on its own."""

    def test_existing_list_block_is_kept(self) -> None:
        """Test that items already inside [list] are not rewrapped."""
        text = "[list]\n[*]a\n[*]b\n[/list]"
        assert wrap_lists(text) == text


class TestExtractTitle:
    """Test H1 title extraction."""

    def test_first_h1(self) -> None:
        """Test that the first H1 is returned, even after other text."""
        assert extract_title("intro\n# Real Title\n# Second\n## Sub") == "Real Title"

    def test_default_without_h1(self) -> None:
        """Test the fallback title."""
        assert extract_title("## Only a subheading", "Fallback") == "Fallback"
        assert extract_title("") == ""
