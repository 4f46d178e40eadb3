"""Unit tests for code-fence extraction and highlighting."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from rich.syntax import Syntax
from rich.text import Text

from ollamachat.ui.formatting import (
    DARK_SYNTAX_THEME,
    LIGHT_SYNTAX_THEME,
    extract_language,
    has_leading_fence,
    highlight_code,
    normalize_language,
    syntax_theme,
    truncate,
)


class TestExtractLanguage:
    """Tests for extract_language."""

    def test_fenced_python(self):
        """Test the canonical fenced Python example."""
        assert extract_language("```python\nprint(1)\n```") == ("print(1)", "python")

    def test_plain_text_passes_through(self):
        """Test that unfenced text is returned as plaintext."""
        assert extract_language("plain text") == ("plain text", "plaintext")

    def test_empty_tag_is_plaintext(self):
        """Test that a fence without a tag yields plaintext."""
        assert extract_language("```\nx = 1\n```") == ("x = 1", "plaintext")

    def test_tag_is_lowercased_and_trimmed(self):
        """Test that the language tag is trimmed and lower-cased."""
        assert extract_language("```  Python  \na\nb\n```") == ("a\nb", "python")

    def test_trailing_newline_after_fence(self):
        """Test that whitespace after the closing fence is ignored."""
        assert extract_language("```go\nfmt.Println()\n```\n\n") == ("fmt.Println()", "go")

    def test_last_line_dropped_without_closing_fence(self):
        """Test that the last line is dropped even if it is not a fence."""
        assert extract_language("```js\nlet a\nlet b") == ("let a", "js")

    def test_single_line_fence(self):
        """Test a fence line with no body."""
        assert extract_language("```rust") == ("", "rust")

    def test_fence_not_at_start(self):
        """Test that a fence later in the text is not extracted."""
        text = "Here you go:\n```python\nprint(1)\n```"
        assert extract_language(text) == (text, "plaintext")

    @given(st.text().filter(lambda s: not s.startswith("```")))
    def test_unfenced_text_is_identity(self, text: str):
        """Property test: text without a leading fence is returned unchanged."""
        assert extract_language(text) == (text, "plaintext")

    @given(
        st.sampled_from(["python", "Rust", "ts", "", "C++"]),
        st.lists(st.text(alphabet=st.characters(blacklist_characters="\n\r`"), max_size=20), max_size=5),
    )
    def test_fenced_body_roundtrip(self, tag: str, body_lines: list[str]):
        """Property test: the body between fences is recovered exactly."""
        body = "\n".join(body_lines)
        text = f"```{tag}\n{body}\n```"
        code, language = extract_language(text)

        assert code == body
        assert language == (tag.lower() or "plaintext")


class TestNormalizeLanguage:
    """Tests for normalize_language."""

    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("ts", "typescript"),
            ("sh", "bash"),
            ("unknownlang", "unknownlang"),
            ("py", "python"),
            ("js", "javascript"),
            ("rb", "ruby"),
            ("c++", "cpp"),
            ("cs", "csharp"),
            ("rs", "rust"),
            ("shell", "bash"),
            ("swift", "swift"),
        ],
    )
    def test_aliases(self, tag: str, expected: str):
        """Test the alias table entries."""
        assert normalize_language(tag) == expected

    def test_case_insensitive(self):
        """Test that tags are matched case-insensitively."""
        assert normalize_language("TS") == "typescript"
        assert normalize_language(" Kotlin ") == "kotlin"

    @given(st.text(max_size=20))
    def test_idempotent(self, tag: str):
        """Property test: normalizing twice equals normalizing once."""
        once = normalize_language(tag)
        assert normalize_language(once) == once


class TestHighlightCode:
    """Tests for highlight_code and theme selection."""

    def test_returns_syntax_for_known_language(self):
        """Test that a known language gets a Syntax renderable."""
        renderable = highlight_code("print(1)", "py", DARK_SYNTAX_THEME)
        assert isinstance(renderable, Syntax)

    def test_plaintext_uses_text_lexer(self):
        """Test that plaintext still renders through Syntax."""
        renderable = highlight_code("just words", "plaintext")
        assert isinstance(renderable, Syntax)

    def test_unknown_theme_falls_back_to_text(self):
        """Test that an unknown theme never raises."""
        renderable = highlight_code("x = 1", "python", "no-such-style")
        assert isinstance(renderable, (Syntax, Text))

    def test_syntax_theme_follows_mode(self):
        """Test the dark and light syntax theme pair."""
        assert syntax_theme(True) == DARK_SYNTAX_THEME
        assert syntax_theme(False) == LIGHT_SYNTAX_THEME


class TestHelpers:
    """Tests for small text helpers."""

    def test_has_leading_fence(self):
        """Test fence detection with and without leading newlines."""
        assert has_leading_fence("```py\nx\n```")
        assert has_leading_fence("\n```py\nx\n```")
        assert not has_leading_fence("text ```py")

    def test_truncate(self):
        """Test truncation with an ellipsis."""
        assert truncate("short", 10) == "short"
        assert truncate("a" * 20, 10) == "a" * 7 + "..."

    @given(st.text(), st.integers(min_value=3, max_value=200))
    def test_truncate_respects_limit(self, text: str, limit: int):
        """Property test: truncated text never exceeds the limit."""
        assert len(truncate(text, limit)) <= limit
